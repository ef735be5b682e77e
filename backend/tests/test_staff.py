"""
Staff provisioning tests.

Verifies:
- Unauthenticated requests return 401
- Non-admin sessions are denied (403) and no account is created
- Admins create staff with bcrypt-hashed passwords
- Bad input returns 400 and is audited
"""

import pytest

from cafeteria.models import SecurityEvent, User
from cafeteria.services.auth_service import verify_password
from cafeteria.services.staff_service import StaffAuthorizationError, provision_staff


NEW_STAFF = {
    "name": "Meena Cook",
    "email": "Meena@Cafeteria.local",
    "password": "Kitchen2024",
}


def _events(db_session, event_type):
    return db_session.query(SecurityEvent).filter_by(event_type=event_type).all()


class TestUnauthenticatedAccess:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/admin/staff"),
            ("GET", "/api/admin/staff"),
            ("GET", "/api/orders"),
            ("GET", "/api/wallet"),
            ("GET", "/api/inventory"),
            ("GET", "/api/waste"),
            ("POST", "/api/recommendations/user"),
            ("GET", "/api/recommendations/inventory"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_garbage_token(self, client, db_session):
        resp = client.post("/api/admin/staff", json=NEW_STAFF, headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid or expired token"


class TestNonAdminDenied:

    @pytest.mark.parametrize("headers_fixture", ["student_headers", "staff_headers"])
    def test_denied_and_nothing_created(self, request, client, db_session, headers_fixture):
        headers = request.getfixturevalue(headers_fixture)
        users_before = db_session.query(User).count()

        resp = client.post("/api/admin/staff", json=NEW_STAFF, headers=headers)

        assert resp.status_code == 403
        assert resp.get_json()["error"] == "Only administrators can add cafeteria staff"
        assert db_session.query(User).count() == users_before
        assert db_session.query(User).filter_by(email="meena@cafeteria.local").first() is None
        assert len(_events(db_session, "PERMISSION_DENIED")) == 1

    def test_service_rejects_before_validation(self, db_session, kitchen_staff):
        with pytest.raises(StaffAuthorizationError):
            provision_staff(kitchen_staff, None, None, None)


class TestAdminProvisioning:

    def test_creates_staff(self, client, db_session, admin_headers):
        resp = client.post("/api/admin/staff", json=NEW_STAFF, headers=admin_headers)

        assert resp.status_code == 201
        body = resp.get_json()["user"]
        assert body["email"] == "meena@cafeteria.local"
        assert body["role"] == "cafeteria_staff"
        assert set(body) == {"id", "name", "email", "role"}

        user = db_session.get(User, body["id"])
        assert user.password_hash != NEW_STAFF["password"]
        assert verify_password(NEW_STAFF["password"], user.password_hash)
        assert len(_events(db_session, "STAFF_CREATED")) == 1

    def test_explicit_role(self, client, db_session, admin_headers):
        resp = client.post("/api/admin/staff", json={**NEW_STAFF, "role": "admin"}, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["user"]["role"] == "admin"

    @pytest.mark.parametrize(
        "override,message",
        [
            ({"name": ""}, "Name, email, and password are required"),
            ({"password": None}, "Name, email, and password are required"),
            ({"role": "student"}, "Invalid role"),
            ({"email": "not-an-email"}, "Invalid email address"),
            ({"password": "short1"}, "at least 8 characters"),
            ({"password": "allletters"}, "at least one digit"),
        ],
    )
    def test_invalid_input(self, client, db_session, admin_headers, override, message):
        resp = client.post("/api/admin/staff", json={**NEW_STAFF, **override}, headers=admin_headers)
        assert resp.status_code == 400
        assert message in resp.get_json()["error"]

    def test_duplicate_email(self, client, db_session, admin_headers):
        assert client.post("/api/admin/staff", json=NEW_STAFF, headers=admin_headers).status_code == 201

        resp = client.post("/api/admin/staff", json=NEW_STAFF, headers=admin_headers)

        assert resp.status_code == 400
        assert "already exists" in resp.get_json()["error"]
        assert len(_events(db_session, "STAFF_CREATE_FAILED")) == 1

    def test_list_staff(self, client, db_session, admin_headers, kitchen_staff, student):
        resp = client.get("/api/admin/staff", headers=admin_headers)
        assert resp.status_code == 200
        emails = {u["email"] for u in resp.get_json()["staff"]}
        assert emails == {"admin@cafeteria.local", "kitchen@cafeteria.local"}
