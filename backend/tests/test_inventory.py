"""
Inventory and waste tracking tests.

Verifies:
- only operators reach the routes
- payload validation (allowlist, types, non-negative quantities)
- duplicate names conflict
- waste totals
"""

import pytest

from cafeteria.models import InventoryItem


RICE = {"name": "Rice", "category": "Grains", "quantity": 25, "unit": "kg", "threshold": 5, "cost_paise": 6000}


class TestInventoryRoutes:

    def test_students_denied(self, client, student_headers):
        assert client.get("/api/inventory", headers=student_headers).status_code == 403
        assert client.post("/api/inventory", json=RICE, headers=student_headers).status_code == 403

    def test_create_and_list(self, client, staff_headers):
        resp = client.post("/api/inventory", json=RICE, headers=staff_headers)
        assert resp.status_code == 201
        item = resp.get_json()["item"]
        assert item["quantity"] == 25.0
        assert item["is_low"] is False

        resp = client.get("/api/inventory", headers=staff_headers)
        assert [i["name"] for i in resp.get_json()["items"]] == ["Rice"]

    def test_duplicate_name_conflicts(self, client, staff_headers):
        assert client.post("/api/inventory", json=RICE, headers=staff_headers).status_code == 201
        resp = client.post("/api/inventory", json=RICE, headers=staff_headers)
        assert resp.status_code == 409

    @pytest.mark.parametrize(
        "override,message",
        [
            ({"quantity": -1}, "quantity must be >= 0"),
            ({"threshold": "lots"}, "threshold must be a number"),
            ({"cost_paise": 12.5}, "cost_paise must be an integer"),
            ({"is_low": True}, "Field not allowed: is_low"),
        ],
    )
    def test_validation(self, client, staff_headers, override, message):
        resp = client.post("/api/inventory", json={**RICE, **override}, headers=staff_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == message

    def test_missing_fields(self, client, staff_headers):
        resp = client.post("/api/inventory", json={"name": "Rice"}, headers=staff_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Missing required fields: quantity, threshold, unit"

    def test_restock_and_low_stock(self, client, db_session, staff_headers):
        item_id = client.post("/api/inventory", json={**RICE, "quantity": 3}, headers=staff_headers).get_json()["item"]["id"]

        low = client.get("/api/inventory/low-stock", headers=staff_headers).get_json()["items"]
        assert [i["id"] for i in low] == [item_id]

        resp = client.patch(f"/api/inventory/{item_id}", json={"quantity": 30}, headers=staff_headers)
        assert resp.status_code == 200
        assert resp.get_json()["item"]["last_restocked_at"] is not None
        assert client.get("/api/inventory?low=1", headers=staff_headers).get_json()["items"] == []

    def test_update_and_delete_missing(self, client, staff_headers):
        assert client.patch("/api/inventory/999", json={"quantity": 1}, headers=staff_headers).status_code == 404
        assert client.delete("/api/inventory/999", headers=staff_headers).status_code == 404

    def test_delete(self, client, db_session, admin_headers):
        item_id = client.post("/api/inventory", json=RICE, headers=admin_headers).get_json()["item"]["id"]
        assert client.delete(f"/api/inventory/{item_id}", headers=admin_headers).status_code == 200
        assert db_session.get(InventoryItem, item_id) is None


class TestWasteRoutes:

    def test_record_and_total(self, client, staff_headers):
        client.post("/api/inventory", json=RICE, headers=staff_headers)

        first = client.post(
            "/api/waste",
            json={"item_name": "Rice", "quantity": 1.5, "cost_paise": 9000, "reason": "Overcooked"},
            headers=staff_headers,
        )
        assert first.status_code == 201
        assert first.get_json()["record"]["inventory_item_id"] is not None

        second = client.post(
            "/api/waste",
            json={"item_name": "Sambar", "quantity": 2, "reason": "Leftover"},
            headers=staff_headers,
        )
        assert second.status_code == 201
        assert second.get_json()["record"]["inventory_item_id"] is None

        body = client.get("/api/waste", headers=staff_headers).get_json()
        assert len(body["records"]) == 2
        assert body["total_cost_paise"] == 9000
        assert body["total_cost"] == 90.0

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_quantity_must_be_positive(self, client, staff_headers, quantity):
        resp = client.post(
            "/api/waste",
            json={"item_name": "Rice", "quantity": quantity, "reason": "Spilled"},
            headers=staff_headers,
        )
        assert resp.status_code == 400
