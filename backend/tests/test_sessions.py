"""
Bearer session tests.

Verifies:
- tokens are stored hashed
- idle and absolute timeouts end a session
- revoked tokens and deactivated users are rejected
"""

from datetime import timedelta

from cafeteria.models import SessionToken
from cafeteria.services.session_service import (
    SESSION_IDLE_TIMEOUT,
    create_session,
    hash_token,
    revoke_session,
    validate_session,
)


def test_token_stored_hashed(db_session, student):
    session, token = create_session(student.id)
    assert len(token) == 64
    assert session.token_hash == hash_token(token)
    assert db_session.query(SessionToken).filter_by(token_hash=token).first() is None
    assert validate_session(token).id == student.id


def test_idle_timeout(db_session, student):
    session, token = create_session(student.id)
    session.last_used_at = session.last_used_at - SESSION_IDLE_TIMEOUT - timedelta(minutes=1)
    db_session.commit()

    assert validate_session(token) is None
    assert db_session.get(SessionToken, session.id).revoked_reason == "Idle timeout"


def test_absolute_timeout(db_session, student):
    session, token = create_session(student.id)
    session.expires_at = session.created_at - timedelta(seconds=1)
    db_session.commit()

    assert validate_session(token) is None


def test_revoked(client, db_session, student, student_token):
    assert revoke_session(student_token) is True
    assert revoke_session(student_token) is False

    resp = client.get("/api/wallet", headers={"Authorization": f"Bearer {student_token}"})
    assert resp.status_code == 401


def test_deactivated_user(db_session, student, student_token):
    student.is_active = False
    db_session.commit()
    assert validate_session(student_token) is None
