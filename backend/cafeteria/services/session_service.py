# Overview: Service-layer operations for bearer sessions.

"""
Bearer Sessions

Login forms and registration live outside this backend. Tokens are minted
by the `users issue-token` CLI (and by tests) and checked on every request.

A token is 32 random bytes in hex; only its SHA-256 digest is stored, so
a leaked database row cannot be replayed as a credential. A session ends
24 hours after issue, or after 2 hours without use.
"""

import hashlib
import secrets
from datetime import timedelta

from ..extensions import db
from ..models import SessionToken, User
from ..time_utils import utcnow


SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)
SESSION_IDLE_TIMEOUT = timedelta(hours=2)

TOKEN_BYTES = 32


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _live_record(token: str) -> SessionToken | None:
    return (
        db.session.query(SessionToken)
        .filter(SessionToken.token_hash == hash_token(token), SessionToken.is_revoked.is_(False))
        .one_or_none()
    )


def create_session(user_id: int) -> tuple[SessionToken, str]:
    """Issue a session for an active user. Returns (record, plaintext token)."""
    user = db.session.get(User, user_id)
    if user is None:
        raise ValueError("User not found")
    if not user.is_active:
        raise ValueError("User is not active")

    token = generate_token()
    issued = utcnow()
    record = SessionToken(
        user_id=user.id,
        token_hash=hash_token(token),
        created_at=issued,
        last_used_at=issued,
        expires_at=issued + SESSION_ABSOLUTE_TIMEOUT,
    )
    db.session.add(record)
    db.session.commit()
    return record, token


def validate_session(token: str) -> User | None:
    """
    The token's user, or None. Idle sessions and sessions of deactivated
    users are revoked on the spot; a successful check refreshes last_used_at.
    """
    record = _live_record(token)
    if record is None:
        return None

    now = utcnow()
    if now >= record.expires_at:
        return None

    if now - record.last_used_at > SESSION_IDLE_TIMEOUT:
        _end(record, "Idle timeout")
        return None

    if record.user is None or not record.user.is_active:
        _end(record, "User account deactivated")
        return None

    record.last_used_at = now
    db.session.commit()
    return record.user


def revoke_session(token: str, reason: str = "Revoked") -> bool:
    record = _live_record(token)
    if record is None:
        return False
    _end(record, reason)
    return True


def _end(record: SessionToken, reason: str) -> None:
    record.is_revoked = True
    record.revoked_at = utcnow()
    record.revoked_reason = reason
    db.session.commit()
