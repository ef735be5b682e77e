from __future__ import annotations

from ..extensions import db


ROLE_STUDENT = "student"
ROLE_STAFF = "staff"
ROLE_CAFETERIA_STAFF = "cafeteria_staff"
ROLE_ADMIN = "admin"

VALID_ROLES = (ROLE_STUDENT, ROLE_STAFF, ROLE_CAFETERIA_STAFF, ROLE_ADMIN)

# Roles that run the kitchen and may see every order
OPERATOR_ROLES = (ROLE_CAFETERIA_STAFF, ROLE_ADMIN)


class User(db.Model):
    """
    Cafeteria account: customers (students, staff) and operators
    (cafeteria staff, admins).

    The role is a single column; the cafeteria has four fixed roles and
    no per-user permission overrides.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(32), nullable=False, default=ROLE_STUDENT, index=True)

    # Wallet balance in paise; only wallet_service mutates it
    wallet_balance_paise = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def is_operator(self) -> bool:
        return self.role in OPERATOR_ROLES

    def to_summary(self) -> dict:
        """Public shape returned by staff provisioning."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


class SessionToken(db.Model):
    """Issued bearer session. Only the SHA-256 of the token is kept; see session_service for timeouts."""
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_revoked", "user_id", "is_revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False, index=True)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(255), nullable=True)

    user = db.relationship("User", backref=db.backref("session_tokens", lazy=True))
