from __future__ import annotations

from ..extensions import db


class SecurityEvent(db.Model):
    """One audited action: who, what, whether it was allowed, and from where."""
    __tablename__ = "security_events"
    __table_args__ = (
        db.Index("ix_security_events_type_time", "event_type", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Null when nobody was authenticated
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    event_type = db.Column(db.String(64), nullable=False)
    action = db.Column(db.String(128), nullable=True)
    success = db.Column(db.Boolean, nullable=False)
    reason = db.Column(db.Text, nullable=True)

    resource = db.Column(db.String(128), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, default=db.func.now())
