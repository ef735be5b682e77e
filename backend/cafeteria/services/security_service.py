# Overview: Audit trail for security-relevant actions (staff provisioning, denied role checks).

from dataclasses import dataclass

from ..extensions import db
from ..models import SecurityEvent
from ..time_utils import utcnow


@dataclass(frozen=True)
class RequestOrigin:
    """Where an audited action came from. CLI and test callers leave fields empty."""
    resource: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_request(cls, req) -> "RequestOrigin":
        return cls(
            resource=req.path,
            ip_address=req.remote_addr,
            user_agent=req.headers.get("User-Agent"),
        )


def audit(
    event_type: str,
    actor_id: int | None,
    success: bool,
    action: str | None = None,
    reason: str | None = None,
    origin: RequestOrigin = RequestOrigin(),
) -> SecurityEvent:
    """
    Append one SecurityEvent and commit it straight away, so the trail
    survives a later rollback of the caller's own work.

    Event types in use: STAFF_CREATED, STAFF_CREATE_FAILED, PERMISSION_DENIED.
    """
    event = SecurityEvent(
        event_type=event_type,
        user_id=actor_id,
        success=success,
        action=action,
        reason=reason,
        resource=origin.resource,
        ip_address=origin.ip_address,
        user_agent=origin.user_agent,
        occurred_at=utcnow(),
    )
    db.session.add(event)
    db.session.commit()
    return event
