# backend/cafeteria/routes/system.py
"""
System health endpoint.

Reports database reachability with a few row counts and the latency of
the check, for deployment debugging.
"""

import time
from flask import Blueprint, current_app

from ..extensions import db
from ..models import MenuItem, Order, SessionToken, User
from ..time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        details = {
            "users": db.session.query(User).count(),
            "menu_items": db.session.query(MenuItem).count(),
            "orders": db.session.query(Order).count(),
            "active_sessions": db.session.query(SessionToken).filter(
                SessionToken.is_revoked == False,  # noqa: E712
                SessionToken.expires_at >= utcnow(),
            ).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2), "details": details}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {"status": "unhealthy", "latency_ms": round(elapsed_ms, 2), "error": "Database error"}


@system_bp.get("/health")
def health():
    database = check_database_health()
    status = "ok" if database["status"] == "healthy" else "degraded"
    code = 200 if status == "ok" else 503
    return {"status": status, "checks": {"database": database}}, code
