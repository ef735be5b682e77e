# Overview: Bearer-session and role guards for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service
from .services.security_service import RequestOrigin, audit


BEARER_PREFIX = "Bearer "


def _session_user():
    """(user, None) for a live session, otherwise (None, error message)."""
    header = request.headers.get("Authorization", "")
    token = header[len(BEARER_PREFIX):].strip() if header.startswith(BEARER_PREFIX) else ""
    if not token:
        return None, "Authentication required"

    user = session_service.validate_session(token)
    if user is None:
        return None, "Invalid or expired token"
    return user, None


def require_auth(f):
    """
    401 unless the request carries a live bearer session (not revoked,
    expired, idle, or belonging to a deactivated user). Sets g.current_user.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user, problem = _session_user()
        if problem:
            return jsonify({"error": problem}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    403 unless g.current_user holds one of roles; stack under @require_auth.
    Every denial is audited as PERMISSION_DENIED.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = getattr(g, "current_user", None)
            if user is None:
                return jsonify({"error": "Authentication required"}), 401

            if user.role in roles:
                return f(*args, **kwargs)

            audit(
                "PERMISSION_DENIED",
                user.id,
                False,
                action=request.method,
                reason=f"Requires role: {', '.join(roles)}",
                origin=RequestOrigin.from_request(request),
            )
            return jsonify({"error": "Permission denied", "required_roles": list(roles)}), 403

        return decorated_function
    return decorator
