# backend/cafeteria/routes/admin.py
"""
Admin routes: operator account provisioning.

SECURITY: Only admins may create staff. The admin check lives in
staff_service so a denied attempt is audited the same way from every
caller (HTTP or CLI).
"""
from flask import Blueprint, current_app, g, request

from ..extensions import db
from ..models import User
from ..models.auth import ROLE_ADMIN
from ..decorators import require_auth, require_role
from ..services.security_service import RequestOrigin
from ..services.staff_service import (
    STAFF_ROLES,
    StaffAuthorizationError,
    StaffProvisioningError,
    provision_staff,
)


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.post("/staff")
@require_auth
def create_staff_route():
    """
    Body: {"name": "...", "email": "...", "password": "...", "role": "cafeteria_staff"}

    role is optional and defaults to cafeteria_staff.
    """
    payload = request.get_json(silent=True) or {}

    try:
        user = provision_staff(
            actor=g.current_user,
            name=payload.get("name"),
            email=payload.get("email"),
            password=payload.get("password"),
            role=payload.get("role"),
            origin=RequestOrigin.from_request(request),
        )
    except StaffAuthorizationError as e:
        current_app.logger.warning("User %s denied staff provisioning", g.current_user.id)
        return {"error": str(e)}, 403
    except StaffProvisioningError as e:
        return {"error": str(e)}, 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Staff provisioning failed")
        return {"error": "Internal server error"}, 500

    current_app.logger.info("Admin %s provisioned %s account %s", g.current_user.id, user.role, user.email)
    return {"user": user.to_summary()}, 201


@admin_bp.get("/staff")
@require_auth
@require_role(ROLE_ADMIN)
def list_staff_route():
    users = (
        db.session.query(User)
        .filter(User.role.in_(STAFF_ROLES))
        .order_by(User.name)
        .all()
    )
    return {"staff": [u.to_summary() for u in users]}, 200
