# Overview: Service-layer operations for provisioning cafeteria staff accounts.

"""
Staff Provisioning

Only admins may create operator accounts. The admin check runs before
any validation or write, so a non-admin call leaves nothing behind except
its PERMISSION_DENIED audit row.
"""

from ..models import User
from ..models.auth import ROLE_ADMIN, ROLE_CAFETERIA_STAFF, ROLE_STAFF
from . import auth_service
from .auth_service import PasswordValidationError
from .security_service import RequestOrigin, audit


STAFF_ROLES = (ROLE_CAFETERIA_STAFF, ROLE_STAFF, ROLE_ADMIN)
DEFAULT_STAFF_ROLE = ROLE_CAFETERIA_STAFF

# Audit resource for calls that do not come through HTTP
STAFF_ORIGIN = RequestOrigin(resource="/api/admin/staff")


class StaffProvisioningError(ValueError):
    """Raised for invalid staff provisioning input (400)."""


class StaffAuthorizationError(Exception):
    """Raised when the caller is not allowed to provision staff (403)."""


def provision_staff(
    actor: User | None,
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
    origin: RequestOrigin = STAFF_ORIGIN,
) -> User:
    """
    Create a staff account on behalf of an admin.

    Raises:
        StaffAuthorizationError: actor is not an admin
        StaffProvisioningError: missing fields, invalid role, weak password, duplicate email
    """
    actor_id = actor.id if actor is not None else None

    if actor is None or actor.role != ROLE_ADMIN:
        audit("PERMISSION_DENIED", actor_id, False, action="CREATE_STAFF",
              reason="Only administrators can add cafeteria staff", origin=origin)
        raise StaffAuthorizationError("Only administrators can add cafeteria staff")

    if not (name and email and password):
        raise StaffProvisioningError("Name, email, and password are required")

    role = role or DEFAULT_STAFF_ROLE
    if role not in STAFF_ROLES:
        raise StaffProvisioningError(f"Invalid role: {role}. Must be one of {', '.join(STAFF_ROLES)}")

    try:
        user = auth_service.create_user(name, email, password, role)
    except (PasswordValidationError, ValueError) as e:
        audit("STAFF_CREATE_FAILED", actor_id, False, action="CREATE_STAFF", reason=str(e), origin=origin)
        raise StaffProvisioningError(str(e))

    audit("STAFF_CREATED", actor_id, True, action=f"Created {role}: {user.email}", origin=origin)
    return user
