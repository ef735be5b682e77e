# backend/cafeteria/routes/waste.py
"""
Food waste tracking routes.

SECURITY: All routes require the admin or cafeteria_staff role.
"""
from flask import Blueprint, g, request

from ..models import WasteRecord
from ..models.auth import OPERATOR_ROLES
from ..money import paise_to_rupees
from ..validation import ModelValidationPolicy, ValidationError, enforce_rules_waste_record, validate_payload
from ..decorators import require_auth, require_role
from ..services import inventory_service


waste_bp = Blueprint("waste", __name__, url_prefix="/api/waste")

WASTE_RECORD_POLICY = ModelValidationPolicy(
    writable_fields={"item_name", "quantity", "cost_paise", "reason", "recorded_at"},
    required_on_create={"item_name", "quantity", "reason"},
)


@waste_bp.get("")
@require_auth
@require_role(*OPERATOR_ROLES)
def list_waste_route():
    try:
        limit = min(int(request.args.get("limit", 100)), 500)
    except ValueError:
        return {"error": "limit must be an integer"}, 400

    records = inventory_service.list_waste(limit=limit)
    total_paise = inventory_service.total_waste_cost_paise()
    return {
        "records": [r.to_dict() for r in records],
        "total_cost_paise": total_paise,
        "total_cost": paise_to_rupees(total_paise),
    }, 200


@waste_bp.post("")
@require_auth
@require_role(*OPERATOR_ROLES)
def record_waste_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=WasteRecord, payload=payload, policy=WASTE_RECORD_POLICY, partial=False)
        enforce_rules_waste_record(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    record = inventory_service.record_waste(patch, recorded_by_user_id=g.current_user.id)
    return {"record": record.to_dict()}, 201
