# backend/cafeteria/routes/inventory.py
"""
Kitchen inventory routes.

SECURITY: All routes require the admin or cafeteria_staff role.
"""
from flask import Blueprint, current_app, request

from ..models import InventoryItem
from ..models.auth import OPERATOR_ROLES
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_inventory_item,
    validate_payload,
)
from ..decorators import require_auth, require_role
from ..services import inventory_service
from ..services.inventory_service import InventoryError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")

INVENTORY_ITEM_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "category",
        "quantity",
        "unit",
        "threshold",
        "cost_paise",
        "supplier",
        "last_restocked_at",
    },
    required_on_create={"name", "quantity", "unit", "threshold"},
)


@inventory_bp.get("")
@require_auth
@require_role(*OPERATOR_ROLES)
def list_inventory_route():
    """
    Query params:
    - category: exact match
    - low: 1/true to return only items at or below threshold
    """
    items = inventory_service.list_inventory(
        category=request.args.get("category"),
        low_only=request.args.get("low") in ("1", "true"),
    )
    return {"items": [item.to_dict() for item in items]}, 200


@inventory_bp.get("/low-stock")
@require_auth
@require_role(*OPERATOR_ROLES)
def low_stock_route():
    items = inventory_service.list_inventory(low_only=True)
    return {"items": [item.to_dict() for item in items]}, 200


@inventory_bp.get("/<int:item_id>")
@require_auth
@require_role(*OPERATOR_ROLES)
def get_inventory_route(item_id: int):
    try:
        item = inventory_service.get_inventory_item(item_id)
    except InventoryError as e:
        return {"error": str(e)}, 404
    return {"item": item.to_dict()}, 200


@inventory_bp.post("")
@require_auth
@require_role(*OPERATOR_ROLES)
def create_inventory_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_ITEM_POLICY, partial=False)
        enforce_rules_inventory_item(patch)
        item = inventory_service.create_inventory_item(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409

    current_app.logger.info("Inventory item %s created: %s", item.id, item.name)
    return {"item": item.to_dict()}, 201


@inventory_bp.patch("/<int:item_id>")
@require_auth
@require_role(*OPERATOR_ROLES)
def update_inventory_route(item_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_ITEM_POLICY, partial=True)
        enforce_rules_inventory_item(patch)
        item = inventory_service.update_inventory_item(item_id, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except InventoryError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409

    return {"item": item.to_dict()}, 200


@inventory_bp.delete("/<int:item_id>")
@require_auth
@require_role(*OPERATOR_ROLES)
def delete_inventory_route(item_id: int):
    try:
        inventory_service.delete_inventory_item(item_id)
    except InventoryError as e:
        return {"error": str(e)}, 404
    return {"deleted": item_id}, 200
