# backend/cafeteria/routes/menu.py
"""
Menu catalog routes.

Reads are public. Writes require the admin or cafeteria_staff role.
"""
from flask import Blueprint, current_app, request

from ..models import MenuItem
from ..models.auth import ROLE_ADMIN, ROLE_CAFETERIA_STAFF
from ..validation import ModelValidationPolicy, ValidationError, enforce_rules_menu_item, validate_payload
from ..decorators import require_auth, require_role
from ..services import menu_service
from ..services.menu_service import MenuError


menu_bp = Blueprint("menu", __name__, url_prefix="/api/menu")

MENU_ITEM_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "description",
        "price_paise",
        "category",
        "status",
        "image_url",
        "ingredients",
        "tags",
        "prep_time_minutes",
        "calories",
        "is_popular",
    },
    required_on_create={"name", "price_paise", "category"},
)


@menu_bp.get("")
def list_menu():
    try:
        items = menu_service.list_menu_items(
            category=request.args.get("category"),
            status=request.args.get("status"),
        )
    except MenuError as e:
        return {"error": str(e)}, 400
    return {"items": [item.to_dict() for item in items]}, 200


@menu_bp.get("/<int:item_id>")
def get_menu_item(item_id: int):
    item = menu_service.get_menu_item(item_id)
    if not item:
        return {"error": "Menu item not found"}, 404
    return {"item": item.to_dict()}, 200


@menu_bp.post("")
@require_auth
@require_role(ROLE_ADMIN, ROLE_CAFETERIA_STAFF)
def create_menu_item():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=MenuItem, payload=payload, policy=MENU_ITEM_POLICY, partial=False)
        enforce_rules_menu_item(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    item = menu_service.create_menu_item(patch)
    current_app.logger.info("Menu item %s created: %s", item.id, item.name)
    return {"item": item.to_dict()}, 201


@menu_bp.patch("/<int:item_id>")
@require_auth
@require_role(ROLE_ADMIN, ROLE_CAFETERIA_STAFF)
def update_menu_item(item_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=MenuItem, payload=payload, policy=MENU_ITEM_POLICY, partial=True)
        enforce_rules_menu_item(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    if menu_service.get_menu_item(item_id) is None:
        return {"error": "Menu item not found"}, 404

    item = menu_service.update_menu_item(item_id, patch)
    return {"item": item.to_dict()}, 200


@menu_bp.post("/<int:item_id>/availability")
@require_auth
@require_role(ROLE_ADMIN, ROLE_CAFETERIA_STAFF)
def set_availability(item_id: int):
    """Body: {"status": "available" | "unavailable" | "low_stock"}"""
    payload = request.get_json(silent=True) or {}

    if menu_service.get_menu_item(item_id) is None:
        return {"error": "Menu item not found"}, 404

    try:
        item = menu_service.set_availability(item_id, payload.get("status"))
    except MenuError as e:
        return {"error": str(e)}, 400

    return {"item": item.to_dict()}, 200
