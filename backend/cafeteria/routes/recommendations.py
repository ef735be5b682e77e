# backend/cafeteria/routes/recommendations.py
"""
Recommendation routes.

The service functions are pure; these routes load the rows they need
and pick "now".
"""
from datetime import timedelta

from flask import Blueprint, current_app, g, request

from ..extensions import db
from ..models import InventoryItem, MenuItem, Order, OrderItem
from ..models.auth import OPERATOR_ROLES
from ..decorators import require_auth, require_role
from ..services import recommendation_service
from ..time_utils import local_now, to_utc_z, utcnow


recommendations_bp = Blueprint("recommendations", __name__, url_prefix="/api/recommendations")

# Orders sampled for consumption estimates
RECENT_ORDER_SAMPLE = 50


@recommendations_bp.post("/insights")
@require_auth
@require_role(*OPERATOR_ROLES)
def insights():
    """Body: {"type": "inventory" | "menu" | "marketing"}"""
    payload = request.get_json(silent=True) or {}
    kind = payload.get("type")

    if kind is not None and not isinstance(kind, str):
        return {"error": "type must be a string"}, 400

    return {
        "recommendations": recommendation_service.generate_insights(kind, local_now()),
        "timestamp": to_utc_z(utcnow()),
    }, 200


@recommendations_bp.post("/user")
@require_auth
def user_recommendations():
    """
    Body: {"userId": 3}  (optional; defaults to the session user)

    Customers may only ask for themselves.
    """
    payload = request.get_json(silent=True) or {}
    user_id = payload.get("userId", g.current_user.id)

    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return {"error": "userId must be an integer"}, 400
    if user_id != g.current_user.id and not g.current_user.is_operator:
        return {"error": "Permission denied"}, 403

    ordered_item_ids = [
        menu_item_id
        for (menu_item_id,) in (
            db.session.query(OrderItem.menu_item_id)
            .join(Order, Order.id == OrderItem.order_id)
            .filter(Order.customer_id == user_id)
            .order_by(Order.created_at, OrderItem.id)
            .all()
        )
    ]
    catalog = db.session.query(MenuItem).order_by(MenuItem.id).all()

    picks, favorite = recommendation_service.recommend_for_user(ordered_item_ids, catalog)
    return {
        "recommendations": [item.to_dict() for item in picks],
        "favoriteCategory": favorite,
    }, 200


@recommendations_bp.get("/inventory")
@require_auth
@require_role(*OPERATOR_ROLES)
def inventory_recommendations():
    inventory = db.session.query(InventoryItem).order_by(InventoryItem.name).all()

    since = utcnow() - timedelta(days=recommendation_service.CONSUMPTION_WINDOW_DAYS)
    recent_ids = [
        order_id
        for (order_id,) in (
            db.session.query(Order.id)
            .filter(Order.created_at >= since)
            .order_by(Order.created_at.desc())
            .limit(RECENT_ORDER_SAMPLE)
            .all()
        )
    ]
    lines = []
    if recent_ids:
        lines = (
            db.session.query(OrderItem.menu_item_id, OrderItem.quantity)
            .filter(OrderItem.order_id.in_(recent_ids))
            .all()
        )

    ingredients_by_item = {
        item_id: ingredients or []
        for item_id, ingredients in db.session.query(MenuItem.id, MenuItem.ingredients).all()
    }

    result = recommendation_service.inventory_recommendations(
        inventory, [(m, q) for m, q in lines], ingredients_by_item
    )
    current_app.logger.info(
        "Inventory recommendations: %d low stock, %d waste hints",
        len(result["lowStockAlerts"]), len(result["wasteReduction"]),
    )
    return result, 200
