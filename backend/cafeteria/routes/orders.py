# backend/cafeteria/routes/orders.py
"""
Order routes.

SECURITY: All routes require authentication.
- Customers see and act on their own orders only
- Operators (admin, cafeteria_staff) see every order and drive its status

Submission takes item ids and quantities only; prices always come from the
menu catalog, never from the client.
"""
from flask import Blueprint, current_app, g, request

from ..cart import Cart
from ..models.auth import OPERATOR_ROLES
from ..validation import ValidationError
from ..decorators import require_auth, require_role
from ..services import menu_service, order_service
from ..services.order_service import OrderError, OrderNotFoundError
from ..services.razorpay_service import (
    PaymentGatewayError,
    client_from_config,
    create_provider_order_paise,
    verify_signature,
)


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


def _load_visible_order(order_id: int):
    """Return (order, None) or (None, error response)."""
    try:
        order = order_service.get_order(order_id)
    except OrderNotFoundError as e:
        return None, ({"error": str(e)}, 404)

    if order.customer_id != g.current_user.id and not g.current_user.is_operator:
        # Other customers' orders are reported as missing
        return None, ({"error": f"Order {order_id} not found"}, 404)

    return order, None


@orders_bp.post("")
@require_auth
def submit_order_route():
    """
    Place an order from a cart snapshot.

    Body:
        {
            "items": [{"item_id": 1, "quantity": 2, "note": "extra chutney"}],
            "payment_method": "wallet" | "upi" | "card" | "cash",
            "note": "optional order-level instructions"
        }
    """
    payload = request.get_json(silent=True) or {}
    lines = payload.get("items")
    note = payload.get("note")

    if note is not None and not isinstance(note, str):
        return {"error": "note must be a string"}, 400

    try:
        ids = [line.get("item_id") for line in lines if isinstance(line, dict)] if isinstance(lines, list) else []
        cart = Cart.from_payload(lines, menu_service.get_catalog(ids))
        order = order_service.submit_order(
            customer=g.current_user,
            cart=cart,
            payment_method=payload.get("payment_method"),
            note=note.strip() if note else None,
            ready_minutes=current_app.config["ORDER_READY_MINUTES"],
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except OrderError as e:
        current_app.logger.warning("Order submission failed for user %s: %s", g.current_user.id, e)
        return {"error": str(e)}, 400

    current_app.logger.info(
        "Order %s placed by user %s: %s paise via %s",
        order.id, order.customer_id, order.total_amount_paise, order.payment_method,
    )
    return {"order": order.to_dict()}, 201


@orders_bp.get("")
@require_auth
def list_orders_route():
    """
    Query params:
    - status: filter by order status
    - limit: max rows (default 100, capped at 500)
    - mine: operators pass mine=1 to see only their own orders
    """
    try:
        limit = min(int(request.args.get("limit", 100)), 500)
    except ValueError:
        return {"error": "limit must be an integer"}, 400

    customer_id = g.current_user.id
    if g.current_user.is_operator and request.args.get("mine") not in ("1", "true"):
        customer_id = None

    try:
        orders = order_service.list_orders(
            customer_id=customer_id,
            status=request.args.get("status"),
            limit=limit,
        )
    except OrderError as e:
        return {"error": str(e)}, 400

    return {"orders": [o.to_dict() for o in orders]}, 200


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    order, error = _load_visible_order(order_id)
    if error:
        return error
    return {"order": order.to_dict()}, 200


@orders_bp.post("/<int:order_id>/status")
@require_auth
@require_role(*OPERATOR_ROLES)
def update_status_route(order_id: int):
    """Body: {"status": "confirmed" | "preparing" | "ready" | "completed" | "cancelled"}"""
    payload = request.get_json(silent=True) or {}

    try:
        order = order_service.update_status(order_id, payload.get("status"))
    except OrderNotFoundError as e:
        return {"error": str(e)}, 404
    except OrderError as e:
        return {"error": str(e)}, 400

    current_app.logger.info("Order %s moved to %s by user %s", order.id, order.status, g.current_user.id)
    return {"order": order.to_dict()}, 200


@orders_bp.post("/<int:order_id>/cancel")
@require_auth
def cancel_order_route(order_id: int):
    order, error = _load_visible_order(order_id)
    if error:
        return error

    try:
        order = order_service.cancel_order(order.id)
    except OrderError as e:
        return {"error": str(e)}, 400

    current_app.logger.info("Order %s cancelled by user %s", order.id, g.current_user.id)
    return {"order": order.to_dict()}, 200


@orders_bp.post("/<int:order_id>/pay/wallet")
@require_auth
def pay_with_wallet_route(order_id: int):
    order, error = _load_visible_order(order_id)
    if error:
        return error

    if order.customer_id != g.current_user.id:
        return {"error": "Only the customer can pay for this order"}, 403

    try:
        order = order_service.pay_with_wallet(order.id)
    except OrderError as e:
        return {"error": str(e)}, 400

    return {"order": order.to_dict(), "wallet_balance_paise": g.current_user.wallet_balance_paise}, 200


@orders_bp.post("/<int:order_id>/payment/razorpay/order")
@require_auth
def create_order_payment_route(order_id: int):
    """
    Start online checkout for an upi/card order.

    The provider order is created server-side for the stored order total and
    bound to the order; the client only receives its id for the widget.
    """
    order, error = _load_visible_order(order_id)
    if error:
        return error

    if order.customer_id != g.current_user.id:
        return {"error": "Only the customer can pay for this order"}, 403

    try:
        order = order_service.get_gateway_payable_order(order.id)
        provider_order = create_provider_order_paise(
            client_from_config(current_app.config),
            order.total_amount_paise,
            receipt=f"order_{order.id}",
        )
        order = order_service.attach_provider_order(
            order.id, provider_order.get("id"), provider_order.get("amount")
        )
    except (OrderError, ValueError) as e:
        return {"error": str(e)}, 400
    except PaymentGatewayError as e:
        current_app.logger.exception("Razorpay order creation failed for order %s", order_id)
        return {"error": str(e)}, 500

    current_app.logger.info("Order %s bound to provider order %s", order.id, order.provider_order_id)
    return {
        "order": order.to_dict(),
        "provider_order": provider_order,
        "key": current_app.config["RAZORPAY_KEY_ID"],
    }, 201


@orders_bp.post("/<int:order_id>/payment/razorpay")
@require_auth
def verify_order_payment_route(order_id: int):
    """
    Settle an upi/card order with the checkout widget's success callback.

    Body: {"paymentId": "...", "orderId": "...", "signature": "..."}

    orderId must be the provider order created for this order. A signature
    mismatch on it marks the payment failed and returns 400.
    """
    order, error = _load_visible_order(order_id)
    if error:
        return error

    payload = request.get_json(silent=True) or {}
    payment_id = payload.get("paymentId")
    provider_order_id = payload.get("orderId")
    signature = payload.get("signature")

    if not payment_id or not provider_order_id or not signature:
        return {"error": "Missing required parameters"}, 400

    if not order.provider_order_id or order.provider_order_id != provider_order_id:
        current_app.logger.warning(
            "Provider order %s presented for order %s (bound: %s)",
            provider_order_id, order.id, order.provider_order_id,
        )
        return {"error": "Payment does not belong to this order", "valid": False}, 400

    valid = verify_signature(
        provider_order_id, payment_id, signature, current_app.config["RAZORPAY_KEY_SECRET"]
    )

    try:
        if not valid:
            current_app.logger.warning(
                "Payment signature mismatch for order %s (provider order %s)", order.id, provider_order_id
            )
            order_service.mark_payment_failed(order.id)
            return {"error": "Payment verification failed", "valid": False}, 400

        order = order_service.mark_payment_verified(order.id, provider_order_id, payment_id)
    except OrderError as e:
        return {"error": str(e)}, 400

    current_app.logger.info("Order %s paid online: payment %s", order.id, payment_id)
    return {"order": order.to_dict(), "valid": True}, 200
