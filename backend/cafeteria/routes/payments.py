# backend/cafeteria/routes/payments.py
"""
Razorpay gateway routes backing the hosted checkout widget.

- POST /orders: create a provider order for a rupee amount
- POST /verify: check a widget success callback's HMAC signature

SECURITY: Both routes require authentication. The key secret stays in
server config; only the public key id reaches clients (via the widget
options built by PaymentBridge).
"""
from flask import Blueprint, current_app, g, request

from ..decorators import require_auth
from ..services.razorpay_service import (
    PaymentGatewayError,
    client_from_config,
    create_provider_order,
    verify_signature,
)


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments/razorpay")


@payments_bp.post("/orders")
@require_auth
def create_order_route():
    """
    Body: {"amount": 150}  (rupees)

    Returns the gateway order: {"order": {"id": "order_...", "amount": 15000, ...}}
    """
    payload = request.get_json(silent=True) or {}
    amount = payload.get("amount")

    if amount is None:
        return {"error": "amount is required"}, 400

    try:
        order = create_provider_order(client_from_config(current_app.config), amount)
    except ValueError as e:
        return {"error": str(e)}, 400
    except PaymentGatewayError as e:
        current_app.logger.exception("Razorpay order creation failed for user %s", g.current_user.id)
        return {"error": str(e)}, 500

    current_app.logger.info(
        "Razorpay order %s created for user %s: %s paise",
        order.get("id"), g.current_user.id, order.get("amount"),
    )
    return {"order": order}, 200


@payments_bp.post("/verify")
@require_auth
def verify_payment_route():
    """
    Body: {"paymentId": "...", "orderId": "...", "signature": "..."}

    A mismatch is a normal {"valid": false} answer, not an error.
    """
    payload = request.get_json(silent=True) or {}
    payment_id = payload.get("paymentId")
    order_id = payload.get("orderId")
    signature = payload.get("signature")

    if not payment_id or not order_id or not signature:
        return {"error": "Missing required parameters"}, 400

    valid = verify_signature(order_id, payment_id, signature, current_app.config["RAZORPAY_KEY_SECRET"])

    if not valid:
        current_app.logger.warning("Razorpay signature mismatch for order %s, payment %s", order_id, payment_id)

    return {"valid": valid}, 200
