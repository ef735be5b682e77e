# backend/cafeteria/routes/wallet.py
"""
Prepaid wallet routes for the session user.

Top-ups go through Razorpay in two steps: POST /top-up/order opens a
pending deposit, POST /top-up credits it with a verified payment.
"""
import time

from flask import Blueprint, current_app, g, request

from ..decorators import require_auth
from ..money import paise_to_rupees, rupees_to_paise
from ..services import wallet_service
from ..services.razorpay_service import (
    PaymentGatewayError,
    client_from_config,
    create_provider_order_paise,
    verify_signature,
)


wallet_bp = Blueprint("wallet", __name__, url_prefix="/api/wallet")


@wallet_bp.get("")
@require_auth
def get_wallet():
    user = g.current_user
    try:
        limit = min(int(request.args.get("limit", 50)), 200)
    except ValueError:
        return {"error": "limit must be an integer"}, 400

    transactions = wallet_service.get_transactions(user.id, limit=limit)
    return {
        "balance_paise": user.wallet_balance_paise,
        "balance": paise_to_rupees(user.wallet_balance_paise),
        "transactions": [t.to_dict() for t in transactions],
    }, 200


@wallet_bp.post("/top-up/order")
@require_auth
def begin_top_up_route():
    """
    Body: {"amount": 500}  (rupees)

    Creates the Razorpay order for the top-up and records it as a pending
    deposit. The balance changes only in POST /top-up.
    """
    payload = request.get_json(silent=True) or {}

    try:
        amount_paise = rupees_to_paise(payload.get("amount"))
        wallet_service.check_top_up_amount(amount_paise)
        provider_order = create_provider_order_paise(
            client_from_config(current_app.config),
            amount_paise,
            receipt=f"topup_{g.current_user.id}_{int(time.time() * 1000)}",
        )
        if provider_order.get("amount") != amount_paise:
            raise PaymentGatewayError("Payment gateway returned a different amount")
        txn = wallet_service.begin_top_up(g.current_user.id, amount_paise, provider_order.get("id"))
    except ValueError as e:
        return {"error": str(e)}, 400
    except PaymentGatewayError as e:
        current_app.logger.exception("Razorpay top-up order failed for user %s", g.current_user.id)
        return {"error": str(e)}, 500

    current_app.logger.info(
        "Top-up of %s paise started for user %s: provider order %s",
        amount_paise, g.current_user.id, txn.reference,
    )
    return {
        "transaction": txn.to_dict(),
        "provider_order": provider_order,
        "key": current_app.config["RAZORPAY_KEY_ID"],
    }, 201


@wallet_bp.post("/top-up")
@require_auth
def complete_top_up_route():
    """
    Body: {"paymentId": "...", "orderId": "...", "signature": "..."}

    Credits the pending deposit created for orderId once the checkout
    widget's signature verifies.
    """
    payload = request.get_json(silent=True) or {}
    payment_id = payload.get("paymentId")
    provider_order_id = payload.get("orderId")
    signature = payload.get("signature")

    if not payment_id or not provider_order_id or not signature:
        return {"error": "Missing required parameters"}, 400

    if not verify_signature(provider_order_id, payment_id, signature, current_app.config["RAZORPAY_KEY_SECRET"]):
        current_app.logger.warning(
            "Top-up signature mismatch for user %s (provider order %s)", g.current_user.id, provider_order_id
        )
        return {"error": "Payment verification failed", "valid": False}, 400

    try:
        txn = wallet_service.complete_top_up(g.current_user.id, provider_order_id, payment_id)
    except ValueError as e:
        return {"error": str(e)}, 400

    current_app.logger.info("Wallet top-up for user %s: %s paise", g.current_user.id, txn.amount_paise)
    return {
        "transaction": txn.to_dict(),
        "balance_paise": g.current_user.wallet_balance_paise,
    }, 201
