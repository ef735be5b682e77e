# Overview: Checkout flow glue between the hosted Razorpay widget and the verification endpoint.

"""
Payment Bridge

Drives one hosted-widget checkout at a time:

    bridge = PaymentBridge(create_order, verify, notify, key_id)
    options = bridge.start_checkout(150, "Asha", "asha@example.com", on_success)
    # widget opens with `options`; later exactly one of:
    bridge.handle_success({"paymentId": ..., "orderId": ..., "signature": ...})
    bridge.handle_dismiss()

Collaborators are plain callables so the bridge can sit in front of the
HTTP endpoints or the service functions directly:

- create_order(amount_rupees) -> provider order dict with "id" and "amount" (paise)
- verify({"paymentId", "orderId", "signature"}) -> {"valid": bool}
- notify(title, description) -> None

The bridge never retries and never reuses a provider order: every
start_checkout creates a new one.
"""

from dataclasses import dataclass
from typing import Callable

from .services.razorpay_service import CURRENCY_INR


MERCHANT_NAME = "Smart Cafeteria"
CHECKOUT_DESCRIPTION = "Payment for cafeteria order"
THEME_COLOR = "#eab308"

TITLE_SUCCESS = "Payment Successful"
TITLE_FAILED = "Payment Failed"
TITLE_CANCELLED = "Payment Cancelled"


@dataclass
class _PendingCheckout:
    provider_order_id: str
    on_success: Callable[[str], None]


class PaymentBridge:
    def __init__(
        self,
        create_order: Callable[[float], dict],
        verify: Callable[[dict], dict],
        notify: Callable[[str, str], None],
        key_id: str,
    ):
        self._create_order = create_order
        self._verify = verify
        self._notify = notify
        self.key_id = key_id
        self._pending: _PendingCheckout | None = None

    def start_checkout(self, amount_rupees, customer_name: str, customer_email: str, on_success) -> dict:
        """
        Create a provider order and return the widget options for it.

        A failure to create the order is reported to the user and re-raised.
        """
        try:
            order = self._create_order(amount_rupees)
        except Exception:
            self._notify(TITLE_FAILED, "There was an issue with the payment process")
            raise

        self._pending = _PendingCheckout(provider_order_id=order["id"], on_success=on_success)

        return {
            "key": self.key_id,
            "amount": order["amount"],
            "currency": order.get("currency", CURRENCY_INR),
            "name": MERCHANT_NAME,
            "description": CHECKOUT_DESCRIPTION,
            "order_id": order["id"],
            "prefill": {
                "name": customer_name,
                "email": customer_email,
            },
            "theme": {"color": THEME_COLOR},
        }

    def handle_success(self, callback: dict) -> bool:
        """
        Forward the widget's success callback for server-side verification.

        Returns True only when the signature verified and the success
        handler ran.
        """
        pending, self._pending = self._pending, None

        try:
            result = self._verify({
                "paymentId": callback.get("paymentId"),
                "orderId": callback.get("orderId"),
                "signature": callback.get("signature"),
            })
        except Exception:
            self._notify(TITLE_FAILED, "Could not verify payment. Please contact support.")
            return False

        if not result or result.get("valid") is not True:
            self._notify(TITLE_FAILED, "Payment verification failed")
            return False

        payment_id = callback.get("paymentId")
        if pending is not None:
            pending.on_success(payment_id)
        self._notify(TITLE_SUCCESS, f"Payment ID: {payment_id}")
        return True

    def handle_dismiss(self) -> None:
        self._pending = None
        self._notify(TITLE_CANCELLED, "You cancelled the payment process")
