# Overview: Razorpay gateway access; provider order creation and payment signature verification.

"""
Razorpay Gateway

Two server-side operations back the hosted checkout widget:

1. create_provider_order: exchanges a rupee amount for a Razorpay order id
   (the token the widget needs). Amount is sent in paise. No idempotency
   key is used, so each call creates a new provider order.
   create_provider_order_paise does the same for amounts the server already
   owns (order totals, pending top-ups).
2. verify_signature: recomputes HMAC-SHA256(secret, "order_id|payment_id")
   and compares it with the signature the widget returned.

SECURITY:
- The key secret is only read from server config and never returned.
- A valid signature proves the payment belongs to that provider order,
  nothing more. Callers that move money must also check the provider order
  id against the one they created and stored for the amount.
- verify_signature itself has no replay protection: the same valid triple
  verifies again.
"""

import hashlib
import hmac
import time

import httpx

from ..money import rupees_to_paise


CURRENCY_INR = "INR"

# Razorpay rejects orders below Rs 1
MIN_AMOUNT_PAISE = 100


class PaymentGatewayError(Exception):
    """Raised when the gateway is unreachable or rejects a request."""
    pass


class RazorpayClient:
    """Thin httpx wrapper around the Razorpay Orders API."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.key_id = key_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._auth = (key_id, key_secret)
        self._transport = transport

    def create_order(self, amount_paise: int, receipt: str, currency: str = CURRENCY_INR) -> dict:
        payload = {
            "amount": amount_paise,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }

        try:
            with httpx.Client(timeout=self.timeout, auth=self._auth, transport=self._transport) as client:
                response = client.post(f"{self.base_url}/orders", json=payload)
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(f"Payment gateway unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            description = (body.get("error") or {}).get("description") if isinstance(body, dict) else None
            raise PaymentGatewayError(description or f"Payment gateway returned HTTP {response.status_code}")

        return body


def client_from_config(config) -> RazorpayClient:
    return RazorpayClient(
        key_id=config["RAZORPAY_KEY_ID"],
        key_secret=config["RAZORPAY_KEY_SECRET"],
        base_url=config["RAZORPAY_API_BASE"],
        timeout=config["RAZORPAY_TIMEOUT_SECONDS"],
        # Tests plug an httpx.MockTransport in here
        transport=config.get("RAZORPAY_TRANSPORT"),
    )


def create_provider_order(client: RazorpayClient, amount) -> dict:
    """
    Create a Razorpay order for a rupee amount.

    Returns the gateway's order object (id, amount in paise, currency, receipt, ...).

    Raises:
        ValueError: amount missing, non-numeric, or below the gateway minimum
        PaymentGatewayError: network or gateway failure
    """
    return create_provider_order_paise(client, rupees_to_paise(amount))


def create_provider_order_paise(client: RazorpayClient, amount_paise: int, receipt: str | None = None) -> dict:
    """Same as create_provider_order for an amount the server already holds in paise."""
    if amount_paise < MIN_AMOUNT_PAISE:
        raise ValueError("amount must be at least 1 rupee")

    receipt = receipt or f"receipt_{int(time.time() * 1000)}"
    return client.create_order(amount_paise, receipt=receipt)


def _utf8(value: str) -> bytes:
    # JSON may carry lone surrogates; they must fail the comparison, not the request
    return value.encode("utf-8", errors="surrogatepass")


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = _utf8(f"{order_id}|{payment_id}")
    return hmac.new(_utf8(secret), message, hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """True only when signature is the exact hex HMAC of "order_id|payment_id"."""
    if not all(isinstance(v, str) for v in (order_id, payment_id, signature)):
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), _utf8(signature))
