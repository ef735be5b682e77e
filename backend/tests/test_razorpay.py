"""
Razorpay gateway tests.

Verifies:
- signature verification accepts only the exact hex HMAC
- any single-character change to order id, payment id or signature fails
- provider orders are created in paise with basic auth
- the HTTP routes wrap both operations
"""

import hashlib
import hmac
import json

import httpx
import pytest

from cafeteria.services.razorpay_service import (
    PaymentGatewayError,
    RazorpayClient,
    compute_signature,
    create_provider_order,
    verify_signature,
)



SECRET = "GoiwPZYGwJ4rLD099MZKTTdX"
ORDER_ID = "order_ABC123"
PAYMENT_ID = "pay_XYZ789"
EXPECTED = hmac.new(SECRET.encode(), f"{ORDER_ID}|{PAYMENT_ID}".encode(), hashlib.sha256).hexdigest()


def _mutate(value: str, index: int) -> str:
    replacement = "0" if value[index] != "0" else "1"
    return value[:index] + replacement + value[index + 1:]


class TestSignature:

    def test_known_example(self):
        assert compute_signature(ORDER_ID, PAYMENT_ID, SECRET) == EXPECTED
        assert verify_signature(ORDER_ID, PAYMENT_ID, EXPECTED, SECRET) is True

    def test_wrong_secret(self):
        assert verify_signature(ORDER_ID, PAYMENT_ID, EXPECTED, "another-secret") is False

    def test_swapped_ids(self):
        assert verify_signature(PAYMENT_ID, ORDER_ID, EXPECTED, SECRET) is False

    @pytest.mark.parametrize("index", range(len(ORDER_ID)))
    def test_order_id_mutation(self, index):
        assert verify_signature(_mutate(ORDER_ID, index), PAYMENT_ID, EXPECTED, SECRET) is False

    @pytest.mark.parametrize("index", range(len(PAYMENT_ID)))
    def test_payment_id_mutation(self, index):
        assert verify_signature(ORDER_ID, _mutate(PAYMENT_ID, index), EXPECTED, SECRET) is False

    @pytest.mark.parametrize("index", [0, 1, 17, 32, 63])
    def test_signature_mutation(self, index):
        assert verify_signature(ORDER_ID, PAYMENT_ID, _mutate(EXPECTED, index), SECRET) is False

    @pytest.mark.parametrize("signature", ["", EXPECTED[:-1], EXPECTED.upper(), None, 123])
    def test_malformed_signature(self, signature):
        assert verify_signature(ORDER_ID, PAYMENT_ID, signature, SECRET) is False

    @pytest.mark.parametrize("field", ["orderId", "paymentId", "signature"])
    def test_lone_surrogate_is_a_mismatch(self, field):
        values = {"orderId": ORDER_ID, "paymentId": PAYMENT_ID, "signature": EXPECTED}
        values[field] = "\ud800"
        assert verify_signature(values["orderId"], values["paymentId"], values["signature"], SECRET) is False

    def test_same_triple_verifies_again(self):
        assert verify_signature(ORDER_ID, PAYMENT_ID, EXPECTED, SECRET)
        assert verify_signature(ORDER_ID, PAYMENT_ID, EXPECTED, SECRET)


def _recording_transport(calls, status=200, body=None):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        sent = json.loads(request.content)
        return httpx.Response(status, json=body if body is not None else {
            "id": "order_TEST1",
            "entity": "order",
            "amount": sent["amount"],
            "currency": sent["currency"],
            "receipt": sent["receipt"],
            "status": "created",
        })
    return httpx.MockTransport(handler)


class TestProviderOrder:

    def test_amount_sent_in_paise(self):
        calls = []
        client = RazorpayClient("rzp_test_key", SECRET, transport=_recording_transport(calls))

        order = create_provider_order(client, 150)

        assert order["amount"] == 15000
        assert len(calls) == 1
        sent = json.loads(calls[0].content)
        assert sent["amount"] == 15000
        assert sent["currency"] == "INR"
        assert sent["payment_capture"] == 1
        assert sent["receipt"].startswith("receipt_")
        assert str(calls[0].url) == "https://api.razorpay.com/v1/orders"
        assert calls[0].headers["Authorization"].startswith("Basic ")

    def test_fractional_rupees(self):
        calls = []
        client = RazorpayClient("rzp_test_key", SECRET, transport=_recording_transport(calls))
        assert create_provider_order(client, "99.99")["amount"] == 9999

    @pytest.mark.parametrize("amount", [0, 0.5, -10, "abc", None, True])
    def test_invalid_amount(self, amount):
        calls = []
        client = RazorpayClient("rzp_test_key", SECRET, transport=_recording_transport(calls))
        with pytest.raises(ValueError):
            create_provider_order(client, amount)
        assert calls == []

    def test_gateway_rejection(self):
        body = {"error": {"code": "BAD_REQUEST_ERROR", "description": "Authentication failed"}}
        client = RazorpayClient("rzp_test_key", "bad", transport=_recording_transport([], status=401, body=body))
        with pytest.raises(PaymentGatewayError, match="Authentication failed"):
            create_provider_order(client, 150)

    def test_gateway_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RazorpayClient("rzp_test_key", SECRET, transport=httpx.MockTransport(handler))
        with pytest.raises(PaymentGatewayError, match="unreachable"):
            create_provider_order(client, 150)


class TestPaymentRoutes:

    def test_create_order_requires_auth(self, client, db_session):
        resp = client.post("/api/payments/razorpay/orders", json={"amount": 150})
        assert resp.status_code == 401

    def test_create_order(self, app, client, student_headers, monkeypatch):
        calls = []
        monkeypatch.setitem(app.config, "RAZORPAY_TRANSPORT", _recording_transport(calls))

        resp = client.post(
            "/api/payments/razorpay/orders",
            json={"amount": 150},
            headers=student_headers,
        )

        assert resp.status_code == 200
        assert resp.get_json()["order"]["amount"] == 15000
        assert json.loads(calls[0].content)["amount"] == 15000

    def test_create_order_missing_amount(self, client, student_headers):
        resp = client.post("/api/payments/razorpay/orders", json={}, headers=student_headers)
        assert resp.status_code == 400

    def test_create_order_gateway_failure(self, app, client, student_headers, monkeypatch):
        body = {"error": {"description": "Gateway down"}}
        monkeypatch.setitem(app.config, "RAZORPAY_TRANSPORT", _recording_transport([], status=502, body=body))

        resp = client.post(
            "/api/payments/razorpay/orders",
            json={"amount": 150},
            headers=student_headers,
        )
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Gateway down"

    def test_verify_valid(self, app, client, student_headers, monkeypatch):
        monkeypatch.setitem(app.config, "RAZORPAY_KEY_SECRET", SECRET)
        resp = client.post(
            "/api/payments/razorpay/verify",
            json={"paymentId": PAYMENT_ID, "orderId": ORDER_ID, "signature": EXPECTED},
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"valid": True}

    def test_verify_mismatch_is_not_an_error(self, app, client, student_headers, monkeypatch):
        monkeypatch.setitem(app.config, "RAZORPAY_KEY_SECRET", SECRET)
        resp = client.post(
            "/api/payments/razorpay/verify",
            json={"paymentId": PAYMENT_ID, "orderId": "order_ABC124", "signature": EXPECTED},
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"valid": False}

    def test_verify_missing_fields(self, client, student_headers):
        resp = client.post(
            "/api/payments/razorpay/verify",
            json={"paymentId": PAYMENT_ID},
            headers=student_headers,
        )
        assert resp.status_code == 400

    def test_verify_lone_surrogate_signature(self, app, client, student_headers, monkeypatch):
        monkeypatch.setitem(app.config, "RAZORPAY_KEY_SECRET", SECRET)
        resp = client.post(
            "/api/payments/razorpay/verify",
            data='{"paymentId": "pay_XYZ789", "orderId": "order_ABC123", "signature": "\\ud800"}',
            content_type="application/json",
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"valid": False}
