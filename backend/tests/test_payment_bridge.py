"""
Checkout bridge tests with stand-in collaborators.
"""

import pytest

from cafeteria.payment_bridge import PaymentBridge


class Recorder:
    def __init__(self, verify_result=None, verify_error=None, order_error=None):
        self.verify_result = verify_result if verify_result is not None else {"valid": True}
        self.verify_error = verify_error
        self.order_error = order_error
        self.created = []
        self.verified = []
        self.notes = []
        self.paid = []

    def create_order(self, amount):
        if self.order_error:
            raise self.order_error
        self.created.append(amount)
        return {"id": f"order_{len(self.created)}", "amount": int(amount * 100), "currency": "INR"}

    def verify(self, payload):
        self.verified.append(payload)
        if self.verify_error:
            raise self.verify_error
        return self.verify_result

    def notify(self, title, description):
        self.notes.append(title)

    def bridge(self):
        return PaymentBridge(self.create_order, self.verify, self.notify, key_id="rzp_test_key")


CALLBACK = {"paymentId": "pay_1", "orderId": "order_1", "signature": "abc"}


def test_widget_options():
    rec = Recorder()
    options = rec.bridge().start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)

    assert rec.created == [150]
    assert options == {
        "key": "rzp_test_key",
        "amount": 15000,
        "currency": "INR",
        "name": "Smart Cafeteria",
        "description": "Payment for cafeteria order",
        "order_id": "order_1",
        "prefill": {"name": "Asha", "email": "asha@campus.edu"},
        "theme": {"color": "#eab308"},
    }
    assert rec.notes == []


def test_valid_payment_runs_success_handler():
    rec = Recorder()
    bridge = rec.bridge()
    bridge.start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)

    assert bridge.handle_success(CALLBACK) is True
    assert rec.verified == [CALLBACK]
    assert rec.paid == ["pay_1"]
    assert rec.notes == ["Payment Successful"]


@pytest.mark.parametrize(
    "recorder",
    [
        Recorder(verify_result={"valid": False}),
        Recorder(verify_error=RuntimeError("verification endpoint down")),
    ],
)
def test_failed_verification_skips_success_handler(recorder):
    bridge = recorder.bridge()
    bridge.start_checkout(150, "Asha", "asha@campus.edu", recorder.paid.append)

    assert bridge.handle_success(CALLBACK) is False
    assert recorder.paid == []
    assert recorder.notes == ["Payment Failed"]


def test_dismiss():
    rec = Recorder()
    bridge = rec.bridge()
    bridge.start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)

    bridge.handle_dismiss()

    assert rec.notes == ["Payment Cancelled"]
    assert rec.verified == []
    assert rec.paid == []


def test_order_creation_failure_reraises():
    rec = Recorder(order_error=ConnectionError("gateway down"))

    with pytest.raises(ConnectionError):
        rec.bridge().start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)

    assert rec.notes == ["Payment Failed"]


def test_every_checkout_creates_a_new_provider_order():
    rec = Recorder()
    bridge = rec.bridge()
    first = bridge.start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)
    bridge.handle_dismiss()
    second = bridge.start_checkout(150, "Asha", "asha@campus.edu", rec.paid.append)

    assert first["order_id"] != second["order_id"]
    assert rec.created == [150, 150]
