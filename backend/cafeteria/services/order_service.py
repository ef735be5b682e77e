# Overview: Service-layer operations for orders; encapsulates business logic and database work.

"""
Order Service

Orders are created from a cart snapshot and then move forward through the
kitchen lifecycle. Nothing here retries: a failed write rolls back and the
error propagates to the caller, who still holds the unmodified cart.

STATUS LIFECYCLE (monotonic):
    pending -> confirmed -> preparing -> ready -> completed
    any non-terminal status -> cancelled
Skipping forward is allowed (pending -> ready). Backward and same-status
moves are rejected. completed and cancelled are terminal and immutable.

PAYMENT STATUS: pending -> completed | failed
"""

from datetime import timedelta

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..cart import Cart, total
from ..extensions import db
from ..models import Order, OrderItem, User
from ..time_utils import utcnow
from . import wallet_service
from .wallet_service import WalletError


class OrderError(Exception):
    """Raised for order operation errors."""
    pass


class OrderNotFoundError(OrderError):
    pass


# =============================================================================
# STATUS / METHOD CONSTANTS
# =============================================================================

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_PREPARING = "preparing"
STATUS_READY = "ready"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

ORDER_FLOW = [STATUS_PENDING, STATUS_CONFIRMED, STATUS_PREPARING, STATUS_READY, STATUS_COMPLETED]
ORDER_STATUSES = ORDER_FLOW + [STATUS_CANCELLED]
TERMINAL_STATUSES = {STATUS_COMPLETED, STATUS_CANCELLED}

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"

METHOD_WALLET = "wallet"
METHOD_UPI = "upi"
METHOD_CARD = "card"
METHOD_CASH = "cash"

PAYMENT_METHODS = [METHOD_WALLET, METHOD_UPI, METHOD_CARD, METHOD_CASH]

# Methods settled through the Razorpay checkout widget
GATEWAY_METHODS = {METHOD_UPI, METHOD_CARD}

DEFAULT_READY_MINUTES = 15


def can_transition(current: str, new: str) -> bool:
    if current in TERMINAL_STATUSES or new not in ORDER_STATUSES:
        return False
    if new == STATUS_CANCELLED:
        return True
    return ORDER_FLOW.index(new) > ORDER_FLOW.index(current)


# =============================================================================
# SUBMISSION
# =============================================================================

def submit_order(
    customer: User,
    cart: Cart,
    payment_method: str,
    note: str | None = None,
    ready_minutes: int = DEFAULT_READY_MINUTES,
) -> Order:
    """
    Persist a cart snapshot as a new pending order.

    The total is computed here, once, from the cart lines and never
    re-derived. The cart itself is left untouched; clearing it is the
    caller's decision after success.

    Raises:
        OrderError: empty cart, unknown payment method, or a database failure
    """
    if cart.is_empty:
        raise OrderError("Your cart is empty")

    if payment_method not in PAYMENT_METHODS:
        raise OrderError(f"Invalid payment method: {payment_method}. Must be one of {PAYMENT_METHODS}")

    now = utcnow()

    order = Order(
        customer_id=customer.id,
        customer_name=customer.name,
        total_amount_paise=total(cart),
        status=STATUS_PENDING,
        payment_method=payment_method,
        payment_status=PAYMENT_PENDING,
        special_instructions=note or None,
        created_at=now,
        estimated_ready_at=now + timedelta(minutes=ready_minutes),
    )

    for line in cart:
        order.items.append(OrderItem(
            menu_item_id=line.item_id,
            name=line.name,
            quantity=line.quantity,
            unit_price_paise=line.unit_price_paise,
            line_total_paise=line.line_total_paise,
            special_instructions=line.note,
        ))

    try:
        db.session.add(order)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise OrderError("Failed to place order") from exc

    return order


# =============================================================================
# QUERIES
# =============================================================================

def get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if not order:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return order


def list_orders(customer_id: int | None = None, status: str | None = None, limit: int = 100) -> list[Order]:
    query = db.session.query(Order)

    if customer_id is not None:
        query = query.filter_by(customer_id=customer_id)

    if status:
        if status not in ORDER_STATUSES:
            raise OrderError(f"Unknown status: {status}")
        query = query.filter_by(status=status)

    return query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()


# =============================================================================
# LIFECYCLE
# =============================================================================

def update_status(order_id: int, new_status: str) -> Order:
    """
    Move an order forward. Cancellation goes through cancel_order so wallet
    refunds are never skipped.
    """
    if new_status == STATUS_CANCELLED:
        return cancel_order(order_id)

    order = get_order(order_id)

    if new_status not in ORDER_STATUSES:
        raise OrderError(f"Invalid status: {new_status}. Must be one of {ORDER_STATUSES}")

    if not can_transition(order.status, new_status):
        raise OrderError(f"Cannot change order from {order.status} to {new_status}")

    order.status = new_status
    if new_status == STATUS_COMPLETED:
        order.completed_at = utcnow()

    db.session.commit()
    return order


def cancel_order(order_id: int) -> Order:
    """Cancel a non-terminal order; wallet-paid orders are refunded to the wallet."""
    order = get_order(order_id)

    if order.status in TERMINAL_STATUSES:
        raise OrderError(f"Order cannot be cancelled in {order.status} state")

    order.status = STATUS_CANCELLED

    if order.payment_method == METHOD_WALLET and order.payment_status == PAYMENT_COMPLETED:
        wallet_service.refund_order(order)

    db.session.commit()
    return order


# =============================================================================
# PAYMENT
# =============================================================================

def pay_with_wallet(order_id: int) -> Order:
    """
    Settle a wallet order from the customer's balance and confirm it.

    Raises:
        OrderError: wrong method, already settled, cancelled, or insufficient balance
    """
    order = _get_payable_order(order_id)

    if order.payment_method != METHOD_WALLET:
        raise OrderError("Order is not a wallet order")

    try:
        wallet_service.debit_for_order(order)
    except WalletError as e:
        db.session.rollback()
        raise OrderError(str(e))

    _settle(order)
    db.session.commit()
    return order


def get_gateway_payable_order(order_id: int) -> Order:
    """An unpaid, uncancelled upi/card order, ready for a provider order."""
    order = _get_payable_order(order_id)
    if order.payment_method not in GATEWAY_METHODS:
        raise OrderError(f"Order payment method {order.payment_method} is not settled online")
    return order


def attach_provider_order(order_id: int, provider_order_id: str, amount_paise: int) -> Order:
    """
    Bind a freshly created Razorpay order to this order.

    The gateway must have been asked for exactly the order total. A new
    checkout replaces the previous binding, so only the latest provider
    order can settle the order.
    """
    order = get_gateway_payable_order(order_id)

    if amount_paise != order.total_amount_paise:
        raise OrderError("Provider order amount does not match the order total")

    order.provider_order_id = provider_order_id
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise OrderError("Provider order is already bound to another order") from exc
    return order


def mark_payment_verified(order_id: int, provider_order_id: str, provider_payment_id: str) -> Order:
    """
    Record a gateway payment whose signature has already been verified.

    The provider order must be the one attached to this order; a valid
    signature for any other provider order settles nothing.
    """
    order = get_gateway_payable_order(order_id)

    if not order.provider_order_id or order.provider_order_id != provider_order_id:
        raise OrderError("Payment does not belong to this order")

    order.provider_payment_id = provider_payment_id
    _settle(order)

    db.session.commit()
    return order


def mark_payment_failed(order_id: int) -> Order:
    order = _get_payable_order(order_id)
    order.payment_status = PAYMENT_FAILED
    db.session.commit()
    return order


def _get_payable_order(order_id: int) -> Order:
    order = get_order(order_id)
    if order.status == STATUS_CANCELLED:
        raise OrderError("Cannot pay for a cancelled order")
    if order.payment_status == PAYMENT_COMPLETED:
        raise OrderError("Order is already paid")
    return order


def _settle(order: Order) -> None:
    order.payment_status = PAYMENT_COMPLETED
    if order.status == STATUS_PENDING:
        order.status = STATUS_CONFIRMED
