# Overview: Service-layer operations for the prepaid wallet; encapsulates balance changes and the transaction ledger.

"""
Wallet Service

The balance lives on User.wallet_balance_paise and every change appends a
Transaction row in the same commit. The balance never goes below zero:
debits check it first and refuse.

Top-ups are paid through Razorpay: begin_top_up records a pending deposit
keyed by the provider order id, complete_top_up credits it after the
payment signature is verified. Nothing credits the balance without one.
"""

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Order, Transaction, User
from ..models.wallet import TXN_COMPLETED, TXN_DEPOSIT, TXN_PAYMENT, TXN_PENDING, TXN_REFUND
from ..time_utils import utcnow


# Single top-up ceiling: Rs 10,000
MAX_TOP_UP_PAISE = 1_000_000


class WalletError(ValueError):
    """Raised for wallet operation errors."""


def check_top_up_amount(amount_paise: int) -> None:
    if isinstance(amount_paise, bool) or not isinstance(amount_paise, int):
        raise WalletError("amount must be a whole number of paise")
    if amount_paise <= 0:
        raise WalletError("Top-up amount must be positive")
    if amount_paise > MAX_TOP_UP_PAISE:
        raise WalletError(f"Top-up amount cannot exceed {MAX_TOP_UP_PAISE} paise")


def begin_top_up(user_id: int, amount_paise: int, provider_order_id: str) -> Transaction:
    """
    Record a pending deposit for a Razorpay order created for amount_paise.

    The balance is untouched until complete_top_up sees a verified payment
    for the same provider order.
    """
    check_top_up_amount(amount_paise)
    if not provider_order_id:
        raise WalletError("Provider order id is required")

    user = _get_user(user_id)
    try:
        txn = _append(
            user_id=user.id,
            amount_paise=amount_paise,
            txn_type=TXN_DEPOSIT,
            description="Wallet top-up (awaiting payment)",
            reference=provider_order_id,
            status=TXN_PENDING,
        )
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise WalletError("Provider order already used") from exc
    return txn


def complete_top_up(user_id: int, provider_order_id: str, provider_payment_id: str) -> Transaction:
    """
    Credit a pending deposit once its payment signature has been verified.

    Only the user's own pending deposit for that provider order qualifies,
    and it completes once: a repeated callback finds nothing pending.
    """
    txn = (
        db.session.query(Transaction)
        .filter_by(user_id=user_id, type=TXN_DEPOSIT, status=TXN_PENDING, reference=provider_order_id)
        .one_or_none()
    )
    if txn is None:
        raise WalletError("No pending top-up for this payment")

    user = _get_user(user_id)
    user.wallet_balance_paise += txn.amount_paise
    txn.status = TXN_COMPLETED
    txn.description = f"Wallet top-up (payment {provider_payment_id})"

    db.session.commit()
    return txn


def debit_for_order(order: Order) -> Transaction:
    """
    Charge an order's total to its customer's wallet.

    Flushes but does not commit; the caller commits together with the
    order's payment status.
    """
    user = _get_user(order.customer_id)
    if user.wallet_balance_paise < order.total_amount_paise:
        raise WalletError("Insufficient wallet balance")

    user.wallet_balance_paise -= order.total_amount_paise

    return _append(
        user_id=user.id,
        amount_paise=order.total_amount_paise,
        txn_type=TXN_PAYMENT,
        description=f"Payment for order #{order.id}",
        order_id=order.id,
    )


def refund_order(order: Order) -> Transaction:
    """Credit a cancelled order back to the wallet. Caller commits."""
    user = _get_user(order.customer_id)
    user.wallet_balance_paise += order.total_amount_paise

    return _append(
        user_id=user.id,
        amount_paise=order.total_amount_paise,
        txn_type=TXN_REFUND,
        description=f"Refund for cancelled order #{order.id}",
        order_id=order.id,
    )


def get_transactions(user_id: int, limit: int = 50) -> list[Transaction]:
    return (
        db.session.query(Transaction)
        .filter_by(user_id=user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(limit)
        .all()
    )


def _get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise WalletError("User not found")
    return user


def _append(
    user_id: int,
    amount_paise: int,
    txn_type: str,
    description: str,
    order_id: int | None = None,
    reference: str | None = None,
    status: str = TXN_COMPLETED,
) -> Transaction:
    txn = Transaction(
        user_id=user_id,
        order_id=order_id,
        amount_paise=amount_paise,
        type=txn_type,
        status=status,
        description=description,
        reference=reference,
        created_at=utcnow(),
    )
    db.session.add(txn)
    db.session.flush()
    return txn
