from __future__ import annotations

from ..extensions import db
from ..money import paise_to_rupees
from ..time_utils import to_utc_z


TXN_DEPOSIT = "deposit"
TXN_WITHDRAWAL = "withdrawal"
TXN_PAYMENT = "payment"
TXN_REFUND = "refund"

TXN_PENDING = "pending"
TXN_COMPLETED = "completed"


class Transaction(db.Model):
    """
    Wallet ledger entry.

    Rows are appended by wallet_service. The one update is a Razorpay top-up
    moving from pending to completed after its payment is verified; reference
    then holds the provider order id, unique across the ledger.
    amount_paise is always positive; the type carries the direction.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_user_created", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=True, index=True)

    amount_paise = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(16), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=TXN_COMPLETED)

    description = db.Column(db.String(255), nullable=False)
    reference = db.Column(db.String(128), nullable=True, unique=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", backref=db.backref("transactions", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "order_id": self.order_id,
            "amount_paise": self.amount_paise,
            "amount": paise_to_rupees(self.amount_paise),
            "type": self.type,
            "status": self.status,
            "description": self.description,
            "reference": self.reference,
            "created_at": to_utc_z(self.created_at),
        }
