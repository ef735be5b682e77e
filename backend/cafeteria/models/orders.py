from __future__ import annotations

from ..extensions import db
from ..money import paise_to_rupees
from ..time_utils import to_utc_z


class Order(db.Model):
    """
    Customer order placed from a cart snapshot.

    total_amount_paise is fixed at submission time and always equals the
    sum of the persisted OrderItem.line_total_paise.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_customer_created", "customer_id", "created_at"),
        db.Index("ix_orders_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(128), nullable=False)

    total_amount_paise = db.Column(db.Integer, nullable=False)

    # Lifecycle status: pending -> confirmed -> preparing -> ready -> completed (or cancelled)
    status = db.Column(db.String(16), nullable=False, default="pending", index=True)

    payment_method = db.Column(db.String(16), nullable=False)
    payment_status = db.Column(db.String(16), nullable=False, default="pending", index=True)

    # Razorpay order created for this order's total; one provider order pays one order
    provider_order_id = db.Column(db.String(64), nullable=True, unique=True)
    # Set once the payment signature is verified
    provider_payment_id = db.Column(db.String(64), nullable=True)

    special_instructions = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    estimated_ready_at = db.Column(db.DateTime(timezone=True), nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    customer = db.relationship("User", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem",
        backref="order",
        lazy=True,
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "items": [item.to_dict() for item in self.items],
            "total_amount_paise": self.total_amount_paise,
            "total_amount": paise_to_rupees(self.total_amount_paise),
            "status": self.status,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "provider_order_id": self.provider_order_id,
            "provider_payment_id": self.provider_payment_id,
            "special_instructions": self.special_instructions,
            "created_at": to_utc_z(self.created_at),
            "estimated_ready_at": to_utc_z(self.estimated_ready_at),
            "completed_at": to_utc_z(self.completed_at) if self.completed_at else None,
        }


class OrderItem(db.Model):
    """Line item snapshot on an order."""
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = db.Column(db.Integer, db.ForeignKey("menu_items.id"), nullable=False, index=True)

    # Name and price copied from the menu at submission
    name = db.Column(db.String(128), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_paise = db.Column(db.Integer, nullable=False)
    line_total_paise = db.Column(db.Integer, nullable=False)

    special_instructions = db.Column(db.Text, nullable=True)

    menu_item = db.relationship("MenuItem")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price_paise": self.unit_price_paise,
            "line_total_paise": self.line_total_paise,
            "special_instructions": self.special_instructions,
        }
