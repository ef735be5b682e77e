from __future__ import annotations

from ..extensions import db
from ..money import paise_to_rupees
from ..time_utils import to_utc_z


class InventoryItem(db.Model):
    """
    Kitchen stock item (rice, milk, vegetables...).

    quantity is a plain stored figure in `unit`, edited by staff.
    """
    __tablename__ = "inventory_items"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_inventory_items_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(128), nullable=False)
    category = db.Column(db.String(64), nullable=True)

    quantity = db.Column(db.Float, nullable=False, default=0)
    unit = db.Column(db.String(16), nullable=False)
    threshold = db.Column(db.Float, nullable=False, default=0)

    cost_paise = db.Column(db.Integer, nullable=True)
    supplier = db.Column(db.String(128), nullable=True)

    last_restocked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "threshold": self.threshold,
            "cost_paise": self.cost_paise,
            "supplier": self.supplier,
            "is_low": self.is_low,
            "last_restocked_at": to_utc_z(self.last_restocked_at) if self.last_restocked_at else None,
            "created_at": to_utc_z(self.created_at),
        }


class WasteRecord(db.Model):
    """Food discarded by the kitchen. Append-only."""
    __tablename__ = "waste_records"
    __table_args__ = (
        db.Index("ix_waste_records_recorded_at", "recorded_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    item_name = db.Column(db.String(128), nullable=False)
    inventory_item_id = db.Column(db.Integer, db.ForeignKey("inventory_items.id"), nullable=True)

    quantity = db.Column(db.Float, nullable=False)
    cost_paise = db.Column(db.Integer, nullable=False, default=0)
    reason = db.Column(db.String(255), nullable=False)

    recorded_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    recorded_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    inventory_item = db.relationship("InventoryItem")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_name": self.item_name,
            "inventory_item_id": self.inventory_item_id,
            "quantity": self.quantity,
            "cost_paise": self.cost_paise,
            "cost": paise_to_rupees(self.cost_paise),
            "reason": self.reason,
            "recorded_by_user_id": self.recorded_by_user_id,
            "recorded_at": to_utc_z(self.recorded_at),
        }
