from __future__ import annotations

from ..extensions import db
from ..money import paise_to_rupees
from ..time_utils import to_utc_z


MENU_CATEGORIES = ("breakfast", "lunch", "dinner", "snacks", "beverages", "desserts")

ITEM_AVAILABLE = "available"
ITEM_UNAVAILABLE = "unavailable"
ITEM_LOW_STOCK = "low_stock"

ITEM_STATUSES = (ITEM_AVAILABLE, ITEM_UNAVAILABLE, ITEM_LOW_STOCK)


class MenuItem(db.Model):
    """A dish or drink on the cafeteria menu."""
    __tablename__ = "menu_items"
    __table_args__ = (
        db.Index("ix_menu_items_category_status", "category", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)

    price_paise = db.Column(db.Integer, nullable=False)

    category = db.Column(db.String(32), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=ITEM_AVAILABLE)

    image_url = db.Column(db.String(512), nullable=True)

    # Ingredient names, matched against InventoryItem.name for consumption estimates
    ingredients = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)

    prep_time_minutes = db.Column(db.Integer, nullable=False, default=10)
    calories = db.Column(db.Integer, nullable=True)

    is_popular = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def is_orderable(self) -> bool:
        return self.status != ITEM_UNAVAILABLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price_paise": self.price_paise,
            "price": paise_to_rupees(self.price_paise),
            "category": self.category,
            "status": self.status,
            "image_url": self.image_url,
            "ingredients": list(self.ingredients or []),
            "tags": list(self.tags or []),
            "prep_time_minutes": self.prep_time_minutes,
            "calories": self.calories,
            "is_popular": self.is_popular,
            "created_at": to_utc_z(self.created_at),
        }
