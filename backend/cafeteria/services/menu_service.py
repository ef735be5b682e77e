# Overview: Service-layer operations for the menu catalog.

from ..extensions import db
from ..models import MenuItem
from ..models.menu import ITEM_STATUSES, MENU_CATEGORIES


class MenuError(ValueError):
    """Raised for menu operation errors."""


def list_menu_items(category: str | None = None, status: str | None = None) -> list[MenuItem]:
    query = db.session.query(MenuItem)

    if category:
        if category not in MENU_CATEGORIES:
            raise MenuError(f"Unknown category: {category}")
        query = query.filter_by(category=category)

    if status:
        if status not in ITEM_STATUSES:
            raise MenuError(f"Unknown status: {status}")
        query = query.filter_by(status=status)

    return query.order_by(MenuItem.category, MenuItem.name).all()


def get_menu_item(item_id: int) -> MenuItem | None:
    return db.session.get(MenuItem, item_id)


def get_catalog(item_ids=None) -> dict[int, MenuItem]:
    """Menu items keyed by id, optionally restricted to item_ids."""
    query = db.session.query(MenuItem)
    if item_ids is not None:
        ids = [i for i in item_ids if isinstance(i, int) and not isinstance(i, bool)]
        if not ids:
            return {}
        query = query.filter(MenuItem.id.in_(ids))
    return {item.id: item for item in query.all()}


def create_menu_item(patch: dict) -> MenuItem:
    """patch is already validated by validate_payload + enforce_rules_menu_item."""
    item = MenuItem(**patch)
    db.session.add(item)
    db.session.commit()
    return item


def update_menu_item(item_id: int, patch: dict) -> MenuItem:
    item = get_menu_item(item_id)
    if not item:
        raise MenuError("Menu item not found")

    for key, value in patch.items():
        setattr(item, key, value)

    db.session.commit()
    return item


def set_availability(item_id: int, status: str) -> MenuItem:
    if status not in ITEM_STATUSES:
        raise MenuError(f"status must be one of {', '.join(ITEM_STATUSES)}")
    return update_menu_item(item_id, {"status": status})
