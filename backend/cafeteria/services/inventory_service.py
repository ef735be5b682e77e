# Overview: Service-layer operations for kitchen stock and food waste records.

"""
Inventory Service

Stock levels are plain figures edited by staff; there is no ledger behind
them. Waste records are append-only and may point at an inventory item by
name. Payloads arrive already validated by validate_payload and the
enforce_rules_* helpers.
"""

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import InventoryItem, WasteRecord
from ..time_utils import utcnow
from ..validation import ConflictError


class InventoryError(ValueError):
    """Raised for inventory operation errors."""


def list_inventory(category: str | None = None, low_only: bool = False) -> list[InventoryItem]:
    query = db.session.query(InventoryItem)
    if category:
        query = query.filter_by(category=category)
    if low_only:
        query = query.filter(InventoryItem.quantity <= InventoryItem.threshold)
    return query.order_by(InventoryItem.name).all()


def get_inventory_item(item_id: int) -> InventoryItem:
    item = db.session.get(InventoryItem, item_id)
    if not item:
        raise InventoryError("Inventory item not found")
    return item


def create_inventory_item(patch: dict) -> InventoryItem:
    item = InventoryItem(**patch)
    db.session.add(item)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Inventory item '{patch.get('name')}' already exists")
    return item


def update_inventory_item(item_id: int, patch: dict) -> InventoryItem:
    """
    Apply a partial update. A quantity increase counts as a restock and
    stamps last_restocked_at unless the caller supplied one.
    """
    item = get_inventory_item(item_id)

    if "quantity" in patch and patch["quantity"] > item.quantity and "last_restocked_at" not in patch:
        item.last_restocked_at = utcnow()

    for key, value in patch.items():
        setattr(item, key, value)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Inventory item '{patch.get('name')}' already exists")
    return item


def delete_inventory_item(item_id: int) -> None:
    item = get_inventory_item(item_id)
    db.session.query(WasteRecord).filter_by(inventory_item_id=item.id).update({"inventory_item_id": None})
    db.session.delete(item)
    db.session.commit()


# =============================================================================
# WASTE
# =============================================================================

def record_waste(patch: dict, recorded_by_user_id: int | None = None) -> WasteRecord:
    """
    Append a waste record. When item_name matches a stock item the record is
    linked to it; stock levels are not changed.
    """
    linked = db.session.query(InventoryItem).filter_by(name=patch["item_name"]).first()

    record = WasteRecord(
        **patch,
        inventory_item_id=linked.id if linked else None,
        recorded_by_user_id=recorded_by_user_id,
    )
    if record.recorded_at is None:
        record.recorded_at = utcnow()
    if record.cost_paise is None:
        record.cost_paise = 0

    db.session.add(record)
    db.session.commit()
    return record


def list_waste(limit: int = 100) -> list[WasteRecord]:
    return (
        db.session.query(WasteRecord)
        .order_by(WasteRecord.recorded_at.desc(), WasteRecord.id.desc())
        .limit(limit)
        .all()
    )


def total_waste_cost_paise() -> int:
    return int(db.session.query(db.func.coalesce(db.func.sum(WasteRecord.cost_paise), 0)).scalar())
