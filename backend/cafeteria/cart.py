# Overview: Immutable cart state with reducer-style operations.

"""
Cart State

A cart is a value, not a shared object: every operation takes a Cart and
returns a new one, leaving the input untouched. Callers hold the current
cart themselves (request payload, client store, test) and pass it along.

INVARIANTS:
- line_total_paise is always unit_price_paise * quantity (derived, never stored)
- quantity >= 1 for every line in a cart
- line order is insertion order
- total is recomputed on every read
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping

from .validation import ValidationError


@dataclass(frozen=True)
class CartLine:
    item_id: int
    name: str
    unit_price_paise: int
    quantity: int
    note: str | None = None
    image_url: str | None = None

    @property
    def line_total_paise(self) -> int:
        return self.unit_price_paise * self.quantity

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "unit_price_paise": self.unit_price_paise,
            "quantity": self.quantity,
            "line_total_paise": self.line_total_paise,
            "note": self.note,
        }


@dataclass(frozen=True)
class Cart:
    lines: tuple[CartLine, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get(self, item_id: int) -> CartLine | None:
        for line in self.lines:
            if line.item_id == item_id:
                return line
        return None

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total_paise": total(self),
        }

    @classmethod
    def from_payload(cls, lines: Iterable[Mapping], catalog: Mapping[int, object]) -> "Cart":
        """
        Build a cart snapshot from request lines using server-side prices.

        lines: [{"item_id": 3, "quantity": 2, "note": "less spicy"}, ...]
        catalog: {menu_item_id: MenuItem}

        Repeated item ids accumulate exactly like repeated add_item calls.
        """
        if not isinstance(lines, (list, tuple)):
            raise ValidationError("items must be a list")

        cart = cls()
        for raw in lines:
            if not isinstance(raw, Mapping):
                raise ValidationError("each item must be an object")

            item_id = raw.get("item_id")
            quantity = raw.get("quantity", 1)
            if isinstance(item_id, bool) or not isinstance(item_id, int):
                raise ValidationError("item_id must be an integer")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise ValidationError("quantity must be a positive integer")

            item = catalog.get(item_id)
            if item is None:
                raise ValidationError(f"Menu item {item_id} not found")
            if not item.is_orderable:
                raise ValidationError(f"{item.name} is currently unavailable")

            note = raw.get("note")
            cart = add_item(cart, item, quantity, note=note.strip() if isinstance(note, str) and note.strip() else None)
        return cart


EMPTY_CART = Cart()


def add_item(cart: Cart, item, qty: int, note: str | None = None) -> Cart:
    """
    Add qty of a menu item (anything with id, name, price_paise).

    Existing lines are incremented; a resulting quantity <= 0 removes the
    line. A new line with qty <= 0 is a no-op. A supplied note replaces the
    line's note, None keeps the existing one.
    """
    existing = cart.get(item.id)

    if existing is None:
        if qty <= 0:
            return cart
        line = CartLine(
            item_id=item.id,
            name=item.name,
            unit_price_paise=item.price_paise,
            quantity=qty,
            note=note,
            image_url=getattr(item, "image_url", None),
        )
        return Cart(cart.lines + (line,))

    new_qty = existing.quantity + qty
    if new_qty <= 0:
        return remove_item(cart, item.id)

    updated = replace(existing, quantity=new_qty, note=note if note is not None else existing.note)
    return _replace_line(cart, updated)


def update_quantity(cart: Cart, item_id: int, new_qty: int) -> Cart:
    """
    Set a line's quantity. Values below 1 are ignored (the decrement control
    is disabled at 1); use remove_item to drop a line.
    """
    existing = cart.get(item_id)
    if existing is None or new_qty < 1 or new_qty == existing.quantity:
        return cart
    return _replace_line(cart, replace(existing, quantity=new_qty))


def remove_item(cart: Cart, item_id: int) -> Cart:
    lines = tuple(line for line in cart.lines if line.item_id != item_id)
    if len(lines) == len(cart.lines):
        return cart
    return Cart(lines)


def clear(cart: Cart) -> Cart:
    return EMPTY_CART


def total(cart: Cart) -> int:
    """Sum of line totals in paise."""
    return sum(line.line_total_paise for line in cart.lines)


def cart_reducer(cart: Cart, action: Mapping) -> Cart:
    """
    Store-style dispatch:
        {"type": "add", "item": item, "quantity": 2, "note": None}
        {"type": "update", "item_id": 1, "quantity": 3}
        {"type": "remove", "item_id": 1}
        {"type": "clear"}
    """
    kind = action.get("type")
    if kind == "add":
        return add_item(cart, action["item"], action.get("quantity", 1), note=action.get("note"))
    if kind == "update":
        return update_quantity(cart, action["item_id"], action["quantity"])
    if kind == "remove":
        return remove_item(cart, action["item_id"])
    if kind == "clear":
        return clear(cart)
    raise ValueError(f"Unknown cart action: {kind}")


def _replace_line(cart: Cart, updated: CartLine) -> Cart:
    return Cart(tuple(updated if line.item_id == updated.item_id else line for line in cart.lines))
