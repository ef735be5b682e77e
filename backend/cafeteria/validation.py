# Overview: Request payload validation against model columns plus per-entity business rules.

"""
Payload Validation

validate_payload turns a JSON body into a patch dict that is safe to apply
to a model: only allowlisted fields, values coerced to the column's type,
nullability and String length enforced. The enforce_rules_* helpers then
check the domain limits the schema cannot express.

Both raise ValidationError, which routes answer with 400.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text

from .time_utils import parse_iso_datetime
from .models.menu import MENU_CATEGORIES, ITEM_STATUSES


# Largest menu price accepted: Rs 1,00,000.00
MAX_PRICE_PAISE = 10_000_000


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level conflict with existing data (duplicate inventory name)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    writable_fields is the allowlist clients may set; anything else is
    rejected outright. required_on_create applies when partial=False.
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


# =============================================================================
# COERCERS (one per column type)
# =============================================================================

def _to_int(key: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # "12" is fine; "12.0", "1e3" and floats are not
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdecimal():
            return int(text)
    raise ValidationError(f"{key} must be an integer")


def _to_float(key: str, value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{key} must be a number")


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{key} must be true or false")


def _to_datetime(key: str, value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    parsed = None
    if isinstance(value, str):
        try:
            parsed = parse_iso_datetime(value)
        except ValueError:
            parsed = None
    if parsed is None:
        raise ValidationError(f"{key} must be an ISO-8601 datetime")
    return parsed


def _to_string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{key} must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def _to_text(key: str, value: Any) -> str:
    return str(value).strip()


# Checked in order; Text subclasses String so one entry covers both
_COERCERS: list[tuple[type, Callable[[str, Any], Any]]] = [
    (Integer, _to_int),
    (Float, _to_float),
    (Boolean, _to_bool),
    (DateTime, _to_datetime),
    (JSON, _to_string_list),
    (String, _to_text),
]


def _coerce(column, value: Any) -> Any:
    for coltype, coercer in _COERCERS:
        if isinstance(column.type, coltype):
            return coercer(column.key, value)
    return value


def validate_payload(*, model, payload: dict | None, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Return a cleaned patch for model from payload.

    partial=True (PATCH) skips the required-field check; every supplied
    field is still validated.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(policy.required_on_create - payload.keys())
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}

    disallowed = [k for k in payload if k not in policy.writable_fields or k not in columns]
    if disallowed:
        raise ValidationError(f"Field not allowed: {disallowed[0]}")

    patch: dict = {}
    for key, raw in payload.items():
        column = columns[key]

        if raw is None:
            if not column.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[key] = None
            continue

        value = _coerce(column, raw)

        if isinstance(value, str):
            if value == "" and not column.nullable:
                raise ValidationError(f"{key} cannot be blank")
            max_length = getattr(column.type, "length", None)
            if max_length and len(value) > max_length:
                raise ValidationError(f"{key} exceeds max length {max_length}")

        patch[key] = value

    return patch


# =============================================================================
# BUSINESS RULES
# =============================================================================

def enforce_rules_menu_item(patch: dict) -> None:
    price = patch.get("price_paise")
    if price is not None and not 0 <= price <= MAX_PRICE_PAISE:
        if price < 0:
            raise ValidationError("price_paise must be >= 0")
        raise ValidationError(f"price_paise cannot exceed {MAX_PRICE_PAISE}")

    if "category" in patch and patch["category"] not in MENU_CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(MENU_CATEGORIES)}")

    if "status" in patch and patch["status"] not in ITEM_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(ITEM_STATUSES)}")

    if patch.get("prep_time_minutes") is not None and patch["prep_time_minutes"] < 0:
        raise ValidationError("prep_time_minutes must be >= 0")


def enforce_rules_inventory_item(patch: dict) -> None:
    if "quantity" in patch and patch["quantity"] < 0:
        raise ValidationError("quantity must be >= 0")

    if "threshold" in patch and patch["threshold"] < 0:
        raise ValidationError("threshold must be >= 0")

    if patch.get("cost_paise") is not None and patch["cost_paise"] < 0:
        raise ValidationError("cost_paise must be >= 0")


def enforce_rules_waste_record(patch: dict) -> None:
    if "quantity" in patch and patch["quantity"] <= 0:
        raise ValidationError("quantity must be > 0")

    if patch.get("cost_paise") is not None and patch["cost_paise"] < 0:
        raise ValidationError("cost_paise must be >= 0")
