# Overview: Rupee/paise conversion helpers shared by orders, wallet and payments.

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

PAISE_PER_RUPEE = 100


def rupees_to_paise(amount) -> int:
    """
    Convert a rupee amount (int, float, str or Decimal) to integer paise.

    Goes through str() so 150.1 becomes 15010, not 15009.999...
    Raises ValueError for non-numeric input or booleans.
    """
    if isinstance(amount, bool) or amount is None:
        raise ValueError("amount must be a number")
    try:
        rupees = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError("amount must be a number")
    if not rupees.is_finite():
        raise ValueError("amount must be a finite number")
    return int((rupees * PAISE_PER_RUPEE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def paise_to_rupees(paise: int) -> float:
    return float(Decimal(paise) / PAISE_PER_RUPEE)
