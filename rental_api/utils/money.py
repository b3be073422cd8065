"""Decimal helpers for rates and totals."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

CENTS = Decimal("0.01")


def to_decimal(value) -> Optional[Decimal]:
    """Safely convert to Decimal; return None if invalid. Floats go through str()."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def is_positive_finite(value) -> bool:
    d = to_decimal(value)
    return d is not None and d.is_finite() and d > 0


def round2(x: Decimal) -> Decimal:
    return x.quantize(CENTS, rounding=ROUND_HALF_UP)
