"""Fixed-point money helpers. Every amount in the engine is a Decimal."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .constants import MONEY_PLACES

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Optional[Decimal]:
    """
    Coerce int/str/float/Decimal to Decimal; return None if invalid.
    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round half-up to 2 decimals. Only used where a value is surfaced."""
    return Decimal(amount).quantize(Decimal(MONEY_PLACES), rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """`percentage` percent of `amount`, full precision."""
    return amount * percentage / HUNDRED
