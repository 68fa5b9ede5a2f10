"""Fixed-point helpers for cent amounts and rounded percentages"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]

CENT = Decimal("1")
TENTH = Decimal("0.1")
HUNDREDTH = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert via str() so floats like 0.1 keep their printed value"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: Number) -> int:
    """Round a cent amount to a whole cent (half-up)"""
    return int(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def round_percent(value: Number, places: Decimal = TENTH) -> float:
    """Round a percentage half-up, 1 decimal by default"""
    return float(to_decimal(value).quantize(places, rounding=ROUND_HALF_UP))


def percent_of(part_cents: int, total_cents: int) -> Decimal:
    """Share of total as an unrounded percentage; 0 when total is 0"""
    if total_cents <= 0:
        return Decimal(0)
    return Decimal(part_cents) * 100 / Decimal(total_cents)


def cents_for_percent(total_cents: int, percent: Number) -> int:
    """Cent amount corresponding to percent of total"""
    return round_cents(Decimal(total_cents) * to_decimal(percent) / 100)
