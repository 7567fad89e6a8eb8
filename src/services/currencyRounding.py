"""
Currency rounding for the pricing engine.

Every monetary value the engine produces is an integer amount of currency
units.  All rounding goes through ``round_currency`` exactly once, at the
point where the value is computed.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert ints, floats and Decimals to ``Decimal`` without binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value))


def round_currency(value: Number) -> int:
    """Round to the nearest integer currency unit, halves away from zero.

    ``Decimal`` ROUND_HALF_UP rounds ties away from zero for both signs,
    so ``2.5 -> 3`` and ``-2.5 -> -3``.
    """
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
