"""Decimal arithmetic helpers"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

# Amounts at or below this magnitude are treated as zero/settled everywhere.
TOLERANCE = Decimal("0.01")

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Convert an upstream amount to Decimal, degrading to zero.

    None, booleans, unparseable strings, NaN and infinities all become 0 so
    that a single malformed record cannot break a whole calculation.

    Args:
        value: Number, numeric string, Decimal or anything else

    Returns:
        Finite Decimal value
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, float) and not math.isfinite(value):
        return ZERO
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round_decimal(value: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Round a decimal value to specified decimal places.

    Args:
        value: Decimal value to round
        decimal_places: Number of decimal places (default 2)

    Returns:
        Rounded decimal value
    """
    quantize_value = Decimal(10) ** -decimal_places
    return value.quantize(quantize_value, rounding=ROUND_HALF_UP)


def sum_decimals(values: Iterable[Decimal]) -> Decimal:
    """
    Sum decimal values.

    Args:
        values: Decimal values

    Returns:
        Sum of all values
    """
    return sum(values, ZERO)


def is_negligible(value: Decimal) -> bool:
    """True when `value` is within the settlement tolerance of zero"""
    return abs(value) <= TOLERANCE
