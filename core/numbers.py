"""Numeric helpers shared by the calculators.

Python's built-in `round` uses banker's rounding; nutrition values are shown
with half-up rounding (2.5 kcal -> 3 kcal), so all output rounding goes
through these helpers.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional


def round_half_up(value: Optional[float]) -> Optional[int]:
    """Round to the nearest integer, halves toward positive infinity."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def round_1(value: Optional[float]) -> Optional[float]:
    """Round to one decimal place, halves away from zero."""
    if value is None:
        return None
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce DB/JSON values (Decimal, str, None) to float, or `default`."""
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result):
        return default
    return result
