"""
Amount coercion.

Amounts are non-negative whole currency units. Whatever the user typed,
coercion yields an int between 0 and MAX_AMOUNT and never raises.
"""

import math
import re
from decimal import Decimal
from typing import Any

_NON_DIGITS = re.compile(r"[^0-9]")

# Largest integer a JSON number round-trips exactly (2**53 - 1).
MAX_AMOUNT = 9_007_199_254_740_991
_MAX_DIGITS = len(str(MAX_AMOUNT))


def parse_amount(value: Any) -> int:
    """
    Coerce user input to a non-negative integer amount.

    - ints are kept, negatives clamp to 0
    - floats/Decimals are truncated, negatives and non-finite values give 0
    - anything else is turned into text, every non-digit character is
      stripped and the rest parsed; no digits at all gives 0

    Text is never interpreted as a sign or a decimal point, so
    "5.000.000" parses as 5000000 and "-200" as 200. Results above
    MAX_AMOUNT clamp to MAX_AMOUNT.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return min(max(value, 0), MAX_AMOUNT)
    if isinstance(value, (float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        if isinstance(value, Decimal) and not value.is_finite():
            return 0
        if value >= MAX_AMOUNT:
            return MAX_AMOUNT
        return max(int(value), 0)

    digits = _NON_DIGITS.sub("", str(value)).lstrip("0")
    if not digits:
        return 0
    if len(digits) > _MAX_DIGITS:
        return MAX_AMOUNT
    return min(int(digits), MAX_AMOUNT)
