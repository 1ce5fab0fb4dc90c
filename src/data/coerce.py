"""Numeric coercion for raw storage rows.

All tolerance of bad data lives here: rows enter the engine through these
helpers and nothing downstream has to guard against strings, NaN or None.
"""

import math
from decimal import Decimal
from typing import Any


def to_optional_number(value: Any) -> float | None:
    """Parse a raw field into a float, or None when missing/unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number

