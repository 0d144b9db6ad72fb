"""
Lenient parsing for query-string filter values.

Every filter on the parcels endpoints is optional, so malformed input is
normalized to "absent" here instead of being reported as an error.
"""

import math
from typing import Any, Optional


def parse_optional_number(raw: Any) -> Optional[float]:
    """
    Parse a non-negative finite number, or return None.

    None, blank strings, non-numeric text, booleans, NaN, +/-inf and negative
    values are all treated as absent.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        # float() also takes "1_000" and non-ASCII digits; callers send plain decimals
        if "_" in raw or not raw.isascii():
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        return None

    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_optional_int(raw: Any) -> Optional[int]:
    """
    Parse a positive integer (fractions are floored), or return None.

    Used for row limits, where zero and negative values fall back to the
    caller's default.
    """
    value = parse_optional_number(raw)
    if value is None:
        return None
    value = math.floor(value)
    return value if value >= 1 else None


def parse_flag(raw: Any) -> bool:
    """Only the literal "true" (trimmed, any case) counts as set."""
    if isinstance(raw, bool):
        return raw
    if not isinstance(raw, str):
        return False
    return raw.strip().lower() == "true"
