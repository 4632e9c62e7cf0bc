"""
Pure numeric helpers shared by every scorer.

All helpers are total: non-numeric and non-finite inputs collapse to a safe
default instead of raising, so a malformed record only ever yields a
conservative score.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """Coerce `value` to a finite float; anything else becomes `default`."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


def optional_float(value: Any) -> float | None:
    """Like `safe_float` but keeps "absent" distinguishable from zero."""
    number = safe_float(value, default=math.nan)
    return None if math.isnan(number) else number


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp a number into [lo, hi]."""
    return max(lo, min(hi, x))


def clamp01(x: Any) -> float:
    """Clamp a number into the [0.0, 1.0] range (non-finite -> 0.0)."""
    return clamp(safe_float(x), 0.0, 1.0)


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(x + 0.5))
