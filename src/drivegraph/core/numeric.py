"""Numeric input helpers shared by field descriptors and compute functions."""

from __future__ import annotations

import math
from typing import Any

from .constants import DURATION_DIGITS, MIN_VALUE, ROUND_DIGITS


def round_to_digits(value: float, digits: int = ROUND_DIGITS) -> float:
    """Round to a fixed number of decimal digits.

    Returns a plain float; ``-0.0`` is normalised to ``0.0`` so serialized
    outputs compare equal.
    """
    out = round(float(value), digits)
    return 0.0 if out == 0 else out


def parse_float(value: Any, default: float = 0.0) -> float:
    """Parse ``value`` as a float, returning ``default`` when impossible.

    Non-finite values (nan, inf) are treated as unparsable.
    """
    if isinstance(value, bool):
        return float(value)
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(out):
        return default
    return out


def parse_ratio(value: Any, default: float = 1.0) -> float:
    """Parse a ratio parameter; missing or zero falls back to ``default``."""
    out = parse_float(value, default)
    return out if out != 0 else default


def validate_numeric_input(
    value: Any,
    min_value: float = MIN_VALUE,
    digits: int = DURATION_DIGITS,
) -> float:
    """Coerce user input to a clamped, rounded number.

    Non-numeric input is coerced to ``min_value``; values below the bound
    are clamped up to it.

    Args:
        value: Raw input (str, int, float, None).
        min_value: Lower bound.
        digits: Decimal digits kept.

    Returns:
        Clamped and rounded float.
    """
    if isinstance(value, str) and not value.strip():
        return round_to_digits(min_value, digits)
    num = parse_float(value, default=min_value)
    return round_to_digits(max(num, min_value), digits)
