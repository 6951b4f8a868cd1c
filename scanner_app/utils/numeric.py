"""Guarded arithmetic for degenerate inputs."""

import math
from typing import Optional


def is_finite_number(value: object) -> bool:
    """True for int/float values that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Divide, returning ``default`` when the result would not be finite.

    Args:
        numerator: Dividend
        denominator: Divisor
        default: Sentinel returned for a zero divisor or a non-finite result

    Returns:
        Quotient or the sentinel
    """
    if denominator == 0:
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def finite_or(value: Optional[float], default: Optional[float] = None) -> Optional[float]:
    """Return value if it is a finite number, otherwise default."""
    if value is None or not is_finite_number(value):
        return default
    return value


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for positive values (not banker's rounding)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
