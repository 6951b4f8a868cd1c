"""EMA (Exponential Moving Average) calculations"""

from typing import Optional, Sequence


def calculate_ema(closes: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Calculate an Exponential Moving Average series

    The seed is the simple mean of the first ``period`` closes, placed at
    index ``period - 1``. Later values follow
    ``ema[i] = (close[i] - ema[i-1]) * 2 / (period + 1) + ema[i-1]``.

    Args:
        closes: Closing prices in chronological order
        period: EMA period

    Returns:
        List the same length as ``closes``, None before the seed index.
        All None when fewer than ``period`` closes are given.
    """
    if period <= 0:
        raise ValueError(f"EMA period must be positive, got {period}")

    result: list[Optional[float]] = [None] * len(closes)
    if len(closes) < period:
        return result

    k = 2.0 / (period + 1)
    ema = sum(closes[:period]) / period
    result[period - 1] = ema

    for i in range(period, len(closes)):
        ema = (closes[i] - ema) * k + ema
        result[i] = ema

    return result
