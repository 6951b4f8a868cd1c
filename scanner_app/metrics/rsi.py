"""RSI (Relative Strength Index) and Stochastic RSI calculations"""

from typing import Optional, Sequence


def calculate_price_changes(closes: Sequence[float]) -> tuple[list[float], list[float]]:
    """
    Split day-over-day close deltas into gains and losses

    Args:
        closes: Closing prices in chronological order

    Returns:
        (gains, losses), each of length ``len(closes) - 1``; element j
        describes the move from close j to close j+1
    """
    gains = []
    losses = []
    for i in range(1, len(closes)):
        delta = closes[i] - closes[i - 1]
        gains.append(max(delta, 0.0))
        losses.append(max(-delta, 0.0))
    return gains, losses


def rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    """
    RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    A window without losses is defined as RSI 100, which also covers a
    completely flat window.
    """
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def calculate_rsi(closes: Sequence[float], period: int = 14) -> list[Optional[float]]:
    """
    Calculate RSI using simple (not Wilder-smoothed) trailing averages

    The value at index i averages the ``period`` deltas ending at close i,
    so the first value appears at index ``period``.

    Args:
        closes: Closing prices in chronological order
        period: RSI period (default 14)

    Returns:
        List the same length as ``closes``, None during warm-up
    """
    if period <= 0:
        raise ValueError(f"RSI period must be positive, got {period}")

    result: list[Optional[float]] = [None] * len(closes)
    if len(closes) < period + 1:
        return result

    gains, losses = calculate_price_changes(closes)

    for i in range(period, len(closes)):
        # Deltas i-period .. i-1 are the moves into closes i-period+1 .. i
        avg_gain = sum(gains[i - period:i]) / period
        avg_loss = sum(losses[i - period:i]) / period
        result[i] = rsi_from_averages(avg_gain, avg_loss)

    return result


def calculate_stoch_rsi(rsi_values: Sequence[Optional[float]], period: int = 14) -> list[Optional[float]]:
    """
    Calculate Stochastic RSI over a trailing window of defined RSI values

    stochRSI = (RSI - min(window)) / (max(window) - min(window)) * 100, and
    50 when the window is flat.

    Args:
        rsi_values: RSI series aligned with prices (None during warm-up)
        period: Number of RSI values per window (default 14)

    Returns:
        List the same length as ``rsi_values``, None until ``period`` RSI
        values are available
    """
    if period <= 0:
        raise ValueError(f"Stochastic RSI period must be positive, got {period}")

    result: list[Optional[float]] = [None] * len(rsi_values)
    window: list[float] = []

    for i, rsi in enumerate(rsi_values):
        if rsi is None:
            continue
        window.append(rsi)
        if len(window) > period:
            window.pop(0)
        if len(window) < period:
            continue

        low = min(window)
        high = max(window)
        if high == low:
            result[i] = 50.0
        else:
            value = (rsi - low) / (high - low) * 100.0
            result[i] = min(max(value, 0.0), 100.0)

    return result
