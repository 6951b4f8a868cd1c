"""Volume trend calculations"""

from typing import Optional, Sequence

from ..data.models import PricePoint

INCREASING = "increasing"
DECREASING = "decreasing"
FLAT = "flat"


def compare_volume_windows(recent: Sequence[float], prior: Sequence[float],
                           flat_band_pct: float = 0.05) -> Optional[str]:
    """
    Compare mean volume of two windows

    Args:
        recent: Volumes of the most recent window
        prior: Volumes of the window before it
        flat_band_pct: Relative change treated as flat

    Returns:
        "increasing", "decreasing", "flat", or None if either window is empty
    """
    if not recent or not prior:
        return None

    recent_avg = sum(recent) / len(recent)
    prior_avg = sum(prior) / len(prior)

    if prior_avg <= 0:
        return INCREASING if recent_avg > 0 else FLAT

    change = (recent_avg - prior_avg) / prior_avg
    if change > flat_band_pct:
        return INCREASING
    if change < -flat_band_pct:
        return DECREASING
    return FLAT


def calculate_volume_trend(points: Sequence[PricePoint], lookback: int = 5,
                           flat_band_pct: float = 0.05) -> Optional[str]:
    """
    Volume trend of the last ``lookback`` bars against the ``lookback`` before

    Args:
        points: Price history in chronological order
        lookback: Bars per window
        flat_band_pct: Relative change treated as flat

    Returns:
        Trend label or None if fewer than ``2 * lookback`` bars
    """
    if lookback <= 0 or len(points) < 2 * lookback:
        return None

    volumes = [p.volume for p in points]
    return compare_volume_windows(
        volumes[-lookback:],
        volumes[-2 * lookback:-lookback],
        flat_band_pct
    )


def calculate_down_day_volume_trend(points: Sequence[PricePoint], lookback: int = 5,
                                    flat_band_pct: float = 0.05) -> Optional[str]:
    """
    Volume trend restricted to down days (close below previous close)

    The last ``2 * lookback`` bars are split in two windows as in
    calculate_volume_trend; only down-day volumes are averaged in each.

    Returns:
        Trend label or None if history is short or a window has no down days
    """
    if lookback <= 0 or len(points) < 2 * lookback + 1:
        return None

    recent: list[float] = []
    prior: list[float] = []
    start = len(points) - 2 * lookback
    for i in range(start, len(points)):
        if points[i].close < points[i - 1].close:
            target = recent if i >= len(points) - lookback else prior
            target.append(points[i].volume)

    return compare_volume_windows(recent, prior, flat_band_pct)
