"""
Ingestion validation for price series.

Indicator chains (EMA in particular) carry every input forward, so a single
NaN bar would poison every later value. Invalid bars are dropped here before
any indicator sees them.
"""

from typing import Optional, Sequence

import structlog

from ..errors import MalformedDataError, TemporalDataError
from ..utils.numeric import is_finite_number
from .models import PricePoint

logger = structlog.get_logger(__name__)


class PriceSeriesValidator:
    """Validates and cleans price history before indicator calculation."""

    def __init__(self, strict: bool = False):
        """
        Initialize validator.

        Args:
            strict: Raise on the first invalid or out-of-order bar instead of
                skipping it
        """
        self.strict = strict

    def check_point(self, point: PricePoint) -> Optional[str]:
        """
        Check a single bar.

        Returns:
            Reason the bar is invalid, or None if it is usable
        """
        for name in ("open", "high", "low", "close"):
            value = getattr(point, name)
            if not is_finite_number(value):
                return f"{name} is not a finite number"
            if value <= 0:
                return f"{name} must be positive"

        if point.high < point.low:
            return "high is below low"

        if not isinstance(point.volume, int) or point.volume < 0:
            return "volume must be a non-negative integer"

        return None

    def clean(self, points: Sequence[PricePoint]) -> list[PricePoint]:
        """
        Drop invalid bars and return a strictly ascending series.

        Duplicate timestamps keep the last bar. In strict mode an invalid
        bar raises MalformedDataError and a bar older than its predecessor
        raises TemporalDataError.

        Args:
            points: Price history, expected ascending by time

        Returns:
            Cleaned price history
        """
        by_timestamp: dict[int, PricePoint] = {}
        previous_ts: Optional[int] = None

        for index, point in enumerate(points):
            reason = self.check_point(point)
            if reason is not None:
                if self.strict:
                    raise MalformedDataError(
                        f"Invalid price bar at index {index}: {reason}",
                        raw_data=str(point)[:100],
                        context={"index": index, "date": point.date}
                    )
                logger.warning(
                    "Skipping invalid price bar",
                    index=index,
                    date=point.date,
                    reason=reason
                )
                continue

            if previous_ts is not None and point.timestamp_seconds < previous_ts and self.strict:
                raise TemporalDataError(
                    f"Price bar at index {index} is older than its predecessor",
                    timestamp=point.timestamp_seconds,
                    expected_timestamp=previous_ts
                )

            by_timestamp[point.timestamp_seconds] = point
            previous_ts = point.timestamp_seconds

        return [by_timestamp[ts] for ts in sorted(by_timestamp)]
