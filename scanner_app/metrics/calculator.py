"""Technical indicator calculator coordinating EMA, RSI and Stochastic RSI"""

from typing import Optional, Sequence

import structlog

from ..config.defaults import DefaultConfig, get_default_config
from ..data.models import PricePoint
from ..data.validators import PriceSeriesValidator
from ..errors import (
    InsufficientDataError,
    MetricsCalculationError,
    MissingDataError,
)
from ..models.metrics import TechnicalSnapshot
from .ema import calculate_ema
from .rsi import calculate_rsi, calculate_stoch_rsi
from .volume import calculate_down_day_volume_trend, calculate_volume_trend

logger = structlog.get_logger(__name__)


class TechnicalIndicatorCalculator:
    """
    Turns a price series into TechnicalSnapshot records
    """

    def __init__(self, config: Optional[DefaultConfig] = None,
                 validator: Optional[PriceSeriesValidator] = None):
        self.config = config or get_default_config()
        self.params = self.config.indicators
        self.validator = validator or PriceSeriesValidator()

    def calculate_snapshots(self, points: Sequence[PricePoint]) -> list[TechnicalSnapshot]:
        """
        Calculate one snapshot per valid price point

        Invalid bars are dropped first (see PriceSeriesValidator), so the
        result is aligned with the cleaned series; each snapshot carries
        its bar date.

        Args:
            points: Price history in chronological order

        Returns:
            Snapshots with None fields during each indicator's warm-up

        Raises:
            MissingDataError: If no price points are given
            InsufficientDataError: If the series is shorter than the
                shortest warm-up window, so no indicator could be produced
        """
        if not points:
            raise MissingDataError("Price history is required for indicator calculation",
                                   data_type="price_history")

        clean = self.validator.clean(points)
        minimum = self.params.ema_short
        if len(clean) < minimum:
            raise InsufficientDataError(
                f"Need at least {minimum} valid price points, got {len(clean)}",
                required_count=minimum,
                available_count=len(clean)
            )

        try:
            closes = [p.close for p in clean]
            ema_short = calculate_ema(closes, self.params.ema_short)
            ema_medium = calculate_ema(closes, self.params.ema_medium)
            ema_long = calculate_ema(closes, self.params.ema_long)
            rsi = calculate_rsi(closes, self.params.rsi_period)
            stoch_rsi = calculate_stoch_rsi(rsi, self.params.stoch_rsi_period)
        except (ValueError, ArithmeticError) as e:
            raise MetricsCalculationError(
                f"Indicator calculation failed: {e}",
                metric_name="technical_indicators",
                calculation_input={"point_count": len(clean)}
            ) from e

        return [
            TechnicalSnapshot(
                date=point.date,
                ema10=ema_short[i],
                ema20=ema_medium[i],
                ema50=ema_long[i],
                rsi14=rsi[i],
                stoch_rsi14=stoch_rsi[i],
            )
            for i, point in enumerate(clean)
        ]

    def latest_snapshot(self, points: Sequence[PricePoint]) -> TechnicalSnapshot:
        """
        Snapshot of the most recent price point with every indicator warmed up

        Raises:
            InsufficientDataError: If the last snapshot is still in warm-up
        """
        snapshots = self.calculate_snapshots(points)
        latest = snapshots[-1]
        if not latest.is_complete():
            raise InsufficientDataError(
                f"Need at least {self.get_warmup_period()} valid price points "
                f"for a complete snapshot, got {len(snapshots)}",
                required_count=self.get_warmup_period(),
                available_count=len(snapshots)
            )
        return latest

    def volume_trend(self, points: Sequence[PricePoint]) -> Optional[str]:
        """Volume trend over the configured lookback"""
        return calculate_volume_trend(
            self.validator.clean(points),
            self.params.volume_trend_lookback,
            self.params.volume_flat_band_pct
        )

    def down_day_volume_trend(self, points: Sequence[PricePoint]) -> Optional[str]:
        """Down-day volume trend over the configured lookback"""
        return calculate_down_day_volume_trend(
            self.validator.clean(points),
            self.params.volume_trend_lookback,
            self.params.volume_flat_band_pct
        )

    def get_warmup_period(self) -> int:
        """Get the minimum number of price points for a complete snapshot"""
        return max(
            self.params.ema_short,
            self.params.ema_medium,
            self.params.ema_long,
            self.params.rsi_period + 1,
            # First RSI at index rsi_period, then stoch_rsi_period RSI values
            self.params.rsi_period + self.params.stoch_rsi_period,
        )

    def is_warmed_up(self, points: Sequence[PricePoint]) -> bool:
        """Check if the series is long enough for a complete snapshot"""
        return len(self.validator.clean(points)) >= self.get_warmup_period()

    def update_config(self, new_config: DefaultConfig) -> None:
        """Swap configuration"""
        self.config = new_config
        self.params = new_config.indicators
        logger.info("Indicator configuration updated",
                    ema_periods=(self.params.ema_short, self.params.ema_medium, self.params.ema_long),
                    rsi_period=self.params.rsi_period)
