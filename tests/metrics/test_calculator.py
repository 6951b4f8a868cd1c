"""Tests for the technical indicator calculator"""

import math
from dataclasses import replace

import pytest

from scanner_app.config.defaults import IndicatorParams
from scanner_app.errors import InsufficientDataError, MissingDataError
from scanner_app.metrics.calculator import TechnicalIndicatorCalculator
from scanner_app.metrics.volume import INCREASING


class TestTechnicalIndicatorCalculator:
    """Test TechnicalIndicatorCalculator"""

    def test_snapshots_aligned_with_series(self, rising_series):
        """Test one snapshot per price point carrying its date"""
        snapshots = TechnicalIndicatorCalculator().calculate_snapshots(rising_series)
        assert len(snapshots) == len(rising_series)
        assert [s.date for s in snapshots] == [p.date for p in rising_series]

    def test_warmup_fields(self, rising_series):
        """Test each indicator appears at its own warm-up index"""
        snapshots = TechnicalIndicatorCalculator().calculate_snapshots(rising_series)
        assert snapshots[8].ema10 is None
        assert snapshots[9].ema10 is not None
        assert snapshots[18].ema20 is None
        assert snapshots[19].ema20 is not None
        assert snapshots[48].ema50 is None
        assert snapshots[49].is_complete()
        assert snapshots[13].rsi14 is None
        assert snapshots[14].rsi14 == 100.0
        assert snapshots[26].stoch_rsi14 is None
        assert snapshots[27].stoch_rsi14 == 50.0

    def test_latest_snapshot_bullish_stack(self, rising_series):
        """Test a rising series stacks EMAs bullishly"""
        latest = TechnicalIndicatorCalculator().latest_snapshot(rising_series)
        assert latest.ema10 > latest.ema20 > latest.ema50
        assert latest.rsi14 == 100.0

    def test_flat_series(self, flat_series):
        """Test flat prices: EMAs equal price, RSI 100, stochastic RSI 50"""
        latest = TechnicalIndicatorCalculator().latest_snapshot(flat_series)
        assert latest.ema10 == pytest.approx(50.0)
        assert latest.ema50 == pytest.approx(50.0)
        assert latest.rsi14 == 100.0
        assert latest.stoch_rsi14 == 50.0

    def test_invalid_bar_is_skipped(self, series_factory):
        """Test a NaN bar never reaches the EMA chain"""
        points = series_factory([100.0 + i for i in range(61)])
        points[30] = replace(points[30], close=math.nan)
        snapshots = TechnicalIndicatorCalculator().calculate_snapshots(points)
        assert len(snapshots) == 60
        assert all(not math.isnan(s.ema10) for s in snapshots if s.ema10 is not None)

    def test_empty_series(self):
        """Test missing history is reported"""
        with pytest.raises(MissingDataError):
            TechnicalIndicatorCalculator().calculate_snapshots([])

    def test_short_series(self, series_factory):
        """Test shorter than the shortest warm-up"""
        with pytest.raises(InsufficientDataError) as exc_info:
            TechnicalIndicatorCalculator().calculate_snapshots(series_factory([100.0] * 5))
        assert exc_info.value.required_count == 10
        assert exc_info.value.available_count == 5

    def test_latest_snapshot_incomplete(self, series_factory):
        """Test a partial warm-up is an explicit error"""
        with pytest.raises(InsufficientDataError) as exc_info:
            TechnicalIndicatorCalculator().latest_snapshot(series_factory([100.0] * 30))
        assert exc_info.value.required_count == 50

    def test_warmup_period(self, default_config):
        """Test warm-up is the longest indicator window"""
        calc = TechnicalIndicatorCalculator()
        assert calc.get_warmup_period() == 50

        short = replace(default_config, indicators=IndicatorParams(ema_short=3, ema_medium=5, ema_long=8))
        assert TechnicalIndicatorCalculator(short).get_warmup_period() == 28

    def test_is_warmed_up(self, series_factory):
        calc = TechnicalIndicatorCalculator()
        assert calc.is_warmed_up(series_factory([100.0] * 50))
        assert not calc.is_warmed_up(series_factory([100.0] * 49))

    def test_volume_trend(self, rising_series):
        assert TechnicalIndicatorCalculator().volume_trend(rising_series) == INCREASING

    def test_update_config(self, default_config):
        """Test configuration swap"""
        calc = TechnicalIndicatorCalculator()
        new_config = replace(default_config, indicators=IndicatorParams(rsi_period=7))
        calc.update_config(new_config)
        assert calc.params.rsi_period == 7
