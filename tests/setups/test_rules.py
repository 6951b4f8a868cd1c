"""Tests for classifier rule sets"""

from dataclasses import replace

import pytest

from scanner_app.config.defaults import ClassifierParams
from scanner_app.setups.models import EmaTrend, RuleCheck, RuleSetResult, SetupType
from scanner_app.setups.rules import (
    determine_ema_trend,
    evaluate_bearish,
    evaluate_bullish,
    evaluate_neutral,
    pcr_thresholds,
)


class TestEmaTrend:
    """Test determine_ema_trend function"""

    def test_bullish_stack(self):
        assert determine_ema_trend(110.0, 105.0, 100.0) == EmaTrend.BULLISH

    def test_bearish_stack(self):
        assert determine_ema_trend(90.0, 95.0, 100.0) == EmaTrend.BEARISH

    def test_converged(self):
        """Test EMAs within 1% of each other are flat"""
        assert determine_ema_trend(100.0, 100.5, 100.2) == EmaTrend.NEUTRAL

    def test_mixed(self):
        assert determine_ema_trend(110.0, 100.0, 105.0) == EmaTrend.MIXED

    def test_zero_ema_does_not_divide(self):
        assert determine_ema_trend(1.0, 0.0, 0.0) == EmaTrend.MIXED


class TestRuleSetResult:
    """Test strength computation"""

    def test_strength_is_percentage_passed(self):
        checks = (RuleCheck("a", True, ""), RuleCheck("b", True, ""), RuleCheck("c", False, ""))
        result = RuleSetResult(SetupType.BULLISH, checks)
        assert result.passed_count == 2
        assert result.strength == 67
        assert not result.all_passed

    def test_empty(self):
        assert RuleSetResult(SetupType.NEUTRAL).strength == 0


class TestBullishRules:
    """Test evaluate_bullish function"""

    def test_unknown_volume_trend_fails_rule(self, inputs_factory):
        """Test four of five rules pass without volume information"""
        result = evaluate_bullish(inputs_factory(), ClassifierParams())
        failed = [c.name for c in result.checks if not c.passed]
        assert failed == ["volume_trend"]
        assert result.strength == 80

    def test_all_rules(self, inputs_factory):
        result = evaluate_bullish(inputs_factory(volume_trend="increasing"), ClassifierParams())
        assert result.all_passed
        assert result.strength == 100

    def test_rsi_band_inclusive(self, inputs_factory):
        params = ClassifierParams()
        assert evaluate_bullish(inputs_factory(rsi14=80.0), params).checks[1].passed
        assert not evaluate_bullish(inputs_factory(rsi14=80.5), params).checks[1].passed

    def test_gex_threshold_strict(self, inputs_factory):
        result = evaluate_bullish(inputs_factory(gamma_exposure=500_000.0), ClassifierParams())
        assert not result.checks[3].passed


class TestBearishRules:
    """Test evaluate_bearish function"""

    def test_all_rules(self, inputs_factory):
        inputs = inputs_factory(close=92.0, ema10=90.0, ema20=95.0, ema50=100.0, rsi14=30.0,
                                pcr=1.5, gamma_exposure=-600_000.0,
                                down_day_volume_trend="increasing")
        result = evaluate_bearish(inputs, ClassifierParams())
        assert result.strength == 100

    def test_uses_down_day_volume(self, inputs_factory):
        """Test overall volume does not count for the bearish set"""
        result = evaluate_bearish(inputs_factory(volume_trend="increasing"), ClassifierParams())
        assert not result.checks[-1].passed


class TestNeutralRules:
    """Test evaluate_neutral function"""

    def test_all_rules(self, inputs_factory):
        inputs = inputs_factory(ema10=100.0, ema20=100.5, ema50=100.2, rsi14=50.0,
                                pcr=1.0, gamma_exposure=100_000.0)
        result = evaluate_neutral(inputs, ClassifierParams())
        assert len(result.checks) == 4
        assert result.strength == 100

    def test_large_gex_fails(self, inputs_factory):
        inputs = inputs_factory(gamma_exposure=-250_000.0)
        assert not evaluate_neutral(inputs, ClassifierParams()).checks[3].passed


class TestIVAdjustedPCR:
    """Test pcr_thresholds function"""

    def test_fixed_thresholds_by_default(self):
        assert pcr_thresholds(95.0, ClassifierParams()) == (0.8, 1.2)

    @pytest.mark.parametrize("iv_percentile,expected", [(90.0, (0.5, 1.5)), (60.0, (0.8, 1.2)),
                                                         (30.0, (0.7, 1.3))])
    def test_adjusted(self, iv_percentile, expected):
        params = replace(ClassifierParams(), iv_adjusted_pcr=True)
        assert pcr_thresholds(iv_percentile, params) == expected

    def test_high_iv_tightens_bullish_pcr(self, inputs_factory):
        params = replace(ClassifierParams(), iv_adjusted_pcr=True)
        result = evaluate_bullish(inputs_factory(iv_percentile=90.0), params)
        assert not result.checks[2].passed
