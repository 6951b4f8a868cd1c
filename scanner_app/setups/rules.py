"""
Rule sets for the setup classifier.

Each rule set is an AND of simple threshold checks; its strength is the
share of checks that passed. Every check is written to the classifier
audit log.
"""

from typing import Optional

from ..config.defaults import ClassifierParams
from ..logging.config import get_classifier_logger, log_rule_check
from ..metrics.volume import INCREASING
from ..utils.numeric import safe_divide
from .models import EmaTrend, RuleCheck, RuleSetResult, SetupInputs, SetupType

classifier_logger = get_classifier_logger(__name__)


def determine_ema_trend(ema10: float, ema20: float, ema50: float,
                        convergence_pct: float = 0.01) -> EmaTrend:
    """
    Classify the EMA stack

    Bullish when 10 > 20 > 50, bearish when 10 < 20 < 50, neutral when
    each adjacent pair is within ``convergence_pct`` of each other,
    otherwise mixed.
    """
    if ema10 > ema20 > ema50:
        return EmaTrend.BULLISH
    if ema10 < ema20 < ema50:
        return EmaTrend.BEARISH

    short_gap = safe_divide(abs(ema10 - ema20), abs(ema20), default=float("inf"))
    long_gap = safe_divide(abs(ema20 - ema50), abs(ema50), default=float("inf"))
    if short_gap < convergence_pct and long_gap < convergence_pct:
        return EmaTrend.NEUTRAL
    return EmaTrend.MIXED


def pcr_thresholds(iv_percentile: float, params: ClassifierParams) -> tuple[float, float]:
    """
    (bullish maximum, bearish minimum) put-call ratio

    With ``iv_adjusted_pcr`` the bands widen as IV rises: above the 80th
    percentile 0.5/1.5, above the 50th 0.8/1.2, otherwise 0.7/1.3.
    """
    if not params.iv_adjusted_pcr:
        return params.bullish_pcr_max, params.bearish_pcr_min
    if iv_percentile > 80:
        return 0.5, 1.5
    if iv_percentile > 50:
        return 0.8, 1.2
    return 0.7, 1.3


def _in_range(value: float, low: float, high: float) -> bool:
    return low <= value <= high


def _record(checks: list[RuleCheck], inputs: SetupInputs, setup_type: SetupType,
            name: str, passed: bool, reason: str, context: Optional[dict] = None) -> None:
    checks.append(RuleCheck(name=name, passed=passed, reason=reason))
    log_rule_check(classifier_logger, name, passed, inputs.ticker,
                   setup_type.value, reason, context)


def evaluate_bullish(inputs: SetupInputs, params: ClassifierParams) -> RuleSetResult:
    """EMA stack bullish, RSI in band, low PCR, strongly positive GEX, rising volume"""
    checks: list[RuleCheck] = []
    kind = SetupType.BULLISH

    trend = determine_ema_trend(inputs.ema10, inputs.ema20, inputs.ema50, params.ema_convergence_pct)
    _record(checks, inputs, kind, "ema_alignment", trend == EmaTrend.BULLISH,
            f"EMA trend is {trend.value}",
            {"ema10": inputs.ema10, "ema20": inputs.ema20, "ema50": inputs.ema50})

    _record(checks, inputs, kind, "rsi_range",
            _in_range(inputs.rsi14, params.bullish_rsi_min, params.bullish_rsi_max),
            f"RSI {inputs.rsi14:.2f} vs [{params.bullish_rsi_min}, {params.bullish_rsi_max}]")

    pcr_max, _ = pcr_thresholds(inputs.iv_percentile, params)
    _record(checks, inputs, kind, "put_call_ratio", inputs.pcr < pcr_max,
            f"PCR {inputs.pcr:.3f} vs < {pcr_max}",
            {"iv_percentile": inputs.iv_percentile})

    _record(checks, inputs, kind, "gamma_exposure",
            inputs.gamma_exposure > params.gex_strong_positive,
            f"GEX {inputs.gamma_exposure:,.0f} vs > {params.gex_strong_positive:,.0f}")

    _record(checks, inputs, kind, "volume_trend", inputs.volume_trend == INCREASING,
            f"Volume trend is {inputs.volume_trend or 'unknown'}")

    return RuleSetResult(setup_type=kind, checks=tuple(checks))


def evaluate_bearish(inputs: SetupInputs, params: ClassifierParams) -> RuleSetResult:
    """EMA stack bearish, RSI in band, high PCR, strongly negative GEX, rising down-day volume"""
    checks: list[RuleCheck] = []
    kind = SetupType.BEARISH

    trend = determine_ema_trend(inputs.ema10, inputs.ema20, inputs.ema50, params.ema_convergence_pct)
    _record(checks, inputs, kind, "ema_alignment", trend == EmaTrend.BEARISH,
            f"EMA trend is {trend.value}",
            {"ema10": inputs.ema10, "ema20": inputs.ema20, "ema50": inputs.ema50})

    _record(checks, inputs, kind, "rsi_range",
            _in_range(inputs.rsi14, params.bearish_rsi_min, params.bearish_rsi_max),
            f"RSI {inputs.rsi14:.2f} vs [{params.bearish_rsi_min}, {params.bearish_rsi_max}]")

    _, pcr_min = pcr_thresholds(inputs.iv_percentile, params)
    _record(checks, inputs, kind, "put_call_ratio", inputs.pcr > pcr_min,
            f"PCR {inputs.pcr:.3f} vs > {pcr_min}",
            {"iv_percentile": inputs.iv_percentile})

    _record(checks, inputs, kind, "gamma_exposure",
            inputs.gamma_exposure < params.gex_strong_negative,
            f"GEX {inputs.gamma_exposure:,.0f} vs < {params.gex_strong_negative:,.0f}")

    _record(checks, inputs, kind, "down_day_volume", inputs.down_day_volume_trend == INCREASING,
            f"Down-day volume trend is {inputs.down_day_volume_trend or 'unknown'}")

    return RuleSetResult(setup_type=kind, checks=tuple(checks))


def evaluate_neutral(inputs: SetupInputs, params: ClassifierParams) -> RuleSetResult:
    """Converged EMAs, mid-band RSI, balanced PCR, small GEX"""
    checks: list[RuleCheck] = []
    kind = SetupType.NEUTRAL

    trend = determine_ema_trend(inputs.ema10, inputs.ema20, inputs.ema50, params.ema_convergence_pct)
    _record(checks, inputs, kind, "ema_flat", trend == EmaTrend.NEUTRAL,
            f"EMA trend is {trend.value}",
            {"ema10": inputs.ema10, "ema20": inputs.ema20, "ema50": inputs.ema50})

    _record(checks, inputs, kind, "rsi_range",
            _in_range(inputs.rsi14, params.neutral_rsi_min, params.neutral_rsi_max),
            f"RSI {inputs.rsi14:.2f} vs [{params.neutral_rsi_min}, {params.neutral_rsi_max}]")

    _record(checks, inputs, kind, "put_call_ratio",
            _in_range(inputs.pcr, params.neutral_pcr_min, params.neutral_pcr_max),
            f"PCR {inputs.pcr:.3f} vs [{params.neutral_pcr_min}, {params.neutral_pcr_max}]")

    _record(checks, inputs, kind, "gamma_exposure",
            abs(inputs.gamma_exposure) <= params.gex_neutral_band,
            f"|GEX| {abs(inputs.gamma_exposure):,.0f} vs <= {params.gex_neutral_band:,.0f}")

    return RuleSetResult(setup_type=kind, checks=tuple(checks))


RULE_SETS = {
    SetupType.BULLISH: evaluate_bullish,
    SetupType.BEARISH: evaluate_bearish,
    SetupType.NEUTRAL: evaluate_neutral,
}
