"""
Risk/reward analysis for a proposed position.

The win probability estimate is a heuristic, not calibrated against real
trade outcomes; callers with their own estimate should pass it in.
"""

from typing import Optional

from ..config.defaults import RiskParams
from ..logging.config import get_risk_logger
from ..utils.numeric import safe_divide
from .models import PositionSpec, PositionType, RiskAnalysisResult

risk_logger = get_risk_logger(__name__)


def risk_and_reward(spec: PositionSpec) -> tuple[float, float]:
    """
    Per-unit (risk, reward)

    Stock positions use the distance to stop and target. Long options risk
    the premium and earn intrinsic value at target less premium. Spreads and
    condors use the price distances like stock.
    """
    if spec.position_type == PositionType.LONG:
        return abs(spec.entry_price - spec.stop_loss_price), abs(spec.target_price - spec.entry_price)
    if spec.position_type == PositionType.SHORT:
        return abs(spec.stop_loss_price - spec.entry_price), abs(spec.entry_price - spec.target_price)
    if spec.position_type == PositionType.CALL:
        intrinsic = max(0.0, spec.target_price - spec.strike)
        return spec.option_premium, intrinsic - spec.option_premium
    if spec.position_type == PositionType.PUT:
        intrinsic = max(0.0, spec.strike - spec.target_price)
        return spec.option_premium, intrinsic - spec.option_premium
    return abs(spec.entry_price - spec.stop_loss_price), abs(spec.target_price - spec.entry_price)


def estimate_win_probability(spec: PositionSpec, params: Optional[RiskParams] = None) -> float:
    """
    Heuristic win probability in percent, clamped to the configured range

    Options with strike and IV: in-the-money starts at 65, out-of-the-money
    at 50 less 100x the moneyness gap; both lose 0.2 per IV point. Options
    without that information get 50, spreads and condors 60, stock 55.
    """
    params = params or RiskParams()

    if spec.position_type.is_option:
        if spec.strike is not None and spec.iv is not None:
            ratio = spec.strike / spec.entry_price
            if spec.position_type == PositionType.CALL:
                itm, otm_gap = ratio <= 1.0, ratio - 1.0
            else:
                itm, otm_gap = ratio >= 1.0, 1.0 - ratio
            if itm:
                probability = 65 - spec.iv * 0.2
            else:
                probability = 50 - otm_gap * 100 - spec.iv * 0.2
        else:
            probability = 50.0
    elif spec.position_type.is_multi_leg:
        probability = 60.0
    else:
        probability = 55.0

    return max(params.min_win_probability, min(params.max_win_probability, probability))


def expected_value(dollar_reward: float, dollar_risk: float, win_probability: float) -> float:
    """rewardDollars x p - riskDollars x (1 - p), p given in percent"""
    p = win_probability / 100
    return dollar_reward * p - dollar_risk * (1 - p)


def calculate_risk_score(ratio: float, win_probability: float, spec: PositionSpec) -> float:
    """1-10 score, higher is safer; an R/R of 5 at 50% probability scores 10"""
    score = ratio * 2 * (win_probability / 50)
    if spec.iv and spec.position_type.is_option:
        score *= 1 - spec.iv / 100
    return min(10.0, max(1.0, score))


def trade_quality(risk_score: float) -> str:
    if risk_score >= 7:
        return "excellent"
    if risk_score >= 5:
        return "good"
    if risk_score >= 3:
        return "fair"
    return "poor"


def build_recommendations(spec: PositionSpec, ratio: float, win_probability: float,
                          ev: float, params: RiskParams) -> list[str]:
    recommendations = []
    if ratio < 1:
        recommendations.append(
            "Warning: Risk exceeds potential reward. Consider adjusting entry, target, "
            "or stop loss to improve ratio."
        )
    elif ratio < 2:
        recommendations.append(
            "Moderate risk/reward profile. Consider reducing position size or finding "
            "more favorable entry points."
        )
    elif ratio >= 3:
        recommendations.append(
            "Excellent risk/reward ratio. Consider increasing position size if within "
            "risk tolerance."
        )

    if win_probability < 40:
        recommendations.append(
            "Low probability trade. Ensure risk is appropriately sized for the "
            "speculative nature of this position."
        )
    if ev <= 0:
        recommendations.append(
            "Negative expected value. This trade has a negative mathematical "
            "expectation over time."
        )

    if spec.position_type.is_option:
        if spec.days_to_expiration is not None and spec.days_to_expiration < params.short_dated_days:
            recommendations.append(
                "Short-dated option. Time decay (theta) will accelerate rapidly - "
                "consider earlier profit taking."
            )
        if spec.iv is not None and spec.iv > params.high_iv_threshold:
            recommendations.append(
                "High implied volatility environment. Consider spreading positions "
                "(spreads, condors) to reduce vega risk."
            )
    return recommendations


def analyze_risk_reward(spec: PositionSpec, params: Optional[RiskParams] = None) -> RiskAnalysisResult:
    """
    Analyze a proposed position

    Args:
        spec: Position to analyze
        params: Risk parameters (defaults when omitted)

    Returns:
        RiskAnalysisResult; a zero risk amount yields a 0.0 ratio

    Raises:
        InvalidInputError: If the position misses a field its type needs
    """
    params = params or RiskParams()
    spec.validate()

    risk, reward = risk_and_reward(spec)
    quantity = spec.quantity or 1
    multiplier = params.contract_multiplier if (spec.position_type.is_option
                                                or spec.position_type.is_multi_leg) else 1
    dollar_risk = risk * multiplier * quantity
    dollar_reward = reward * multiplier * quantity

    ratio = safe_divide(reward, risk)
    if spec.win_probability is not None:
        win_probability = spec.win_probability
    else:
        win_probability = estimate_win_probability(spec, params)

    ev = expected_value(dollar_reward, dollar_risk, win_probability)
    score = calculate_risk_score(ratio, win_probability, spec)
    recommendations = build_recommendations(spec, ratio, win_probability, ev, params)

    result = RiskAnalysisResult(
        risk_amount=risk,
        reward_amount=reward,
        risk_reward_ratio=round(ratio, 2),
        win_probability=round(win_probability, 1),
        expected_value=round(ev, 2),
        dollar_risk=round(dollar_risk, 2),
        dollar_reward=round(dollar_reward, 2),
        adjusted_risk_reward_ratio=round(ratio * win_probability / 100, 2),
        risk_score=round(score, 1),
        trade_quality=trade_quality(score),
        recommendations=tuple(recommendations),
    )

    risk_logger.info("Risk/reward analyzed",
                     position_type=spec.position_type.value,
                     risk_reward_ratio=result.risk_reward_ratio,
                     win_probability=result.win_probability,
                     expected_value=result.expected_value,
                     trade_quality=result.trade_quality)
    return result
