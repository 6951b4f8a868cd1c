"""
Risk calculators.

Risk/reward analysis, position sizing and stop-loss strategies. All
calculators are stateless and validate their request before computing.
"""

from .models import (
    GexAdjustment,
    PositionSizingRequest,
    PositionSizingResult,
    PositionSpec,
    PositionType,
    RiskAnalysisResult,
    StopLossRequest,
    StopLossResult,
    StopType,
    TradeType,
)
from .reward import analyze_risk_reward, estimate_win_probability, expected_value
from .sizing import calculate_position_size
from .stop_loss import calculate_stop_loss

__all__ = [
    "GexAdjustment",
    "PositionSizingRequest",
    "PositionSizingResult",
    "PositionSpec",
    "PositionType",
    "RiskAnalysisResult",
    "StopLossRequest",
    "StopLossResult",
    "StopType",
    "TradeType",
    "analyze_risk_reward",
    "estimate_win_probability",
    "expected_value",
    "calculate_position_size",
    "calculate_stop_loss",
]
