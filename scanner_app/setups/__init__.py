"""
Setup classification module.

Rule-based bullish/bearish/neutral classification from indicator and chain
aggregates, entry/stop/target derivation, and cross-ticker summaries.
"""

from .classifier import SetupClassifier, describe_ema_trend, strength_band
from .levels import derive_levels, find_key_levels
from .models import (
    EmaTrend,
    KeyLevels,
    RuleCheck,
    RuleSetResult,
    SetupInputs,
    SetupType,
    TradeSetup,
)
from .rules import determine_ema_trend
from .summary import MarketSummary, summarize_market

__all__ = [
    "SetupClassifier",
    "describe_ema_trend",
    "strength_band",
    "derive_levels",
    "find_key_levels",
    "EmaTrend",
    "KeyLevels",
    "RuleCheck",
    "RuleSetResult",
    "SetupInputs",
    "SetupType",
    "TradeSetup",
    "determine_ema_trend",
    "MarketSummary",
    "summarize_market",
]
