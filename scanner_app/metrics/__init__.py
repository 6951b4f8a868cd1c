"""Technical indicator engine: EMA, RSI, Stochastic RSI and volume trend"""

from .calculator import TechnicalIndicatorCalculator
from .ema import calculate_ema
from .rsi import calculate_rsi, calculate_stoch_rsi
from .volume import calculate_down_day_volume_trend, calculate_volume_trend

__all__ = [
    "TechnicalIndicatorCalculator",
    "calculate_ema",
    "calculate_rsi",
    "calculate_stoch_rsi",
    "calculate_volume_trend",
    "calculate_down_day_volume_trend",
]
