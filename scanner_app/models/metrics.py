"""Data models for indicator and options-chain calculations"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class TechnicalSnapshot:
    """Indicator values for one price point; None during warm-up."""
    date: str
    ema10: Optional[float] = None
    ema20: Optional[float] = None
    ema50: Optional[float] = None
    rsi14: Optional[float] = None
    stoch_rsi14: Optional[float] = None

    def is_complete(self) -> bool:
        """Check if every indicator has left its warm-up window"""
        return None not in (self.ema10, self.ema20, self.ema50, self.rsi14, self.stoch_rsi14)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "ema10": self.ema10,
            "ema20": self.ema20,
            "ema50": self.ema50,
            "rsi14": self.rsi14,
            "stochRsi14": self.stoch_rsi14,
        }


@dataclass(frozen=True)
class ChainMetrics:
    """Aggregates over one options chain snapshot"""
    total_call_oi: int
    total_put_oi: int
    total_call_volume: int
    total_put_volume: int
    pcr: float
    max_pain: Optional[float]
    gamma_exposure: float
    vwiv: float  # Volume-weighted implied volatility


@dataclass(frozen=True)
class MarketAggregate:
    """Per-snapshot sentiment aggregate for a symbol"""
    symbol: str
    date: str
    pcr: float
    max_pain: Optional[float]
    gamma_exposure: float
    iv_percentile: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "date": self.date,
            "pcr": self.pcr,
            "maxPain": self.max_pain,
            "gammaExposure": self.gamma_exposure,
            "ivPercentile": self.iv_percentile,
        }
