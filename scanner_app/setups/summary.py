"""Cross-ticker market summary from classified setups and chain aggregates"""

from dataclasses import dataclass
from typing import Any, Sequence

from ..models.metrics import MarketAggregate
from .models import SetupType, TradeSetup


@dataclass(frozen=True)
class MarketSummary:
    bullish_count: int
    bearish_count: int
    neutral_count: int
    sentiment: str
    volatility: str
    pcr_aggregate: float
    gex_aggregate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "bullishCount": self.bullish_count,
            "bearishCount": self.bearish_count,
            "neutralCount": self.neutral_count,
            "sentiment": self.sentiment,
            "volatility": self.volatility,
            "pcrAggregate": self.pcr_aggregate,
            "gexAggregate": self.gex_aggregate,
        }


def market_sentiment(bullish: int, bearish: int) -> str:
    """Sentiment label; "Strongly" needs more than twice the opposing count"""
    if bullish > bearish * 2:
        return "Strongly Bullish"
    if bullish > bearish:
        return "Moderately Bullish"
    if bearish > bullish * 2:
        return "Strongly Bearish"
    if bearish > bullish:
        return "Moderately Bearish"
    return "Neutral"


def market_volatility(rsi_values: Sequence[float]) -> str:
    """Volatility label from how far the mean RSI sits from the middle"""
    if not rsi_values:
        return "Low"
    avg_rsi = sum(rsi_values) / len(rsi_values)
    if avg_rsi > 70 or avg_rsi < 30:
        return "High"
    if avg_rsi > 65 or avg_rsi < 35:
        return "Moderate"
    return "Low"


def summarize_market(setups: Sequence[TradeSetup], aggregates: Sequence[MarketAggregate],
                     rsi_values: Sequence[float] = ()) -> MarketSummary:
    """
    Summarize a scan

    Args:
        setups: Classified setups, one per ticker
        aggregates: Chain aggregates of the same tickers
        rsi_values: Latest RSI of the same tickers

    Returns:
        MarketSummary; the PCR aggregate is the mean of positive ratios
        (1.0 when there are none), rounded to two decimals
    """
    bullish = sum(1 for s in setups if s.setup_type == SetupType.BULLISH)
    bearish = sum(1 for s in setups if s.setup_type == SetupType.BEARISH)
    neutral = sum(1 for s in setups if s.setup_type == SetupType.NEUTRAL)

    ratios = [a.pcr for a in aggregates if a.pcr > 0]
    pcr_aggregate = round(sum(ratios) / len(ratios), 2) if ratios else 1.0

    return MarketSummary(
        bullish_count=bullish,
        bearish_count=bearish,
        neutral_count=neutral,
        sentiment=market_sentiment(bullish, bearish),
        volatility=market_volatility(rsi_values),
        pcr_aggregate=pcr_aggregate,
        gex_aggregate=sum(a.gamma_exposure for a in aggregates),
    )
