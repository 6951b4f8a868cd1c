"""
Canonical data models for price history and options chains.

This module defines immutable data structures that represent clean, validated
inputs to the computation layer after parsing from raw records.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PricePoint:
    """Daily OHLCV bar, ordered by time ascending within a series."""
    date: str                 # UTC date, YYYY-MM-DD
    timestamp_seconds: int    # Unix timestamp of the bar
    open: float
    high: float
    low: float
    close: float
    volume: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the JSON field names used by the API layer."""
        return {
            "date": self.date,
            "timestampSeconds": self.timestamp_seconds,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class OptionQuote:
    """One side (call or put) of a strike row."""
    open_interest: int = 0
    volume: int = 0
    iv: Optional[float] = None
    gamma: float = 0.0
    charm: float = 0.0
    vanna: float = 0.0
    vomma: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "oi": self.open_interest,
            "volume": self.volume,
            "iv": self.iv,
            "gamma": self.gamma,
            "charm": self.charm,
            "vanna": self.vanna,
            "vomma": self.vomma,
        }


@dataclass(frozen=True)
class StrikeQuote:
    """One strike of an options chain snapshot for (symbol, expiration, as-of)."""
    strike: float
    call: OptionQuote
    put: OptionQuote

    def to_dict(self) -> dict[str, Any]:
        return {
            "strike": self.strike,
            "call": self.call.to_dict(),
            "put": self.put.to_dict(),
        }
