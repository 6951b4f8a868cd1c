"""
Data models for setup classification.

TradeSetup records are created by the classifier and never mutated; a new
run supersedes them with a new record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..errors import InsufficientDataError, MalformedDataError
from ..models.metrics import MarketAggregate, TechnicalSnapshot


class SetupType(str, Enum):
    """Terminal classification states."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class EmaTrend(str, Enum):
    """EMA alignment of the 10/20/50 stack."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"       # Converged within tolerance
    MIXED = "mixed"


@dataclass(frozen=True)
class RuleCheck:
    """Outcome of one rule in a rule set."""
    name: str
    passed: bool
    reason: str


@dataclass(frozen=True)
class RuleSetResult:
    """Evaluation of one rule set against the inputs."""
    setup_type: SetupType
    checks: tuple[RuleCheck, ...] = ()

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def strength(self) -> int:
        """Percentage of rules passed, 0-100"""
        if not self.checks:
            return 0
        return round(100 * self.passed_count / len(self.checks))

    @property
    def all_passed(self) -> bool:
        return bool(self.checks) and self.passed_count == len(self.checks)


@dataclass(frozen=True)
class SetupInputs:
    """Everything one classifier run looks at, for a single ticker and date."""
    ticker: str
    date: str
    close: float
    ema10: float
    ema20: float
    ema50: float
    rsi14: float
    pcr: float
    gamma_exposure: float
    iv_percentile: float = 50.0
    max_pain: Optional[float] = None
    volume_trend: Optional[str] = None             # Unknown counts as a failed rule
    down_day_volume_trend: Optional[str] = None

    @classmethod
    def from_snapshot(cls, ticker: str, close: float, snapshot: TechnicalSnapshot,
                      aggregate: MarketAggregate, volume_trend: Optional[str] = None,
                      down_day_volume_trend: Optional[str] = None) -> "SetupInputs":
        """
        Combine a complete TechnicalSnapshot with its MarketAggregate

        Raises:
            InsufficientDataError: If the snapshot is still in warm-up
        """
        if not snapshot.is_complete():
            raise InsufficientDataError(
                f"Snapshot for {ticker} on {snapshot.date} is still in warm-up",
                context={"ticker": ticker, "date": snapshot.date}
            )
        return cls(
            ticker=ticker,
            date=snapshot.date,
            close=close,
            ema10=snapshot.ema10,
            ema20=snapshot.ema20,
            ema50=snapshot.ema50,
            rsi14=snapshot.rsi14,
            pcr=aggregate.pcr,
            gamma_exposure=aggregate.gamma_exposure,
            iv_percentile=aggregate.iv_percentile,
            max_pain=aggregate.max_pain,
            volume_trend=volume_trend,
            down_day_volume_trend=down_day_volume_trend,
        )


@dataclass(frozen=True)
class KeyLevels:
    """Support/resistance derived from chain open interest and gamma."""
    next_resistance: Optional[float] = None
    next_support: Optional[float] = None
    max_pain: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nextResistance": self.next_resistance,
            "nextSupport": self.next_support,
            "maxPain": self.max_pain,
        }


@dataclass(frozen=True)
class TradeSetup:
    """Classified trading bias with entry, stop and target levels."""
    ticker: str
    date: str
    setup_type: SetupType
    strength: int                  # 0-100, percent of rules passed
    entry_price: float
    stop_loss: float
    target_price: float
    risk_reward_ratio: float
    rule_results: tuple[RuleSetResult, ...] = field(default=(), compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the JSON field names used by the API layer."""
        return {
            "ticker": self.ticker,
            "date": self.date,
            "setupType": self.setup_type.value,
            "strength": self.strength,
            "entryPrice": self.entry_price,
            "stopLoss": self.stop_loss,
            "targetPrice": self.target_price,
            "riskRewardRatio": self.risk_reward_ratio,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TradeSetup":
        """
        Rebuild a TradeSetup from its serialized form

        Raises:
            MalformedDataError: If a field is missing or the setup type is unknown
        """
        try:
            return cls(
                ticker=data["ticker"],
                date=data["date"],
                setup_type=SetupType(data["setupType"]),
                strength=int(data["strength"]),
                entry_price=float(data["entryPrice"]),
                stop_loss=float(data["stopLoss"]),
                target_price=float(data["targetPrice"]),
                risk_reward_ratio=float(data["riskRewardRatio"]),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedDataError(
                f"Invalid trade setup record: {e}",
                raw_data=str(data),
                expected_format="TradeSetup"
            ) from e
