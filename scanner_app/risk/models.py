"""
Request and result models for the risk calculators.

Requests are built from camelCase API payloads by ``from_dict`` and are
validated before any computation; results are ephemeral and carry no
identity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import InvalidInputError
from ..utils.numeric import is_finite_number


class PositionType(str, Enum):
    LONG = "long"
    SHORT = "short"
    CALL = "call"
    PUT = "put"
    SPREAD = "spread"
    CONDOR = "condor"

    @property
    def is_option(self) -> bool:
        return self in (PositionType.CALL, PositionType.PUT)

    @property
    def is_multi_leg(self) -> bool:
        return self in (PositionType.SPREAD, PositionType.CONDOR)


class GexAdjustment(str, Enum):
    """Caller's sizing stance given the gamma regime."""
    CONSERVATIVE = "conservative"
    NEUTRAL = "neutral"
    AGGRESSIVE = "aggressive"


class TradeType(str, Enum):
    CALL = "call"
    PUT = "put"
    STOCK = "stock"
    SPREAD = "spread"


class StopType(str, Enum):
    TECHNICAL = "technical"
    PERCENTAGE = "percentage"
    ATR = "atr"
    FIXED = "fixed"
    TIME = "time"


def _number(data: dict[str, Any], key: str, required: bool = False,
            positive: bool = False) -> Optional[float]:
    """Read a numeric field from a payload, raising InvalidInputError on bad values"""
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidInputError(f"Missing required field {key}", field=key)
        return None
    if not is_finite_number(value):
        raise InvalidInputError(f"{key} must be a finite number", field=key, value=value)
    if positive and value <= 0:
        raise InvalidInputError(f"{key} must be greater than zero", field=key, value=value)
    return float(value)


def _enum(enum_cls, data: dict[str, Any], key: str, required: bool = True):
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidInputError(f"Missing required field {key}", field=key)
        return None
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidInputError(f"Unsupported {key} {value!r} (expected one of: {allowed})",
                                field=key, value=value) from e


@dataclass(frozen=True)
class PositionSpec:
    """A proposed position for risk/reward analysis."""
    entry_price: float
    target_price: float
    stop_loss_price: float
    position_type: PositionType
    iv: Optional[float] = None                    # Implied volatility, percent
    win_probability: Optional[float] = None       # Percent; estimated when omitted
    option_premium: Optional[float] = None        # Per share
    strike: Optional[float] = None
    days_to_expiration: Optional[int] = None
    quantity: Optional[int] = None

    def validate(self) -> None:
        """
        Check per-type requirements

        Raises:
            InvalidInputError: If a field required by the position type is missing
        """
        for name in ("entry_price", "target_price", "stop_loss_price"):
            value = getattr(self, name)
            if not is_finite_number(value) or value <= 0:
                raise InvalidInputError(f"{name} must be a positive number", field=name, value=value)

        if self.position_type.is_option or self.position_type.is_multi_leg:
            if self.option_premium is None or self.option_premium <= 0:
                raise InvalidInputError(
                    f"option_premium is required for {self.position_type.value} positions",
                    field="option_premium", value=self.option_premium
                )
        if self.position_type.is_option and (self.strike is None or self.strike <= 0):
            raise InvalidInputError(
                f"strike is required for {self.position_type.value} options",
                field="strike", value=self.strike
            )
        if self.win_probability is not None and not 0 <= self.win_probability <= 100:
            raise InvalidInputError("win_probability must be between 0 and 100",
                                    field="win_probability", value=self.win_probability)
        if self.quantity is not None and self.quantity <= 0:
            raise InvalidInputError("quantity must be positive", field="quantity", value=self.quantity)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositionSpec":
        quantity = _number(data, "quantity", positive=True)
        dte = _number(data, "daysToExpiration")
        spec = cls(
            entry_price=_number(data, "entryPrice", required=True, positive=True),
            target_price=_number(data, "targetPrice", required=True, positive=True),
            stop_loss_price=_number(data, "stopLossPrice", required=True, positive=True),
            position_type=_enum(PositionType, data, "positionType"),
            iv=_number(data, "iv"),
            win_probability=_number(data, "winProbability"),
            option_premium=_number(data, "optionPremium"),
            strike=_number(data, "strike"),
            days_to_expiration=int(dte) if dte is not None else None,
            quantity=int(quantity) if quantity is not None else None,
        )
        spec.validate()
        return spec


@dataclass(frozen=True)
class RiskAnalysisResult:
    risk_amount: float
    reward_amount: float
    risk_reward_ratio: float
    win_probability: float
    expected_value: float
    dollar_risk: float
    dollar_reward: float
    adjusted_risk_reward_ratio: float
    risk_score: float
    trade_quality: str
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "riskAmount": self.risk_amount,
            "rewardAmount": self.reward_amount,
            "riskRewardRatio": self.risk_reward_ratio,
            "winProbability": self.win_probability,
            "expectedValue": self.expected_value,
            "dollarRisk": self.dollar_risk,
            "dollarReward": self.dollar_reward,
            "adjustedRiskRewardRatio": self.adjusted_risk_reward_ratio,
            "riskScore": self.risk_score,
            "tradeQuality": self.trade_quality,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class PositionSizingRequest:
    account_size: float
    risk_percentage: float                        # Percent of account at risk
    option_premium: float
    stock_price: Optional[float] = None
    iv: Optional[float] = None                    # Percent
    gex_adjustment: GexAdjustment = GexAdjustment.NEUTRAL

    def validate(self) -> None:
        if not is_finite_number(self.account_size) or self.account_size <= 0:
            raise InvalidInputError("account_size must be a positive number",
                                    field="account_size", value=self.account_size)
        if not is_finite_number(self.risk_percentage) or not 0 < self.risk_percentage <= 100:
            raise InvalidInputError("risk_percentage must be in (0, 100]",
                                    field="risk_percentage", value=self.risk_percentage)
        if not is_finite_number(self.option_premium) or self.option_premium <= 0:
            raise InvalidInputError("option_premium must be a positive number",
                                    field="option_premium", value=self.option_premium)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositionSizingRequest":
        request = cls(
            account_size=_number(data, "accountSize", required=True, positive=True),
            risk_percentage=_number(data, "riskPercentage", required=True, positive=True),
            option_premium=_number(data, "optionPremium", required=True, positive=True),
            stock_price=_number(data, "stockPrice"),
            iv=_number(data, "iv"),
            gex_adjustment=_enum(GexAdjustment, data, "gexAdjustment", required=False)
            or GexAdjustment.NEUTRAL,
        )
        request.validate()
        return request


@dataclass(frozen=True)
class PositionSizingResult:
    contracts_to_trade: int
    initial_contracts: int
    adjustment_factor: float
    max_risk: float
    max_risk_percentage: float
    notional_value: float
    iv_adjustment: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "contractsToTrade": self.contracts_to_trade,
            "initialContractsCalculated": self.initial_contracts,
            "adjustmentFactor": self.adjustment_factor,
            "maxRisk": self.max_risk,
            "maxRiskPercentage": self.max_risk_percentage,
            "notionalValue": self.notional_value,
            "ivAdjustment": self.iv_adjustment,
        }


@dataclass(frozen=True)
class StopLossRequest:
    entry_price: float
    trade_type: TradeType
    stop_type: StopType
    option_premium: Optional[float] = None
    days_to_expiration: Optional[float] = None
    iv: Optional[float] = None
    atr_value: Optional[float] = None
    account_size: Optional[float] = None
    risk_percentage: Optional[float] = None
    technical_level: Optional[float] = None
    percentage_value: Optional[float] = None
    fixed_dollar_amount: Optional[float] = None
    time_days: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StopLossRequest":
        return cls(
            entry_price=_number(data, "entryPrice", required=True, positive=True),
            trade_type=_enum(TradeType, data, "tradeType"),
            stop_type=_enum(StopType, data, "stopType"),
            option_premium=_number(data, "optionPremium", positive=True),
            days_to_expiration=_number(data, "daysToExpiration", positive=True),
            iv=_number(data, "iv"),
            atr_value=_number(data, "atrValue", positive=True),
            account_size=_number(data, "accountSize", positive=True),
            risk_percentage=_number(data, "riskPercentage", positive=True),
            technical_level=_number(data, "technicalLevel", positive=True),
            percentage_value=_number(data, "percentageValue", positive=True),
            fixed_dollar_amount=_number(data, "fixedDollarAmount", positive=True),
            time_days=_number(data, "timeDays", positive=True),
        )


@dataclass(frozen=True)
class StopLossResult:
    entry_price: float
    trade_type: TradeType
    stop_type: StopType
    stop_loss_price: Optional[float]
    stop_loss_amount: Optional[float]
    max_loss: Optional[float]
    risk_description: str
    confidence_level: str                          # high, medium or low
    recommendations: tuple[str, ...] = ()
    stop_loss_percentage: Optional[float] = None   # Percent of premium

    def to_dict(self) -> dict[str, Any]:
        return {
            "entryPrice": self.entry_price,
            "tradeType": self.trade_type.value,
            "stopType": self.stop_type.value,
            "stopLossPrice": self.stop_loss_price,
            "stopLossAmount": self.stop_loss_amount,
            "maxLoss": self.max_loss,
            "riskDescription": self.risk_description,
            "confidenceLevel": self.confidence_level,
            "additionalRecommendations": list(self.recommendations),
            "stopLossPercentage": self.stop_loss_percentage,
        }
