"""
Stop-loss strategies.

Five mutually exclusive modes (technical, percentage, ATR, fixed dollar,
time), each validating its own inputs before computing a stop price and a
per-unit stop amount. Either may be None where it has no meaning for the
trade type, e.g. a time stop has no price.
"""

from typing import Optional

from ..config.defaults import RiskParams
from ..errors import InvalidInputError
from ..logging.config import get_risk_logger
from .models import StopLossRequest, StopLossResult, StopType, TradeType

risk_logger = get_risk_logger(__name__)

_DESCRIPTIONS = {
    StopType.TECHNICAL: ("Technical stops based on support/resistance or key levels tend to "
                         "provide strong risk management with clear invalidation points."),
    StopType.PERCENTAGE: ("Percentage-based stops are effective for standardizing risk across "
                          "different positions, but may not account for market volatility."),
    StopType.ATR: ("ATR-based stops dynamically adjust to market volatility, providing more "
                   "room in volatile conditions and tighter stops in low volatility."),
    StopType.FIXED: ("Fixed dollar stops ensure consistent maximum loss amounts regardless "
                     "of position size or market conditions."),
    StopType.TIME: ("Time-based stops protect against theta decay and opportunity cost, but "
                    "should generally be combined with price-based stops."),
}

_CONFIDENCE = {
    StopType.TECHNICAL: "high",
    StopType.PERCENTAGE: "medium",
    StopType.ATR: "high",
    StopType.FIXED: "medium",
    StopType.TIME: "low",
}


def _require(value: Optional[float], field: str, mode: str) -> float:
    if value is None:
        raise InvalidInputError(f"Missing {field} for {mode} stop type", field=field)
    return value


def _technical_stop(req: StopLossRequest, notes: list[str]) -> tuple[Optional[float], Optional[float]]:
    level = _require(req.technical_level, "technical_level", "technical")
    amount = None
    if req.trade_type in (TradeType.CALL, TradeType.STOCK):
        if level >= req.entry_price:
            raise InvalidInputError(
                "Technical stop level should be below entry price for long calls or stocks",
                field="technical_level", value=level
            )
        amount = req.entry_price - level
    elif req.trade_type == TradeType.PUT:
        if level <= req.entry_price:
            raise InvalidInputError(
                "Technical stop level should be above entry price for long puts",
                field="technical_level", value=level
            )
        amount = level - req.entry_price

    notes.append("Consider adding a time element to your technical stop - exit if price "
                 "hasn't reached target within a specific timeframe.")
    return level, amount


def _percentage_stop(req: StopLossRequest, notes: list[str]) -> tuple[Optional[float], Optional[float]]:
    pct = _require(req.percentage_value, "percentage_value", "percentage") / 100

    if req.trade_type == TradeType.STOCK:
        amount = req.entry_price * pct
        price = req.entry_price - amount
    else:
        # Options lose a share of the premium; the price moves against the position
        premium = _require(req.option_premium, "option_premium", "option percentage")
        amount = premium * pct
        if req.trade_type == TradeType.PUT:
            price = req.entry_price * (1 + pct)
        else:
            price = req.entry_price * (1 - pct)

    if req.iv is not None and req.iv > 40:
        notes.append("Consider wider percentage stops in high IV environment to account for "
                     "increased price swings.")
    return price, amount


def _atr_stop(req: StopLossRequest, notes: list[str],
              params: RiskParams) -> tuple[Optional[float], Optional[float]]:
    atr = _require(req.atr_value, "atr_value", "ATR")
    distance = atr * params.atr_multiplier

    if req.trade_type == TradeType.SPREAD:
        premium = _require(req.option_premium, "option_premium", "spread ATR")
        price, amount = None, premium * 0.5
    elif req.trade_type == TradeType.PUT:
        price, amount = req.entry_price + distance, distance
    else:
        price, amount = req.entry_price - distance, distance

    notes.append("For best results, use the 14-day ATR value and adjust the multiplier "
                 "based on the timeframe of your trade.")
    return price, amount


def _fixed_stop(req: StopLossRequest, notes: list[str]) -> tuple[Optional[float], Optional[float]]:
    amount = _require(req.fixed_dollar_amount, "fixed_dollar_amount", "fixed")
    # Options and spreads are managed on premium value, not underlying price
    price = req.entry_price - amount if req.trade_type == TradeType.STOCK else None

    if req.account_size:
        share = amount / req.account_size * 100
        if share > 2:
            notes.append(f"Warning: Fixed stop represents {share:.2f}% of account size, which "
                         f"exceeds the 2% recommended maximum.")
    return price, amount


def _time_stop(req: StopLossRequest, notes: list[str]) -> tuple[Optional[float], Optional[float]]:
    days = _require(req.time_days, "time_days", "time-based")
    amount = None
    if req.trade_type != TradeType.STOCK and req.option_premium and req.days_to_expiration:
        # Linear theta: premium spread evenly over the remaining days
        amount = req.option_premium / req.days_to_expiration * days

    notes.append("For best results, combine time-based stops with at least one price-based "
                 "stop method.")
    if req.days_to_expiration and days > req.days_to_expiration * 0.5:
        notes.append(f"Warning: Time stop is set for more than half the time until expiration "
                     f"({days:g} days vs {req.days_to_expiration:g} DTE).")
    return None, amount


def calculate_stop_loss(request: StopLossRequest,
                        params: Optional[RiskParams] = None) -> StopLossResult:
    """
    Compute a stop for the requested mode

    Raises:
        InvalidInputError: If the entry price is invalid, the mode's required
            field is missing, or a technical level sits on the wrong side of
            entry
    """
    params = params or RiskParams()
    if request.entry_price is None or request.entry_price <= 0:
        raise InvalidInputError("entry_price must be a positive number",
                                field="entry_price", value=request.entry_price)

    notes: list[str] = []
    if request.stop_type == StopType.TECHNICAL:
        price, amount = _technical_stop(request, notes)
    elif request.stop_type == StopType.PERCENTAGE:
        price, amount = _percentage_stop(request, notes)
    elif request.stop_type == StopType.ATR:
        price, amount = _atr_stop(request, notes, params)
    elif request.stop_type == StopType.FIXED:
        price, amount = _fixed_stop(request, notes)
    else:
        price, amount = _time_stop(request, notes)

    max_loss = None
    if request.account_size and request.risk_percentage:
        max_loss = request.account_size * request.risk_percentage / 100
        if amount and amount > max_loss:
            notes.append(f"Warning: Calculated stop loss amount ({amount:.2f}) exceeds max risk "
                         f"tolerance of ${max_loss:.2f} ({request.risk_percentage:g}% of account).")

    stop_pct = None
    if amount and request.option_premium:
        stop_pct = round(amount / request.option_premium * 100, 2)

    risk_logger.info("Stop loss calculated", stop_type=request.stop_type.value,
                     trade_type=request.trade_type.value, stop_loss_price=price,
                     stop_loss_amount=amount)

    return StopLossResult(
        entry_price=request.entry_price,
        trade_type=request.trade_type,
        stop_type=request.stop_type,
        stop_loss_price=price,
        stop_loss_amount=amount,
        max_loss=max_loss,
        risk_description=_DESCRIPTIONS[request.stop_type],
        confidence_level=_CONFIDENCE[request.stop_type],
        recommendations=tuple(notes),
        stop_loss_percentage=stop_pct,
    )
