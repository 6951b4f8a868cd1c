"""Position sizing under IV and gamma-regime adjustments"""

import math
from typing import Optional

from ..config.defaults import RiskParams
from ..logging.config import get_risk_logger
from .models import GexAdjustment, PositionSizingRequest, PositionSizingResult

risk_logger = get_risk_logger(__name__)


def _floor(value: float) -> int:
    # Absorb float residue such as 79.99999999999999 before flooring
    return math.floor(round(value, 6))


def iv_adjustment_factor(iv: Optional[float], params: RiskParams) -> tuple[float, str]:
    """Sizing factor and note for the IV band; unknown IV is not adjusted"""
    if iv is not None and iv > params.high_iv_threshold:
        return params.high_iv_factor, "Applied High IV reduction"
    if iv is not None and iv < params.low_iv_threshold:
        return params.low_iv_factor, "Applied Low IV increase"
    return 1.0, "No IV adjustment"


def gex_adjustment_factor(adjustment: GexAdjustment, params: RiskParams) -> float:
    if adjustment == GexAdjustment.CONSERVATIVE:
        return params.conservative_factor
    if adjustment == GexAdjustment.AGGRESSIVE:
        return params.aggressive_factor
    return 1.0


def calculate_position_size(request: PositionSizingRequest,
                            params: Optional[RiskParams] = None) -> PositionSizingResult:
    """
    Number of contracts to trade

    contracts = floor(account x risk% / premium), scaled by the IV and GEX
    factors, floored again, and never below one contract.

    Raises:
        InvalidInputError: If account size, risk percentage or premium is invalid
    """
    params = params or RiskParams()
    request.validate()

    risk_dollars = request.account_size * request.risk_percentage / 100
    initial = _floor(risk_dollars / request.option_premium)

    iv_factor, iv_note = iv_adjustment_factor(request.iv, params)
    factor = iv_factor * gex_adjustment_factor(request.gex_adjustment, params)
    contracts = max(1, _floor(initial * factor))

    max_risk = contracts * request.option_premium
    max_risk_pct = max_risk / request.account_size * 100

    if max_risk_pct > params.max_account_risk_pct:
        risk_logger.warning("Position risk exceeds account risk limit",
                            contracts=contracts, max_risk_pct=max_risk_pct,
                            limit_pct=params.max_account_risk_pct)

    result = PositionSizingResult(
        contracts_to_trade=contracts,
        initial_contracts=initial,
        adjustment_factor=factor,
        max_risk=max_risk,
        max_risk_percentage=max_risk_pct,
        notional_value=contracts * request.option_premium * params.contract_multiplier,
        iv_adjustment=iv_note,
    )

    risk_logger.info("Position sized", contracts=contracts, initial_contracts=initial,
                     adjustment_factor=factor, gex_adjustment=request.gex_adjustment.value)
    return result
