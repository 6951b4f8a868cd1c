"""
Market aggregates over an options chain snapshot.

Put-call ratio, max pain, gamma exposure and volume-weighted IV. All
divisions are guarded; degenerate chains produce documented sentinel
values rather than exceptions.
"""

from typing import Optional, Sequence

import structlog

from ..config.defaults import DefaultConfig, get_default_config
from ..data.models import StrikeQuote
from ..models.metrics import ChainMetrics, MarketAggregate
from ..utils.numeric import finite_or, is_finite_number, safe_divide

logger = structlog.get_logger(__name__)

STABILIZING = "stabilizing"
AMPLIFYING = "amplifying"
NEUTRAL_REGIME = "neutral"


def calculate_pcr(chain: Sequence[StrikeQuote], previous: Optional[float] = None,
                  default: float = 1.0) -> float:
    """
    Put-call ratio of open interest: sum(put OI) / sum(call OI)

    A chain with puts but no calls yields 0.0. A chain with no call open
    interest falls back to ``previous`` when known, else ``default``.
    """
    call_oi = sum(q.call.open_interest for q in chain)
    put_oi = sum(q.put.open_interest for q in chain)

    if call_oi <= 0:
        fallback = finite_or(previous, default)
        logger.warning("No call open interest, using fallback PCR",
                       put_oi=put_oi, fallback=fallback,
                       source="previous" if fallback == previous else "default")
        return fallback

    return put_oi / call_oi


def usable_strikes(chain: Sequence[StrikeQuote]) -> list[StrikeQuote]:
    """Rows with a positive finite strike, ascending"""
    return sorted((q for q in chain if is_finite_number(q.strike) and q.strike > 0),
                  key=lambda q: q.strike)


def option_holder_payout(chain: Sequence[StrikeQuote], settlement: float) -> float:
    """Total intrinsic value paid to option holders if the underlying settles at ``settlement``"""
    total = 0.0
    for q in chain:
        total += max(0.0, settlement - q.strike) * q.call.open_interest
        total += max(0.0, q.strike - settlement) * q.put.open_interest
    return total


def calculate_max_pain(chain: Sequence[StrikeQuote]) -> Optional[float]:
    """
    Strike minimizing total option-holder payout at expiration

    Candidates are the chain's own strikes; ties resolve to the lowest
    strike. Rows without a positive finite strike are ignored.

    Returns:
        Max pain strike, or None when no usable strike exists
    """
    rows = usable_strikes(chain)
    best_strike: Optional[float] = None
    best_payout = float("inf")
    for q in rows:
        payout = option_holder_payout(rows, q.strike)
        if payout < best_payout:
            best_strike = q.strike
            best_payout = payout
    return best_strike


def calculate_gamma_exposure(chain: Sequence[StrikeQuote], scaling_factor: float = 1.0) -> float:
    """
    Signed gamma exposure: sum(call gamma * call OI - put gamma * put OI) * scaling_factor

    Positive values mean dealer hedging dampens moves, negative values
    mean it amplifies them.
    """
    net = sum(q.call.gamma * q.call.open_interest - q.put.gamma * q.put.open_interest
              for q in chain)
    return finite_or(net * scaling_factor, 0.0)


def calculate_vwiv(chain: Sequence[StrikeQuote]) -> float:
    """Volume-weighted implied volatility over both sides; 0.0 without traded volume"""
    weighted = 0.0
    volume = 0
    for q in chain:
        for side in (q.call, q.put):
            if side.iv is None or not is_finite_number(side.iv):
                continue
            weighted += side.iv * side.volume
            volume += side.volume
    return safe_divide(weighted, volume)


def calculate_chain_metrics(chain: Sequence[StrikeQuote], spot: float,
                            config: Optional[DefaultConfig] = None,
                            previous_pcr: Optional[float] = None) -> ChainMetrics:
    """
    Aggregate a chain snapshot

    Gamma exposure is expressed in dollar notional: net gamma times the
    contract multiplier times spot.
    """
    params = (config or get_default_config()).aggregates
    return ChainMetrics(
        total_call_oi=sum(q.call.open_interest for q in chain),
        total_put_oi=sum(q.put.open_interest for q in chain),
        total_call_volume=sum(q.call.volume for q in chain),
        total_put_volume=sum(q.put.volume for q in chain),
        pcr=calculate_pcr(chain, previous_pcr, params.default_pcr),
        max_pain=calculate_max_pain(chain),
        gamma_exposure=calculate_gamma_exposure(chain, params.contract_multiplier * spot),
        vwiv=calculate_vwiv(chain),
    )


def calculate_iv_percentile(current_iv: float, history: Sequence[float],
                            default: float = 50.0) -> float:
    """
    Percentile rank of the current IV within its history

    The rank is the position of the first historical value at or above
    ``current_iv`` in the sorted history, as a percentage of its length.

    Returns:
        0-100; 100 when every historical value is below current_iv,
        ``default`` for an empty history
    """
    values = sorted(v for v in history if is_finite_number(v))
    if not values or not is_finite_number(current_iv):
        return default

    for index, value in enumerate(values):
        if value >= current_iv:
            return index / len(values) * 100
    return 100.0


def classify_gamma_regime(gamma_exposure: float, neutral_band: float) -> str:
    """Label dealer positioning: stabilizing above the band, amplifying below it"""
    if gamma_exposure > neutral_band:
        return STABILIZING
    if gamma_exposure < -neutral_band:
        return AMPLIFYING
    return NEUTRAL_REGIME


def build_market_aggregate(symbol: str, date: str, chain: Sequence[StrikeQuote], spot: float,
                           previous_pcr: Optional[float] = None,
                           iv_history: Optional[Sequence[float]] = None,
                           config: Optional[DefaultConfig] = None) -> MarketAggregate:
    """
    Build the per-snapshot MarketAggregate for a symbol

    The IV percentile ranks the chain's volume-weighted IV against
    ``iv_history`` (same units), defaulting when no history is known.
    """
    config = config or get_default_config()
    metrics = calculate_chain_metrics(chain, spot, config, previous_pcr)
    iv_percentile = calculate_iv_percentile(
        metrics.vwiv, iv_history or [], config.aggregates.default_iv_percentile
    )

    logger.debug("Market aggregate built", symbol=symbol, date=date, pcr=metrics.pcr,
                 max_pain=metrics.max_pain, gamma_exposure=metrics.gamma_exposure,
                 iv_percentile=iv_percentile)

    return MarketAggregate(
        symbol=symbol,
        date=date,
        pcr=metrics.pcr,
        max_pain=metrics.max_pain,
        gamma_exposure=metrics.gamma_exposure,
        iv_percentile=iv_percentile,
    )
