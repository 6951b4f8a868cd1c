"""
Synthetic Greeks approximations.

These values are NOT derived from an option pricing model. They are a
deterministic function of the distance between strike and spot, used to
produce plausible chain data for demos and feed outages. Nothing here is
financially accurate; only the internal shape (peaks near the money, smile
in the wings) is meaningful.
"""

from dataclasses import dataclass

from ..errors import InvalidInputError
from ..utils.numeric import is_finite_number


@dataclass(frozen=True)
class SyntheticGreeks:
    """Approximated sensitivities for one strike. Not model-derived."""
    strike_distance: float
    iv: float
    gamma: float
    vanna: float
    charm: float
    vomma: float


def strike_distance(spot: float, strike: float) -> float:
    """
    Relative distance of a strike from spot: |K - S| / S

    Raises:
        InvalidInputError: If spot or strike is not a positive finite number
    """
    if not is_finite_number(spot) or spot <= 0:
        raise InvalidInputError("Spot price must be a positive number", field="spot", value=spot)
    if not is_finite_number(strike) or strike <= 0:
        raise InvalidInputError("Strike must be a positive number", field="strike", value=strike)
    return abs(strike - spot) / spot


def smile_iv(distance: float) -> float:
    """Base implied volatility: 30% plus a linear smile in strike distance"""
    return 0.30 + distance * 0.5


def synthetic_gamma(distance: float) -> float:
    """Peaks at 0.08 at the money, never negative"""
    if distance < 0.05:
        return max(0.0, 0.08 - distance)
    return max(0.0, 0.03 - distance)


def synthetic_vanna(distance: float) -> float:
    """Elevated on the slope of the smile (2%-10% from spot)"""
    if 0.02 < distance < 0.10:
        return 0.05 - distance * 0.3
    return 0.01


def synthetic_charm(distance: float) -> float:
    """Delta decay concentrated within 3% of spot"""
    if distance < 0.03:
        return 0.04 - distance
    return 0.01


def synthetic_vomma(distance: float) -> float:
    """Vega convexity, capped at 0.15 beyond 10% from spot"""
    if distance > 0.10:
        return 0.15
    return 0.05 + distance * 0.5


def approximate_greeks(spot: float, strike: float) -> SyntheticGreeks:
    """
    Approximate Greeks for a strike from its distance to spot

    Args:
        spot: Underlying spot price
        strike: Option strike

    Returns:
        SyntheticGreeks for the strike
    """
    distance = strike_distance(spot, strike)
    return SyntheticGreeks(
        strike_distance=distance,
        iv=smile_iv(distance),
        gamma=synthetic_gamma(distance),
        vanna=synthetic_vanna(distance),
        charm=synthetic_charm(distance),
        vomma=synthetic_vomma(distance),
    )
