"""
Synthetic options chain generation.

Produces chain snapshots shaped like real data (open interest concentrated
near the money, a volatility smile, synthetic Greeks) when no options feed
is available. When the spot-price provider is also unavailable the generator
falls back to a fixed default spot with fixed Greeks and IV.
"""

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

import structlog

from ..config.defaults import ChainParams, DefaultConfig, get_default_config
from ..data.models import OptionQuote, StrikeQuote
from ..errors import UpstreamUnavailableError
from ..utils.numeric import is_finite_number, round_half_up
from ..utils.time import upcoming_monthly_expirations
from .greeks import approximate_greeks

logger = structlog.get_logger(__name__)

SpotProvider = Callable[[str], float]


@dataclass(frozen=True)
class SyntheticChain:
    """Generated chain snapshot for one (symbol, expiration)."""
    symbol: str
    expiration: str
    spot: float
    is_fallback: bool
    strikes: list[StrikeQuote] = field(default_factory=list)


def strike_step_for(spot: float) -> float:
    """Strike spacing of roughly 2.5% of spot, in multiples of 5 (minimum 5)"""
    return max(1.0, round_half_up(spot * 0.025) / 5) * 5


class SyntheticChainGenerator:
    """Builds synthetic chains around a spot price."""

    def __init__(self, config: Optional[DefaultConfig] = None,
                 spot_provider: Optional[SpotProvider] = None,
                 rng: Optional[random.Random] = None):
        """
        Args:
            config: Configuration; chain parameters are read from config.chain
            spot_provider: Callable returning the spot price for a symbol; it
                signals outages by raising UpstreamUnavailableError
            rng: Random source for open interest and volume, seed it for
                reproducible chains
        """
        self.config = config or get_default_config()
        self.params: ChainParams = self.config.chain
        self.spot_provider = spot_provider
        self.rng = rng or random.Random()

    def list_expirations(self, today: Optional[date] = None) -> list[str]:
        """Upcoming monthly expirations (third Fridays)"""
        return upcoming_monthly_expirations(today, self.params.expiration_count)

    def generate_chain(self, symbol: str, expiration: str) -> SyntheticChain:
        """
        Generate a chain snapshot for a symbol and expiration

        Args:
            symbol: Underlying ticker
            expiration: Expiration date, YYYY-MM-DD

        Returns:
            SyntheticChain; ``is_fallback`` is True when the default spot
            price had to be used
        """
        spot = self._fetch_spot(symbol)
        if spot is None:
            return self._fallback_chain(symbol, expiration)

        step = strike_step_for(spot)
        strikes: dict[float, StrikeQuote] = {}
        for i in range(-self.params.strike_count, self.params.strike_count + 1):
            strike = round_half_up((spot + i * step) * 2) / 2
            if strike <= 0:
                continue
            strikes[strike] = self._synthetic_strike(spot, strike)

        return SyntheticChain(
            symbol=symbol,
            expiration=expiration,
            spot=spot,
            is_fallback=False,
            strikes=[strikes[k] for k in sorted(strikes)],
        )

    def _fetch_spot(self, symbol: str) -> Optional[float]:
        """Spot price from the provider, or None when it is unavailable"""
        if self.spot_provider is None:
            logger.warning("No spot provider configured, using default spot",
                           symbol=symbol, default_spot=self.params.default_spot_price)
            return None

        try:
            spot = self.spot_provider(symbol)
        except UpstreamUnavailableError as e:
            logger.warning("Spot price unavailable, using default spot",
                           symbol=symbol, source=e.source, error=str(e),
                           default_spot=self.params.default_spot_price)
            return None

        if not is_finite_number(spot) or spot <= 0:
            logger.warning("Spot provider returned an unusable price, using default spot",
                           symbol=symbol, spot=spot,
                           default_spot=self.params.default_spot_price)
            return None

        return float(spot)

    def _synthetic_strike(self, spot: float, strike: float) -> StrikeQuote:
        greeks = approximate_greeks(spot, strike)
        proximity = 1 - min(1.0, greeks.strike_distance * 10)
        base_oi = 1000 + self.rng.random() * 9000
        above = strike > spot
        below = strike < spot

        call = OptionQuote(
            open_interest=int(round_half_up(base_oi * (1.5 if above else 0.8) * proximity)),
            volume=int(round_half_up(base_oi * 0.1 * (1.3 if above else 0.7) * proximity)),
            iv=greeks.iv + (0.05 if above else 0.0),
            gamma=greeks.gamma,
            charm=greeks.charm,
            vanna=greeks.vanna,
            vomma=greeks.vomma,
        )
        put = OptionQuote(
            open_interest=int(round_half_up(base_oi * (1.5 if below else 0.8) * proximity)),
            volume=int(round_half_up(base_oi * 0.1 * (1.3 if below else 0.7) * proximity)),
            iv=greeks.iv + (0.05 if below else 0.0),
            gamma=greeks.gamma,
            charm=greeks.charm,
            vanna=greeks.vanna,
            vomma=greeks.vomma,
        )
        return StrikeQuote(strike=strike, call=call, put=put)

    def _fallback_chain(self, symbol: str, expiration: str) -> SyntheticChain:
        """Fixed strikes around the default spot with fixed Greeks and IV"""
        spot = self.params.default_spot_price
        step = self.params.fallback_strike_step
        strikes = []
        for i in range(-self.params.strike_count, self.params.strike_count + 1):
            strike = spot + i * step
            if strike <= 0:
                continue
            distance = abs(strike - spot) / spot
            side = dict(
                gamma=max(0.0, 0.04 - distance * 0.1),
                charm=0.01,
                vanna=0.02,
                vomma=0.05,
                iv=self.params.fallback_iv,
            )
            strikes.append(StrikeQuote(
                strike=strike,
                call=OptionQuote(
                    open_interest=int(round_half_up(1000 + self.rng.random() * 9000)),
                    volume=int(round_half_up(100 + self.rng.random() * 900)),
                    **side
                ),
                put=OptionQuote(
                    open_interest=int(round_half_up(1000 + self.rng.random() * 9000)),
                    volume=int(round_half_up(100 + self.rng.random() * 900)),
                    **side
                ),
            ))

        return SyntheticChain(
            symbol=symbol,
            expiration=expiration,
            spot=spot,
            is_fallback=True,
            strikes=strikes,
        )
