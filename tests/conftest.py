"""Pytest configuration and shared fixtures."""

import random
from typing import Callable, Optional, Sequence

import pytest

from scanner_app.config.defaults import get_default_config
from scanner_app.data.models import OptionQuote, PricePoint, StrikeQuote
from scanner_app.utils.time import date_from_timestamp

DAY = 86_400
START_TS = 1_704_067_200  # 2024-01-01 00:00:00 UTC


def build_series(closes: Sequence[float], volumes: Optional[Sequence[int]] = None,
                 start_ts: int = START_TS) -> list[PricePoint]:
    """Daily bars with the given closes; open equals the previous close."""
    points = []
    for i, close in enumerate(closes):
        ts = start_ts + i * DAY
        open_ = closes[i - 1] if i else close
        points.append(PricePoint(
            date=date_from_timestamp(ts),
            timestamp_seconds=ts,
            open=open_,
            high=max(open_, close) + 0.5,
            low=min(open_, close) - 0.5,
            close=close,
            volume=volumes[i] if volumes is not None else 1_000_000,
        ))
    return points


def build_strike(strike: float, call_oi: int = 0, put_oi: int = 0,
                 call_gamma: float = 0.0, put_gamma: float = 0.0,
                 call_volume: int = 0, put_volume: int = 0,
                 call_iv: Optional[float] = None, put_iv: Optional[float] = None) -> StrikeQuote:
    return StrikeQuote(
        strike=strike,
        call=OptionQuote(open_interest=call_oi, volume=call_volume, iv=call_iv, gamma=call_gamma),
        put=OptionQuote(open_interest=put_oi, volume=put_volume, iv=put_iv, gamma=put_gamma),
    )


@pytest.fixture
def default_config():
    """Default configuration."""
    return get_default_config()


@pytest.fixture
def series_factory() -> Callable[..., list[PricePoint]]:
    """Factory building daily price series from closes."""
    return build_series


@pytest.fixture
def strike_factory() -> Callable[..., StrikeQuote]:
    """Factory building strike rows."""
    return build_strike


@pytest.fixture
def rising_series() -> list[PricePoint]:
    """60 bars rising by 1 per day with volume picking up at the end."""
    closes = [100.0 + i for i in range(60)]
    volumes = [1_000_000] * 55 + [1_500_000] * 5
    return build_series(closes, volumes)


@pytest.fixture
def falling_series() -> list[PricePoint]:
    """60 bars falling by 1 per day."""
    return build_series([200.0 - i for i in range(60)])


@pytest.fixture
def flat_series() -> list[PricePoint]:
    """60 bars at a constant close."""
    return build_series([50.0] * 60)


@pytest.fixture
def sample_chain() -> list[StrikeQuote]:
    """Small chain around a spot of 100."""
    return [
        build_strike(90.0, call_oi=100, put_oi=2000, call_gamma=0.01, put_gamma=0.02),
        build_strike(95.0, call_oi=300, put_oi=1500, call_gamma=0.03, put_gamma=0.04),
        build_strike(100.0, call_oi=1200, put_oi=1200, call_gamma=0.08, put_gamma=0.08),
        build_strike(105.0, call_oi=1800, put_oi=400, call_gamma=0.04, put_gamma=0.03),
        build_strike(110.0, call_oi=2500, put_oi=100, call_gamma=0.02, put_gamma=0.01),
    ]


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(42)
