"""Fixtures for setup classification tests."""

import pytest

from scanner_app.setups.models import SetupInputs


@pytest.fixture
def inputs_factory():
    """Factory for classifier inputs; defaults describe a bullish ticker."""
    def make(**overrides) -> SetupInputs:
        values = dict(
            ticker="SPY",
            date="2024-03-01",
            close=112.0,
            ema10=110.0,
            ema20=105.0,
            ema50=100.0,
            rsi14=65.0,
            pcr=0.7,
            gamma_exposure=600_000.0,
            iv_percentile=50.0,
        )
        values.update(overrides)
        return SetupInputs(**values)
    return make
