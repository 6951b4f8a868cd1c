"""Tests for the synthetic chain generator"""

import random
from datetime import date
from unittest.mock import Mock

import pytest

from scanner_app.errors import UpstreamUnavailableError
from scanner_app.options.chain import SyntheticChainGenerator, strike_step_for


class TestStrikeStep:
    """Test strike spacing"""

    @pytest.mark.parametrize("spot,expected", [(100.0, 5.0), (400.0, 10.0), (20.0, 5.0), (1000.0, 25.0)])
    def test_step(self, spot, expected):
        assert strike_step_for(spot) == expected


class TestSyntheticChainGenerator:
    """Test SyntheticChainGenerator"""

    def test_strikes_around_spot(self, seeded_rng):
        """Test 31 ascending strikes centred on spot"""
        generator = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=seeded_rng)
        chain = generator.generate_chain("SPY", "2024-01-19")

        strikes = [q.strike for q in chain.strikes]
        assert not chain.is_fallback
        assert chain.spot == 100.0
        assert len(strikes) == 31
        assert strikes == sorted(strikes)
        assert strikes[0] == 25.0 and strikes[-1] == 175.0
        assert 100.0 in strikes

    def test_strikes_rounded_to_half_dollar(self, seeded_rng):
        generator = SyntheticChainGenerator(spot_provider=lambda _: 123.37, rng=seeded_rng)
        chain = generator.generate_chain("AAPL", "2024-01-19")
        assert all((q.strike * 2).is_integer() for q in chain.strikes)

    def test_skips_non_positive_strikes(self, seeded_rng):
        """Test a low spot never yields zero or negative strikes"""
        generator = SyntheticChainGenerator(spot_provider=lambda _: 20.0, rng=seeded_rng)
        chain = generator.generate_chain("XYZ", "2024-01-19")
        assert all(q.strike > 0 for q in chain.strikes)
        assert len(chain.strikes) < 31

    def test_open_interest_concentrated_near_money(self, seeded_rng):
        """Test strikes 10% or more away carry no open interest"""
        generator = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=seeded_rng)
        chain = generator.generate_chain("SPY", "2024-01-19")
        by_strike = {q.strike: q for q in chain.strikes}

        assert by_strike[150.0].call.open_interest == 0
        assert by_strike[50.0].put.open_interest == 0
        assert by_strike[100.0].call.open_interest > 0

    def test_iv_skew(self, seeded_rng):
        """Test calls carry extra IV above spot and puts below"""
        generator = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=seeded_rng)
        by_strike = {q.strike: q for q in generator.generate_chain("SPY", "2024-01-19").strikes}

        above, below = by_strike[105.0], by_strike[95.0]
        assert above.call.iv == pytest.approx(0.325 + 0.05)
        assert above.put.iv == pytest.approx(0.325)
        assert below.put.iv == pytest.approx(0.325 + 0.05)
        assert below.call.iv == pytest.approx(0.325)

    def test_greeks_attached(self, seeded_rng):
        generator = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=seeded_rng)
        atm = {q.strike: q for q in generator.generate_chain("SPY", "2024-01-19").strikes}[100.0]
        assert atm.call.gamma == pytest.approx(0.08)
        assert atm.put.gamma == pytest.approx(0.08)

    def test_seeded_rng_is_deterministic(self):
        """Test equal seeds produce equal chains"""
        first = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=random.Random(7))
        second = SyntheticChainGenerator(spot_provider=lambda _: 100.0, rng=random.Random(7))
        assert first.generate_chain("SPY", "2024-01-19") == second.generate_chain("SPY", "2024-01-19")

    def test_fallback_on_upstream_failure(self, seeded_rng):
        """Test an unavailable spot feed yields the default chain"""
        provider = Mock(side_effect=UpstreamUnavailableError("quote feed down", source="quotes"))
        generator = SyntheticChainGenerator(spot_provider=provider, rng=seeded_rng)

        chain = generator.generate_chain("SPY", "2024-01-19")

        provider.assert_called_once_with("SPY")
        assert chain.is_fallback
        assert chain.spot == 100.0
        assert [q.strike for q in chain.strikes] == [100.0 + i * 5 for i in range(-15, 16)]
        atm = {q.strike: q for q in chain.strikes}[100.0]
        assert atm.call.iv == 0.30
        assert atm.call.gamma == pytest.approx(0.04)
        assert atm.call.vanna == 0.02
        assert atm.call.charm == 0.01
        assert atm.call.vomma == 0.05
        assert all(1000 <= q.call.open_interest <= 10000 for q in chain.strikes)
        assert all(100 <= q.put.volume <= 1000 for q in chain.strikes)

    def test_fallback_gamma_never_negative(self, seeded_rng):
        chain = SyntheticChainGenerator(rng=seeded_rng).generate_chain("SPY", "2024-01-19")
        assert all(q.call.gamma >= 0.0 for q in chain.strikes)

    def test_fallback_without_provider(self, seeded_rng):
        assert SyntheticChainGenerator(rng=seeded_rng).generate_chain("SPY", "2024-01-19").is_fallback

    def test_fallback_on_unusable_spot(self, seeded_rng):
        generator = SyntheticChainGenerator(spot_provider=lambda _: 0.0, rng=seeded_rng)
        assert generator.generate_chain("SPY", "2024-01-19").is_fallback

    def test_other_errors_propagate(self, seeded_rng):
        """Test only upstream outages are absorbed"""
        generator = SyntheticChainGenerator(spot_provider=Mock(side_effect=KeyError("SPY")), rng=seeded_rng)
        with pytest.raises(KeyError):
            generator.generate_chain("SPY", "2024-01-19")

    def test_list_expirations(self):
        """Test third Fridays from the reference date"""
        expirations = SyntheticChainGenerator().list_expirations(date(2024, 1, 20))
        assert expirations[:3] == ["2024-02-16", "2024-03-15", "2024-04-19"]
        assert len(expirations) == 6
