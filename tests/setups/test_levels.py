"""Tests for key levels"""

from scanner_app.setups.levels import find_key_levels


class TestKeyLevels:
    """Test find_key_levels function"""

    def test_nearest_levels(self, sample_chain):
        levels = find_key_levels(sample_chain, 100.0)
        assert levels.next_resistance == 105.0
        assert levels.next_support == 95.0
        assert levels.max_pain == 100.0

    def test_spot_between_strikes(self, sample_chain):
        levels = find_key_levels(sample_chain, 102.0)
        assert levels.next_resistance == 105.0
        assert levels.next_support == 100.0

    def test_gamma_qualifies_strike(self, strike_factory):
        """Test low open interest with high gamma still counts"""
        chain = [
            strike_factory(95.0, put_oi=10, put_gamma=0.06),
            strike_factory(105.0, call_oi=10, call_gamma=0.01),
            strike_factory(110.0, call_oi=10, call_gamma=0.06),
        ]
        levels = find_key_levels(chain, 100.0)
        assert levels.next_resistance == 110.0
        assert levels.next_support == 95.0

    def test_no_qualifying_strikes(self, strike_factory):
        chain = [strike_factory(95.0, put_oi=10), strike_factory(105.0, call_oi=10)]
        levels = find_key_levels(chain, 100.0)
        assert levels.next_resistance is None
        assert levels.next_support is None

    def test_to_dict(self, sample_chain):
        assert find_key_levels(sample_chain, 100.0).to_dict() == {
            "nextResistance": 105.0, "nextSupport": 95.0, "maxPain": 100.0,
        }

    def test_non_finite_strikes_ignored(self, sample_chain, strike_factory):
        chain = sample_chain + [strike_factory(float("nan"), call_oi=50000, put_oi=50000),
                                strike_factory(float("inf"), call_oi=50000)]
        levels = find_key_levels(chain, 100.0)
        assert levels.next_resistance == 105.0
        assert levels.next_support == 95.0
        assert levels.max_pain == 100.0
