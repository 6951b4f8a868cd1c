"""Tests for EMA calculations"""

import pytest

from scanner_app.metrics.ema import calculate_ema


class TestEMACalculation:
    """Test calculate_ema function"""

    def test_output_length_matches_input(self):
        """Test output is aligned with the input series"""
        closes = [float(i) for i in range(1, 31)]
        result = calculate_ema(closes, 10)
        assert len(result) == len(closes)

    def test_warmup_entries_are_none(self):
        """Test first period-1 entries are undefined"""
        result = calculate_ema([float(i) for i in range(1, 21)], 10)
        assert result[:9] == [None] * 9
        assert result[9] is not None

    def test_seed_is_simple_mean(self):
        """Test seed is the mean of the first period closes"""
        closes = [1.0, 2.0, 3.0, 4.0, 5.0]
        result = calculate_ema(closes, 5)
        assert result[4] == pytest.approx(3.0)

    def test_recursive_step(self):
        """Test the recursion after the seed"""
        closes = [10.0, 10.0, 10.0, 16.0]
        result = calculate_ema(closes, 3)
        # k = 0.5: (16 - 10) * 0.5 + 10
        assert result[3] == pytest.approx(13.0)

    def test_flat_series_equals_price(self):
        """Test flat input yields the price everywhere after warm-up"""
        result = calculate_ema([42.0] * 30, 10)
        assert all(v == pytest.approx(42.0) for v in result[9:])

    def test_insufficient_data_all_none(self):
        """Test fewer closes than the period produces no values"""
        assert calculate_ema([1.0, 2.0, 3.0], 10) == [None, None, None]

    def test_empty_input(self):
        """Test empty input"""
        assert calculate_ema([], 10) == []

    def test_invalid_period(self):
        """Test non-positive period is rejected"""
        with pytest.raises(ValueError):
            calculate_ema([1.0, 2.0], 0)
