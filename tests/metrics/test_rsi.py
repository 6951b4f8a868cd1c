"""Tests for RSI and Stochastic RSI calculations"""

import pytest

from scanner_app.metrics.rsi import (
    calculate_price_changes,
    calculate_rsi,
    calculate_stoch_rsi,
    rsi_from_averages,
)


class TestPriceChanges:
    """Test gain/loss split"""

    def test_gains_and_losses(self):
        """Test deltas split into non-negative gains and losses"""
        gains, losses = calculate_price_changes([10.0, 12.0, 11.0, 11.0])
        assert gains == [2.0, 0.0, 0.0]
        assert losses == [0.0, 1.0, 0.0]


class TestRSICalculation:
    """Test calculate_rsi function"""

    def test_first_value_index(self):
        """Test first RSI appears at index period"""
        closes = [100.0 + i for i in range(20)]
        result = calculate_rsi(closes, 14)
        assert result[:14] == [None] * 14
        assert result[14] is not None

    def test_monotonic_increase_is_100(self):
        """Test no losses yields RSI 100 everywhere after warm-up"""
        closes = [100.0 + i * 0.7 for i in range(40)]
        result = calculate_rsi(closes, 14)
        assert all(v == 100.0 for v in result[14:])

    def test_monotonic_decrease_is_0(self):
        """Test no gains yields RSI 0"""
        closes = [200.0 - i for i in range(40)]
        result = calculate_rsi(closes, 14)
        assert all(v == pytest.approx(0.0) for v in result[14:])

    def test_flat_series_is_100(self):
        """Test a flat series falls under the zero-loss rule"""
        result = calculate_rsi([50.0] * 20, 14)
        assert result[14:] == [100.0] * 6

    def test_balanced_moves(self):
        """Test equal average gain and loss gives 50"""
        closes = [10.0, 11.0] * 8
        result = calculate_rsi(closes, 4)
        assert result[4] == pytest.approx(50.0)

    def test_simple_average_window(self):
        """Test the window uses the trailing deltas only"""
        # Deltas: +3, -1, +1, -1 -> avg gain 1, avg loss 0.5
        closes = [10.0, 13.0, 12.0, 13.0, 12.0]
        result = calculate_rsi(closes, 4)
        assert result[4] == pytest.approx(100 - 100 / 3)

    def test_insufficient_data(self):
        """Test period+1 closes are needed"""
        assert calculate_rsi([1.0] * 14, 14) == [None] * 14

    def test_rsi_from_averages_zero_loss(self):
        """Test zero average loss is defined as 100"""
        assert rsi_from_averages(0.0, 0.0) == 100.0
        assert rsi_from_averages(2.0, 0.0) == 100.0


class TestStochRSICalculation:
    """Test calculate_stoch_rsi function"""

    def test_first_value_needs_two_periods_of_prices(self):
        """Test first stochastic RSI at index 2*period-1 of the price series"""
        closes = [100.0 + (i % 3) for i in range(40)]
        rsi = calculate_rsi(closes, 14)
        stoch = calculate_stoch_rsi(rsi, 14)
        assert stoch[:27] == [None] * 27
        assert stoch[27] is not None

    def test_flat_window_is_50(self):
        """Test constant RSI window yields 50"""
        rsi = [None] * 5 + [70.0] * 14
        stoch = calculate_stoch_rsi(rsi, 14)
        assert stoch[-1] == 50.0

    def test_bounds(self):
        """Test values stay in [0, 100]"""
        rsi = [None] * 3 + [30.0, 80.0, 55.0, 10.0, 95.0, 60.0, 40.0, 70.0]
        stoch = calculate_stoch_rsi(rsi, 3)
        assert all(0.0 <= v <= 100.0 for v in stoch if v is not None)

    def test_position_in_range(self):
        """Test value is the position of the latest RSI within the window range"""
        stoch = calculate_stoch_rsi([20.0, 60.0, 40.0], 3)
        assert stoch[2] == pytest.approx(50.0)

    def test_extremes(self):
        """Test window maximum maps to 100 and minimum to 0"""
        assert calculate_stoch_rsi([20.0, 40.0, 60.0], 3)[2] == pytest.approx(100.0)
        assert calculate_stoch_rsi([60.0, 40.0, 20.0], 3)[2] == pytest.approx(0.0)

    def test_skips_undefined_entries(self):
        """Test None entries are not part of the window"""
        stoch = calculate_stoch_rsi([None, None, 10.0, 20.0], 2)
        assert stoch == [None, None, None, 100.0]
