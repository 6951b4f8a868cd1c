"""Tests for raw record parsing into canonical models."""

import pytest

from scanner_app.data.parsers import (
    parse_options_chain,
    parse_price_history,
    parse_price_point,
    parse_strike_quote,
)
from scanner_app.errors import MalformedDataError


class TestParsePricePoint:
    """Test price bar parsing."""

    def test_camel_case_record(self):
        point = parse_price_point({
            "timestampSeconds": 1_704_067_200,
            "open": "100.5", "high": 101, "low": 99.5, "close": 100.75,
            "volume": 1234.4,
        })
        assert point.date == "2024-01-01"
        assert point.open == 100.5
        assert point.close == 100.75
        assert point.volume == 1234

    def test_snake_case_record_keeps_date(self):
        point = parse_price_point({
            "timestamp_seconds": "1704067200", "date": "2024-01-02",
            "open": 1, "high": 1, "low": 1, "close": 1,
        })
        assert point.timestamp_seconds == 1_704_067_200
        assert point.date == "2024-01-02"
        assert point.volume == 0

    def test_missing_timestamp(self):
        with pytest.raises(MalformedDataError):
            parse_price_point({"open": 1, "high": 1, "low": 1, "close": 1})

    def test_missing_close(self):
        with pytest.raises(MalformedDataError) as exc_info:
            parse_price_point({"timestamp": 1, "open": 1, "high": 1, "low": 1})
        assert "close" in str(exc_info.value)

    def test_not_a_dict(self):
        with pytest.raises(MalformedDataError):
            parse_price_point([1, 2, 3])

    def test_history_sorted(self):
        records = [
            {"timestamp": 1_704_153_600, "open": 2, "high": 2, "low": 2, "close": 2},
            {"timestamp": 1_704_067_200, "open": 1, "high": 1, "low": 1, "close": 1},
        ]
        points = parse_price_history(records)
        assert [p.close for p in points] == [1.0, 2.0]


class TestParseStrikeQuote:
    """Test strike row parsing in both wire shapes."""

    def test_nested_shape(self):
        quote = parse_strike_quote({
            "strike": 100,
            "call": {"oi": 1200, "volume": 300, "iv": 0.25, "gamma": 0.08},
            "put": {"openInterest": 900, "volume": 100, "impliedVolatility": 0.3},
        })
        assert quote.strike == 100.0
        assert quote.call.open_interest == 1200
        assert quote.call.gamma == 0.08
        assert quote.put.open_interest == 900
        assert quote.put.iv == 0.3
        assert quote.put.gamma == 0.0

    def test_flat_shape_shares_greeks(self):
        quote = parse_strike_quote({
            "strikePrice": 105,
            "callOpenInterest": 500, "putOpenInterest": 700,
            "callVolume": 50, "putVolume": 70,
            "callIV": 0.22, "putIV": 0.27,
            "gamma": 0.04, "vanna": 0.02,
        })
        assert quote.call.open_interest == 500
        assert quote.put.volume == 70
        assert quote.call.iv == 0.22
        assert quote.call.gamma == quote.put.gamma == 0.04
        assert quote.put.vanna == 0.02

    def test_missing_iv_is_none(self):
        quote = parse_strike_quote({"strike": 100})
        assert quote.call.iv is None
        assert quote.call.open_interest == 0

    def test_missing_strike(self):
        with pytest.raises(MalformedDataError):
            parse_strike_quote({"call": {}})

    @pytest.mark.parametrize("strike", ["NaN", "inf", 0, -5])
    def test_strike_must_be_positive_and_finite(self, strike):
        with pytest.raises(MalformedDataError, match="positive finite"):
            parse_strike_quote({"strike": strike, "call": {"oi": 10}})

    def test_bad_numeric_field(self):
        with pytest.raises(MalformedDataError):
            parse_strike_quote({"strike": 100, "call": {"oi": "lots"}})

    def test_chain_sorted_and_deduplicated(self):
        chain = parse_options_chain([
            {"strike": 110, "call": {"oi": 1}},
            {"strike": 100, "call": {"oi": 2}},
            {"strike": 110, "call": {"oi": 3}},
        ])
        assert [q.strike for q in chain] == [100.0, 110.0]
        assert chain[1].call.open_interest == 3
