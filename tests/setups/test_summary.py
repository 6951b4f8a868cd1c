"""Tests for the cross-ticker market summary"""

import pytest

from scanner_app.models.metrics import MarketAggregate
from scanner_app.setups.models import SetupType, TradeSetup
from scanner_app.setups.summary import market_sentiment, market_volatility, summarize_market


def _setup(ticker: str, setup_type: SetupType) -> TradeSetup:
    return TradeSetup(ticker=ticker, date="2024-03-01", setup_type=setup_type, strength=80,
                      entry_price=100.0, stop_loss=95.0, target_price=110.0, risk_reward_ratio=2.0)


def _aggregate(ticker: str, pcr: float, gex: float) -> MarketAggregate:
    return MarketAggregate(symbol=ticker, date="2024-03-01", pcr=pcr, max_pain=100.0,
                           gamma_exposure=gex, iv_percentile=50.0)


class TestMarketSentiment:
    """Test sentiment labels"""

    @pytest.mark.parametrize("bullish,bearish,label", [
        (3, 1, "Strongly Bullish"),
        (2, 1, "Moderately Bullish"),
        (1, 3, "Strongly Bearish"),
        (1, 2, "Moderately Bearish"),
        (2, 2, "Neutral"),
        (0, 0, "Neutral"),
    ])
    def test_labels(self, bullish, bearish, label):
        assert market_sentiment(bullish, bearish) == label


class TestMarketVolatility:
    """Test volatility labels from mean RSI"""

    @pytest.mark.parametrize("rsi_values,label", [
        ([75.0, 72.0], "High"),
        ([25.0], "High"),
        ([66.0], "Moderate"),
        ([34.0], "Moderate"),
        ([50.0, 60.0], "Low"),
        ([], "Low"),
    ])
    def test_labels(self, rsi_values, label):
        assert market_volatility(rsi_values) == label


class TestSummarizeMarket:
    """Test summarize_market function"""

    def test_summary(self):
        setups = [_setup("A", SetupType.BULLISH), _setup("B", SetupType.BULLISH),
                  _setup("C", SetupType.BULLISH), _setup("D", SetupType.BEARISH),
                  _setup("E", SetupType.NEUTRAL)]
        aggregates = [_aggregate("A", 0.6, 1_000_000.0), _aggregate("B", 0.8, -250_000.0),
                      _aggregate("C", 0.0, 50_000.0)]
        summary = summarize_market(setups, aggregates, [60.0, 72.0])

        assert (summary.bullish_count, summary.bearish_count, summary.neutral_count) == (3, 1, 1)
        assert summary.sentiment == "Strongly Bullish"
        assert summary.volatility == "Moderate"
        assert summary.pcr_aggregate == 0.7
        assert summary.gex_aggregate == pytest.approx(800_000.0)

    def test_empty(self):
        summary = summarize_market([], [])
        assert summary.sentiment == "Neutral"
        assert summary.pcr_aggregate == 1.0
        assert summary.gex_aggregate == 0
        assert summary.to_dict()["pcrAggregate"] == 1.0
