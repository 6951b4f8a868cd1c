"""
Setup analysis engine coordinator.

Orchestrates the per-ticker pipeline: price history → indicators, options
chain → aggregates and key levels, both → setup classification. Data
sources and the result cache are injected by the caller.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

import structlog

from .config.defaults import DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .data.models import PricePoint, StrikeQuote
from .errors import (
    DataQualityError,
    GracefulDegradationError,
    MissingDataError,
    UpstreamUnavailableError,
)
from .metrics.calculator import TechnicalIndicatorCalculator
from .models.metrics import MarketAggregate, TechnicalSnapshot
from .options.aggregates import build_market_aggregate, calculate_vwiv
from .options.chain import SyntheticChainGenerator
from .setups.classifier import SetupClassifier
from .setups.levels import find_key_levels
from .setups.models import KeyLevels, SetupInputs, SetupType, TradeSetup
from .setups.summary import MarketSummary, summarize_market
from .utils.cache import TTLCache

logger = structlog.get_logger(__name__)


class PriceHistorySource(Protocol):
    def get_price_history(self, ticker: str) -> Sequence[PricePoint]:
        """Daily bars for a ticker in chronological order"""
        ...


class OptionsChainSource(Protocol):
    def get_chain(self, ticker: str) -> Sequence[StrikeQuote]:
        """Current chain snapshot for the nearest expiration"""
        ...


@dataclass(frozen=True)
class TickerAnalysis:
    """Everything computed for one ticker in one run."""
    ticker: str
    close: float
    snapshot: TechnicalSnapshot
    aggregate: MarketAggregate
    key_levels: KeyLevels
    setup: TradeSetup
    volume_trend: Optional[str] = None
    synthetic_chain: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "close": self.close,
            "technicals": self.snapshot.to_dict(),
            "sentiment": self.aggregate.to_dict(),
            "keyLevels": self.key_levels.to_dict(),
            "setup": self.setup.to_dict(),
            "volumeTrend": self.volume_trend,
            "syntheticChain": self.synthetic_chain,
        }


@dataclass(frozen=True)
class ScanReport:
    """Filtered, strength-ordered scan results with a market summary."""
    results: list[TickerAnalysis]
    counts: dict[str, int]
    summary: MarketSummary
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "counts": dict(self.counts),
            "marketSummary": self.summary.to_dict(),
            "failed": list(self.failed),
        }


class SetupAnalysisEngine:
    """
    Main coordinator for per-ticker setup analysis.

    Manages the analysis pipeline:
    Price History → Indicators ┐
    Options Chain → Aggregates ┴→ Classifier → TradeSetup
    """

    def __init__(self, price_source: PriceHistorySource,
                 chain_source: Optional[OptionsChainSource] = None,
                 config: Optional[DefaultConfig] = None,
                 cache: Optional[TTLCache] = None,
                 tie_break: Optional[Sequence[str]] = None,
                 config_loader: Optional[ConfigLoader] = None,
                 rng: Optional[random.Random] = None) -> None:
        """
        Args:
            price_source: Provides daily price history
            chain_source: Provides options chains; when omitted, or when it
                raises UpstreamUnavailableError, a synthetic chain around the
                latest close is used
            config: Configuration for every ticker; ignored when
                config_loader is given
            cache: Result cache; a private cache with the configured TTL is
                created when omitted
            tie_break: Classifier priority order override
            config_loader: Builds per-ticker configuration from tickers.yaml
            rng: Random source for synthetic chains, seed it for
                reproducible runs
        """
        self.price_source = price_source
        self.chain_source = chain_source
        self.config_loader = config_loader
        self.config = config or (config_loader.defaults if config_loader
                                 else get_default_config())
        if cache is None:
            cache = TTLCache(default_ttl=self.config.cache.ttl_seconds)
        self.cache = cache
        self.tie_break = tuple(tie_break) if tie_break else None
        self.rng = rng if rng is not None else random.Random()

        # Last known PCR per ticker, used when a chain has no call open interest
        self._last_pcr: dict[str, float] = {}
        # Volume-weighted IV per ticker from earlier runs, oldest first
        self._iv_history: dict[str, list[float]] = {}

        logger.info("Setup analysis engine initialized",
                    chain_source=type(chain_source).__name__ if chain_source else None,
                    per_ticker_config=config_loader is not None)

    def analyze_ticker(self, ticker: str, refresh: bool = False) -> TickerAnalysis:
        """
        Analyze one ticker

        Args:
            ticker: Symbol to analyze
            refresh: Ignore any cached result

        Returns:
            TickerAnalysis

        Raises:
            MissingDataError: If the price source has no history
            InsufficientDataError: If history is shorter than the indicator warm-up
            UpstreamUnavailableError: If the price source is unavailable
        """
        if not refresh:
            cached = self.cache.get(ticker)
            if cached is not None:
                logger.debug("Serving cached analysis", ticker=ticker)
                return cached

        config = self._config_for(ticker)
        calculator = TechnicalIndicatorCalculator(config)

        points = list(self.price_source.get_price_history(ticker))
        if not points:
            raise MissingDataError(f"No price history for {ticker}", data_type="price_history",
                                   context={"ticker": ticker})

        clean = calculator.validator.clean(points)
        snapshot = calculator.latest_snapshot(clean)
        close = clean[-1].close

        chain, synthetic = self._load_chain(ticker, close, config)
        aggregate = build_market_aggregate(
            ticker, snapshot.date, chain, close,
            previous_pcr=self._last_pcr.get(ticker),
            iv_history=self._iv_history.get(ticker),
            config=config,
        )
        self._last_pcr[ticker] = aggregate.pcr
        self._record_iv(ticker, calculate_vwiv(chain), config.aggregates.iv_history_length)

        params = config.classifier
        key_levels = find_key_levels(chain, close, params.key_level_min_oi, params.key_level_min_gamma)
        volume_trend = calculator.volume_trend(clean)

        inputs = SetupInputs.from_snapshot(
            ticker, close, snapshot, aggregate,
            volume_trend=volume_trend,
            down_day_volume_trend=calculator.down_day_volume_trend(clean),
        )
        setup = SetupClassifier(config, self.tie_break).classify(inputs, key_levels)

        analysis = TickerAnalysis(
            ticker=ticker,
            close=close,
            snapshot=snapshot,
            aggregate=aggregate,
            key_levels=key_levels,
            setup=setup,
            volume_trend=volume_trend,
            synthetic_chain=synthetic,
        )
        self.cache.put(ticker, analysis, config.cache.ttl_seconds)
        return analysis

    def batch_analyze(self, tickers: Sequence[str],
                      refresh: bool = False) -> dict[str, Optional[TickerAnalysis]]:
        """
        Analyze several tickers; a ticker that fails on data maps to None
        """
        results: dict[str, Optional[TickerAnalysis]] = {}
        for ticker in tickers:
            try:
                results[ticker] = self.analyze_ticker(ticker, refresh=refresh)
            except (DataQualityError, GracefulDegradationError) as e:
                logger.warning("Ticker analysis failed", ticker=ticker,
                               error_type=type(e).__name__, error=str(e))
                results[ticker] = None
        return results

    def scan(self, tickers: Sequence[str], setup_type: Optional[str] = None,
             limit: Optional[int] = None, min_strength: float = 0.0,
             refresh: bool = False) -> ScanReport:
        """
        Analyze tickers and report matches ordered by strength

        Args:
            tickers: Symbols to scan
            setup_type: Keep only this setup type ("bullish", "bearish",
                "neutral"); all when omitted
            limit: Maximum number of results
            min_strength: Drop setups weaker than this
            refresh: Ignore cached results

        Returns:
            ScanReport; counts and summary cover every analyzed ticker,
            not just the filtered results
        """
        wanted = SetupType(setup_type) if setup_type else None
        analyses = self.batch_analyze(tickers, refresh=refresh)

        succeeded = [a for a in analyses.values() if a is not None]
        failed = [t for t, a in analyses.items() if a is None]

        matches = [
            a for a in succeeded
            if (wanted is None or a.setup.setup_type == wanted) and a.setup.strength >= min_strength
        ]
        matches.sort(key=lambda a: a.setup.strength, reverse=True)
        if limit is not None:
            matches = matches[:limit]

        summary = summarize_market(
            [a.setup for a in succeeded],
            [a.aggregate for a in succeeded],
            [a.snapshot.rsi14 for a in succeeded],
        )
        counts = {
            SetupType.BULLISH.value: summary.bullish_count,
            SetupType.BEARISH.value: summary.bearish_count,
            SetupType.NEUTRAL.value: summary.neutral_count,
        }

        logger.info("Scan completed", tickers=len(tickers), analyzed=len(succeeded),
                    failed=len(failed), matches=len(matches), setup_type=setup_type)

        return ScanReport(results=matches, counts=counts, summary=summary, failed=failed)

    def invalidate(self, ticker: Optional[str] = None) -> None:
        """Drop cached results for one ticker, or all of them"""
        if ticker is None:
            self.cache.clear()
        else:
            self.cache.invalidate(ticker)

    def _record_iv(self, ticker: str, vwiv: float, max_length: int) -> None:
        """Append a run's volume-weighted IV; chains without traded volume are skipped"""
        if vwiv <= 0:
            return
        history = self._iv_history.setdefault(ticker, [])
        history.append(vwiv)
        del history[:-max_length]

    def _config_for(self, ticker: str) -> DefaultConfig:
        if self.config_loader is None:
            return self.config
        return self.config_loader.build_config(ticker)

    def _load_chain(self, ticker: str, close: float,
                    config: DefaultConfig) -> tuple[list[StrikeQuote], bool]:
        """Chain from the source, or a synthetic chain around the latest close"""
        if self.chain_source is not None:
            try:
                chain = list(self.chain_source.get_chain(ticker))
                if chain:
                    return sorted(chain, key=lambda q: q.strike), False
                logger.warning("Empty options chain, using synthetic chain", ticker=ticker)
            except UpstreamUnavailableError as e:
                logger.warning("Options chain unavailable, using synthetic chain",
                               ticker=ticker, source=e.source, error=str(e))

        generator = SyntheticChainGenerator(
            config, spot_provider=lambda _symbol: close, rng=self.rng
        )
        expiration = generator.list_expirations()[0]
        return generator.generate_chain(ticker, expiration).strikes, True
