"""Default configuration parameters for the setup analytics core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorParams:
    """Technical indicator periods."""
    ema_short: int = 10
    ema_medium: int = 20
    ema_long: int = 50
    rsi_period: int = 14
    stoch_rsi_period: int = 14
    volume_trend_lookback: int = 5                 # Bars per volume comparison window
    volume_flat_band_pct: float = 0.05             # Relative change treated as flat


@dataclass(frozen=True)
class ChainParams:
    """Synthetic options chain generation parameters."""
    strike_count: int = 15                          # Strikes above and below spot
    default_spot_price: float = 100.0               # Used when the spot feed is down
    fallback_strike_step: float = 5.0
    fallback_iv: float = 0.30
    expiration_count: int = 6                       # Monthly expirations to list
    contract_multiplier: int = 100


@dataclass(frozen=True)
class AggregateParams:
    """Options chain aggregation parameters."""
    default_pcr: float = 1.0                        # PCR when no call OI is known
    default_iv_percentile: float = 50.0             # IV percentile with empty history
    iv_history_length: int = 252                    # Runs of volume-weighted IV kept per ticker
    contract_multiplier: int = 100


@dataclass(frozen=True)
class ClassifierParams:
    """Setup classifier thresholds."""
    # RSI bands (inclusive)
    bullish_rsi_min: float = 55.0
    bullish_rsi_max: float = 80.0
    bearish_rsi_min: float = 20.0
    bearish_rsi_max: float = 45.0
    neutral_rsi_min: float = 45.0
    neutral_rsi_max: float = 55.0

    # Put-call ratio
    bullish_pcr_max: float = 0.8
    bearish_pcr_min: float = 1.2
    neutral_pcr_min: float = 0.8
    neutral_pcr_max: float = 1.2
    iv_adjusted_pcr: bool = False                   # Use IV-percentile PCR bands

    # Gamma exposure (scale dependent)
    gex_strong_positive: float = 500_000.0
    gex_strong_negative: float = -500_000.0
    gex_neutral_band: float = 200_000.0

    # EMA convergence tolerance for a flat trend
    ema_convergence_pct: float = 0.01

    # Tie-break order when rule sets score equally
    priority: tuple = ("bullish", "bearish", "neutral")

    # Strength display bands
    strong_threshold: float = 80.0
    moderate_threshold: float = 65.0

    # Entry/stop/target derivation
    bullish_stop_factor: float = 0.99               # Stop below EMA20
    bearish_stop_factor: float = 1.01               # Stop above EMA20
    fallback_target_pct: float = 0.05
    neutral_horizon_days: int = 7
    neutral_stop_buffer: float = 0.02
    key_level_min_oi: float = 1000.0
    key_level_min_gamma: float = 0.05


@dataclass(frozen=True)
class RiskParams:
    """Risk/reward and position sizing parameters."""
    high_iv_threshold: float = 60.0
    low_iv_threshold: float = 20.0
    high_iv_factor: float = 0.8
    low_iv_factor: float = 1.2
    conservative_factor: float = 0.8
    aggressive_factor: float = 1.2
    atr_multiplier: float = 2.5
    min_win_probability: float = 10.0
    max_win_probability: float = 90.0
    contract_multiplier: int = 100
    max_account_risk_pct: float = 2.0
    short_dated_days: int = 14


@dataclass(frozen=True)
class CacheParams:
    """Analysis result cache parameters."""
    ttl_seconds: float = 300.0


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    indicators: IndicatorParams
    chain: ChainParams
    aggregates: AggregateParams
    classifier: ClassifierParams
    risk: RiskParams
    cache: CacheParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        indicators=IndicatorParams(),
        chain=ChainParams(),
        aggregates=AggregateParams(),
        classifier=ClassifierParams(),
        risk=RiskParams(),
        cache=CacheParams(),
    )
