"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

_SETUP_TYPES = {"bullish", "bearish", "neutral"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator periods."""
        errors = []

        for name in ("ema_short", "ema_medium", "ema_long", "rsi_period",
                     "stoch_rsi_period", "volume_trend_lookback"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        # EMA periods must be strictly increasing for the trend test
        periods = [params.get(name) for name in ("ema_short", "ema_medium", "ema_long")]
        if all(isinstance(p, int) and not isinstance(p, bool) for p in periods):
            if not periods[0] < periods[1] < periods[2]:
                errors.append(ValidationError(
                    field="ema_periods",
                    message="ema_short < ema_medium < ema_long is required",
                    value=tuple(periods)
                ))

        if "volume_flat_band_pct" in params:
            value = params["volume_flat_band_pct"]
            if not _is_number(value) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="volume_flat_band_pct",
                    message="Must be a number in [0, 1)",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_classifier_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate classifier thresholds and tie-break policy."""
        errors = []

        for low, high in (("bullish_rsi_min", "bullish_rsi_max"),
                          ("bearish_rsi_min", "bearish_rsi_max"),
                          ("neutral_rsi_min", "neutral_rsi_max")):
            for name in (low, high):
                if name in params:
                    value = params[name]
                    if not _is_number(value) or not 0 <= value <= 100:
                        errors.append(ValidationError(
                            field=name,
                            message="Must be a number between 0 and 100",
                            value=value
                        ))
            if _is_number(params.get(low)) and _is_number(params.get(high)):
                if params[low] > params[high]:
                    errors.append(ValidationError(
                        field=low,
                        message=f"Must not exceed {high}",
                        value=params[low]
                    ))

        for name in ("bullish_pcr_max", "bearish_pcr_min", "neutral_pcr_min", "neutral_pcr_max"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "gex_strong_positive" in params:
            value = params["gex_strong_positive"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="gex_strong_positive",
                    message="Must be a positive number",
                    value=value
                ))

        if "gex_strong_negative" in params:
            value = params["gex_strong_negative"]
            if not _is_number(value) or value >= 0:
                errors.append(ValidationError(
                    field="gex_strong_negative",
                    message="Must be a negative number",
                    value=value
                ))

        if "gex_neutral_band" in params:
            value = params["gex_neutral_band"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="gex_neutral_band",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "ema_convergence_pct" in params:
            value = params["ema_convergence_pct"]
            if not _is_number(value) or value <= 0 or value > 1:
                errors.append(ValidationError(
                    field="ema_convergence_pct",
                    message="Must be a positive number between 0 and 1",
                    value=value
                ))

        if "priority" in params:
            value = params["priority"]
            if (not isinstance(value, (list, tuple))
                    or len(value) != len(_SETUP_TYPES)
                    or set(value) != _SETUP_TYPES):
                errors.append(ValidationError(
                    field="priority",
                    message="Must list bullish, bearish and neutral exactly once",
                    value=value
                ))

        if "iv_adjusted_pcr" in params:
            value = params["iv_adjusted_pcr"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="iv_adjusted_pcr",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_risk_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate risk calculator parameters."""
        errors = []

        for name in ("high_iv_factor", "low_iv_factor", "conservative_factor",
                     "aggressive_factor", "atr_multiplier"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        low = params.get("min_win_probability")
        high = params.get("max_win_probability")
        for name, value in (("min_win_probability", low), ("max_win_probability", high)):
            if value is not None and (not _is_number(value) or not 0 <= value <= 100):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a number between 0 and 100",
                    value=value
                ))
        if _is_number(low) and _is_number(high) and low > high:
            errors.append(ValidationError(
                field="min_win_probability",
                message="Must not exceed max_win_probability",
                value=low
            ))

        return errors

    @staticmethod
    def validate_chain_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate synthetic chain parameters."""
        errors = []

        for name in ("strike_count", "expiration_count", "contract_multiplier"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        for name in ("default_spot_price", "fallback_strike_step", "fallback_iv"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "indicators" in config:
            errors.extend(ConfigValidator.validate_indicator_params(config["indicators"]))

        if "chain" in config:
            errors.extend(ConfigValidator.validate_chain_params(config["chain"]))

        if "classifier" in config:
            errors.extend(ConfigValidator.validate_classifier_params(config["classifier"]))

        if "risk" in config:
            errors.extend(ConfigValidator.validate_risk_params(config["risk"]))

        history_length = (config.get("aggregates") or {}).get("iv_history_length")
        if history_length is not None and (not isinstance(history_length, int)
                                           or isinstance(history_length, bool)
                                           or history_length <= 0):
            errors.append(ValidationError(
                field="iv_history_length",
                message="Must be a positive integer",
                value=history_length
            ))

        ttl = (config.get("cache") or {}).get("ttl_seconds")
        if ttl is not None and (not _is_number(ttl) or ttl < 0):
            errors.append(ValidationError(
                field="ttl_seconds",
                message="Must be a non-negative number",
                value=ttl
            ))

        return errors
