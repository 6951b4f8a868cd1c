"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import (
    AggregateParams,
    CacheParams,
    ChainParams,
    ClassifierParams,
    DefaultConfig,
    IndicatorParams,
    RiskParams,
    get_default_config,
)

_SECTION_TYPES = {
    "indicators": IndicatorParams,
    "chain": ChainParams,
    "aggregates": AggregateParams,
    "classifier": ClassifierParams,
    "risk": RiskParams,
    "cache": CacheParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_ticker_config(self, ticker: str) -> dict[str, Any]:
        """Load ticker-specific configuration overrides."""
        tickers_file = self.config_dir / "tickers.yaml"

        if not tickers_file.exists():
            return {}

        with open(tickers_file) as f:
            tickers_config = yaml.safe_load(f) or {}

        return tickers_config.get("tickers", {}).get(ticker, {}) or {}  # type: ignore[no-any-return]

    def merge_config(
        self,
        ticker: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Ticker-specific overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        ticker_config = self.load_ticker_config(ticker)
        config = self._deep_merge(config, ticker_config)

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(
        self,
        ticker: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """Merge configuration for a ticker and return it as dataclasses."""
        return config_from_dict(self.merge_config(ticker, overrides))

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def config_from_dict(config: dict[str, Any]) -> DefaultConfig:
    """
    Build a DefaultConfig from a merged configuration dictionary.

    Unknown keys are ignored; missing sections fall back to defaults.
    """
    sections = {}
    for name, section_type in _SECTION_TYPES.items():
        values = config.get(name) or {}
        known = {f.name for f in fields(section_type)}
        kwargs = {key: value for key, value in values.items() if key in known}
        if "priority" in kwargs and kwargs["priority"] is not None:
            kwargs["priority"] = tuple(kwargs["priority"])
        sections[name] = section_type(**kwargs)
    return DefaultConfig(**sections)
