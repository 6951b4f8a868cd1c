#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from scanner_app.config.loader import ConfigLoader
from scanner_app.config.validation import ConfigValidator, ValidationError


def validate_ticker_config(ticker: str) -> List[ValidationError]:
    """Validate merged configuration for a specific ticker."""
    loader = ConfigLoader.create()
    config = loader.merge_config(ticker)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("Validating setup scanner configuration...")

    loader = ConfigLoader.create()
    tickers = ["SPY", "TSLA", "UNKNOWN"]  # UNKNOWN uses defaults only

    all_valid = True

    for ticker in tickers:
        print(f"\nValidating {ticker}...")

        errors = validate_ticker_config(ticker)
        if errors:
            print(f"Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  - {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print(f"{ticker} configuration is valid")

    print("\nTesting per-call overrides...")
    test_overrides = {
        "classifier": {
            "bullish_rsi_min": 60.0,
            "priority": ["neutral", "bullish", "bearish"],
        }
    }

    config = loader.merge_config("SPY", test_overrides)
    errors = ConfigValidator.validate_config(config)
    if errors:
        print("Override validation failed:")
        for error in errors:
            print(f"  - {error.field}: {error.message}")
        all_valid = False
    else:
        print("Override validation passed")

    if all_valid:
        print("\nAll configuration validation passed!")
        sys.exit(0)
    else:
        print("\nConfiguration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
