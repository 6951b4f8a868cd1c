#!/usr/bin/env python3
"""
Basic Usage Example - Options Setup Scanner

This script demonstrates the setup analysis engine with simulated price
history and synthetic options chains. It shows how to:
- Plug in a price history source
- Scan a watchlist for setups
- Size a position and place a stop for the strongest setup

Run: python examples/basic_usage.py
"""

import random
import time
from typing import Any, Dict, List

from scanner_app.data.parsers import parse_price_history
from scanner_app.engine import SetupAnalysisEngine
from scanner_app.logging import configure_logging
from scanner_app.risk import (
    PositionSpec,
    PositionSizingRequest,
    PositionType,
    StopLossRequest,
    StopType,
    TradeType,
    analyze_risk_reward,
    calculate_position_size,
    calculate_stop_loss,
)

DAY = 86_400


def create_price_records(start_price: float, drift: float, days: int = 90,
                         seed: int = 0) -> List[Dict[str, Any]]:
    """Random-walk daily bars in the raw record shape."""
    rng = random.Random(seed)
    start_ts = int(time.time()) // DAY * DAY - days * DAY
    records = []
    price = start_price
    for i in range(days):
        open_price = price
        price = max(1.0, price * (1 + drift + rng.gauss(0, 0.01)))
        records.append({
            "timestampSeconds": start_ts + i * DAY,
            "open": open_price,
            "high": max(open_price, price) * 1.005,
            "low": min(open_price, price) * 0.995,
            "close": price,
            "volume": int(1_000_000 * (1 + rng.random())),
        })
    return records


class SimulatedPriceSource:
    """Price history source backed by generated records."""

    def __init__(self):
        self.records = {
            "AAPL": create_price_records(180.0, 0.004, seed=1),
            "XOM": create_price_records(110.0, -0.004, seed=2),
            "KO": create_price_records(60.0, 0.0, seed=3),
        }

    def get_price_history(self, ticker: str):
        return parse_price_history(self.records[ticker])


def print_setup(analysis) -> None:
    setup = analysis.setup
    print(f"  {setup.ticker:5s} {setup.setup_type.value:8s} strength {setup.strength:5.1f}  "
          f"entry {setup.entry_price:8.2f}  stop {setup.stop_loss:8.2f}  "
          f"target {setup.target_price:8.2f}  R/R {setup.risk_reward_ratio:.2f}")


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")

    print("Options Setup Scanner - Basic Usage Demo")
    print("=" * 60)

    print("1. Initializing the setup analysis engine...")
    engine = SetupAnalysisEngine(SimulatedPriceSource(), rng=random.Random(42))
    print()

    print("2. Scanning watchlist...")
    report = engine.scan(["AAPL", "XOM", "KO"])
    for analysis in report.results:
        print_setup(analysis)
    print(f"   Counts: {report.counts}")
    print(f"   Market: {report.summary.sentiment}, volatility {report.summary.volatility}")
    print()

    best = report.results[0].setup
    print(f"3. Risk checks for {best.ticker}...")
    position_type = PositionType.SHORT if best.setup_type.value == "bearish" else PositionType.LONG
    analysis = analyze_risk_reward(PositionSpec(
        entry_price=best.entry_price,
        target_price=best.target_price,
        stop_loss_price=best.stop_loss,
        position_type=position_type,
    ))
    print(f"   Trade quality: {analysis.trade_quality} (score {analysis.risk_score})")
    for note in analysis.recommendations:
        print(f"   - {note}")

    sizing = calculate_position_size(PositionSizingRequest(
        account_size=25_000.0, risk_percentage=1.0, option_premium=3.20, iv=45.0,
    ))
    print(f"   Contracts: {sizing.contracts_to_trade} ({sizing.iv_adjustment})")

    stop = calculate_stop_loss(StopLossRequest(
        entry_price=best.entry_price,
        trade_type=TradeType.STOCK,
        stop_type=StopType.PERCENTAGE,
        percentage_value=5.0,
    ))
    print(f"   5% stop: {stop.stop_loss_price:.2f}")
    print()

    print("Demo completed successfully!")


if __name__ == "__main__":
    main()
