"""
Setup classifier.

Evaluates the bullish, bearish and neutral rule sets for one ticker and
picks the rule set with the highest strength. Equal strengths are resolved
by an explicit priority order taken from configuration.
"""

from typing import Optional, Sequence

from ..config.defaults import DefaultConfig, get_default_config
from ..errors import InvalidInputError
from ..logging.config import get_classifier_logger, log_setup_classification
from .levels import derive_levels
from .models import EmaTrend, KeyLevels, RuleSetResult, SetupInputs, SetupType, TradeSetup
from .rules import RULE_SETS

classifier_logger = get_classifier_logger(__name__)

STRONG = "strong"
MODERATE = "moderate"
WEAK = "weak"

_EMA_TREND_LABELS = {
    EmaTrend.BULLISH: "Bullish (EMA10 > EMA20 > EMA50)",
    EmaTrend.BEARISH: "Bearish (EMA10 < EMA20 < EMA50)",
    EmaTrend.NEUTRAL: "Neutral (EMAs converged)",
    EmaTrend.MIXED: "Mixed",
}


def strength_band(strength: float, strong_threshold: float = 80.0,
                  moderate_threshold: float = 65.0) -> str:
    """Display band for a setup strength"""
    if strength >= strong_threshold:
        return STRONG
    if strength >= moderate_threshold:
        return MODERATE
    return WEAK


def describe_ema_trend(trend: EmaTrend) -> str:
    return _EMA_TREND_LABELS[trend]


def parse_priority(priority: Sequence[str]) -> tuple[SetupType, ...]:
    """
    Validate a tie-break order

    Raises:
        InvalidInputError: If the order is not a permutation of the setup types
    """
    try:
        order = tuple(SetupType(p) for p in priority)
    except ValueError as e:
        raise InvalidInputError(f"Unknown setup type in priority: {e}",
                                field="priority", value=list(priority)) from e

    if sorted(order) != sorted(SetupType):
        raise InvalidInputError("Priority must list each setup type exactly once",
                                field="priority", value=list(priority))
    return order


class SetupClassifier:
    """
    Picks one setup type per run
    """

    def __init__(self, config: Optional[DefaultConfig] = None,
                 priority: Optional[Sequence[str]] = None):
        """
        Args:
            config: Configuration; thresholds are read from config.classifier
            priority: Tie-break order overriding config.classifier.priority
        """
        self.config = config or get_default_config()
        self.params = self.config.classifier
        self.priority = parse_priority(priority or self.params.priority)

    def evaluate(self, inputs: SetupInputs) -> list[RuleSetResult]:
        """Evaluate every rule set, in priority order"""
        return [RULE_SETS[setup_type](inputs, self.params) for setup_type in self.priority]

    def classify(self, inputs: SetupInputs, key_levels: Optional[KeyLevels] = None) -> TradeSetup:
        """
        Classify a ticker

        Args:
            inputs: Indicator and chain aggregates for the ticker
            key_levels: Chain-derived levels used for targets; when omitted
                targets fall back to fixed percentage moves and the
                aggregate's max pain

        Returns:
            TradeSetup for the rule set with the highest strength
        """
        results = self.evaluate(inputs)
        # max() keeps the first of equal elements, so priority order breaks ties
        best = max(results, key=lambda r: r.strength)
        levels = derive_levels(best.setup_type, inputs, key_levels, self.params)

        setup = TradeSetup(
            ticker=inputs.ticker,
            date=inputs.date,
            setup_type=best.setup_type,
            strength=best.strength,
            entry_price=levels.entry_price,
            stop_loss=levels.stop_loss,
            target_price=levels.target_price,
            risk_reward_ratio=levels.risk_reward_ratio,
            rule_results=tuple(results),
        )

        log_setup_classification(
            classifier_logger,
            inputs.ticker,
            best.setup_type.value,
            best.strength,
            {r.setup_type.value: r.strength for r in results},
            {
                "band": self.band(best.strength),
                "entry_price": setup.entry_price,
                "stop_loss": setup.stop_loss,
                "target_price": setup.target_price,
                "risk_reward_ratio": setup.risk_reward_ratio,
            }
        )
        return setup

    def band(self, strength: float) -> str:
        return strength_band(strength, self.params.strong_threshold, self.params.moderate_threshold)
