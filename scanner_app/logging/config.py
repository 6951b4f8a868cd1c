"""
Logging setup for the scanner.

Every event carries a ``subsystem`` key. Classifier decisions log under
``classifier`` with an audit flag, risk calculator requests under ``risk``,
and everything else (providers, engine, scans) falls back to ``core``.
Use ``configure_logging`` once at startup and the ``get_*_logger`` helpers
inside modules.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, FilteringBoundLogger, WrappedLogger

DEFAULT_SUBSYSTEM = "core"


def add_default_subsystem(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag events that were not logged through a subsystem logger"""
    event_dict.setdefault("subsystem", DEFAULT_SUBSYSTEM)
    return event_dict


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for scanner runs.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON lines; otherwise console output
        include_timestamp: Include an ISO timestamp on each event
        include_caller: Include caller filename and line number
        extra_processors: Additional structlog processors, run before rendering
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_default_subsystem,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_classifier_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for setup classification decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for rule checks and classifications
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="classifier",
        audit_trail=True
    )


def get_risk_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for risk calculator requests.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for risk calculations
    """
    logger = get_logger(name)

    return logger.bind(subsystem="risk")


def log_rule_check(
    logger: FilteringBoundLogger,
    rule_name: str,
    passed: bool,
    ticker: str,
    setup_type: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a single classifier rule evaluation with standardized format.

    Args:
        logger: Structlog logger instance
        rule_name: Name of the rule being evaluated
        passed: Whether the rule passed or failed
        ticker: Ticker being classified
        setup_type: Rule set the rule belongs to
        reason: Detailed reason for the decision
        context: Additional context data
    """
    bound_logger = logger.bind(
        rule_name=rule_name,
        rule_result="PASS" if passed else "FAIL",
        ticker=ticker,
        setup_type=setup_type,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if passed:
        bound_logger.info("Rule passed")
    else:
        bound_logger.debug("Rule failed")


def log_setup_classification(
    logger: FilteringBoundLogger,
    ticker: str,
    setup_type: str,
    strength: float,
    scores: dict[str, float],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of a classifier run with standardized format.

    Args:
        logger: Structlog logger instance
        ticker: Ticker that was classified
        setup_type: Chosen setup type
        strength: Strength of the chosen rule set
        scores: Strength of every evaluated rule set
        context: Additional context data
    """
    bound_logger = logger.bind(
        ticker=ticker,
        setup_type=setup_type,
        strength=strength,
        scores=scores,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Setup classified")
