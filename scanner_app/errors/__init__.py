"""
Error classification system for the setup analytics core.

This module provides a structured exception hierarchy for the kinds of
failures encountered while computing indicators, aggregating options chains
and evaluating risk calculators.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
)
from .validation import InvalidInputError
from .system_failures import (
    SystemFailureError,
    MetricsCalculationError,
)
from .recovery import (
    GracefulDegradationError,
    UpstreamUnavailableError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # Request validation
    "InvalidInputError",
    # System Failures
    "SystemFailureError",
    "MetricsCalculationError",
    # Degradation
    "GracefulDegradationError",
    "UpstreamUnavailableError",
]
