"""
Degradation error classifications.

Upstream collaborators (spot-price feeds, chain providers) raise these when
they cannot serve a request; the computation layer answers with a documented
fallback instead of failing the whole analysis.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class UpstreamUnavailableError(GracefulDegradationError):
    """External price or chain fetch failed."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        kwargs.setdefault("degraded_functionality", source)
        super().__init__(message, **kwargs)
        self.source = source
