"""
Data quality error classifications for provider payloads and price series.

These exceptions describe problems with the data itself rather than with
the transport that delivered it.
"""

from typing import Optional, Dict, Any

from .recovery import GracefulDegradationError


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MalformedResponseError(DataQualityError, GracefulDegradationError):
    """Provider response exists but does not have the expected shape."""

    def __init__(self, message: str, source: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        DataQualityError.__init__(self, message, **kwargs)
        self.degraded_functionality = source
        self.fallback_strategy = "unknown"
        self.allows_degradation = True
        self.source = source
        self.expected_format = expected_format


class InsufficientDataError(DataQualityError):
    """Not enough price points for an indicator window."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count
