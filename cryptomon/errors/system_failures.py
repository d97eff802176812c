"""
System failure error classifications for unrecoverable errors.

A system failure aborts the current refresh cycle; previously published
results stay in place.
"""

from typing import Optional, Dict, Any

from .recovery import UnrecoverableError


class SystemFailureError(UnrecoverableError):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class MarketDataError(SystemFailureError):
    """Market data could not be fetched; prices are required for every asset."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 market_ids: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.market_ids = market_ids or []


class ConfigurationError(SystemFailureError):
    """Configuration file could not be loaded or failed validation."""

    def __init__(self, message: str, path: Optional[str] = None,
                 errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.errors = errors or []
