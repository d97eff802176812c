"""
Recovery strategy classifications for error handling.

These classes categorize errors by their recovery characteristics and
guide how the refresh pipeline reacts to them.
"""

from typing import Optional


class RecoverableError(Exception):
    """Errors that can be recovered from by retrying."""

    def __init__(self, message: str, retry_count: int = 0,
                 max_retries: int = 2, **kwargs):
        super().__init__(message)
        self.retry_count = retry_count
        self.max_retries = max_retries
        self.recoverable = True


class UnrecoverableError(Exception):
    """Errors that fail the current refresh cycle."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = False


class GracefulDegradationError(Exception):
    """Errors that allow continued operation with reduced information."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class RateLimitedError(RecoverableError):
    """Upstream answered with HTTP 429.

    Raised to the caller once the retry budget of the market-data path is
    exhausted.
    """

    def __init__(self, message: str, status_code: int = 429, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class TransientNetworkError(GracefulDegradationError):
    """Network or HTTP failure on a balance or holdings lookup."""

    def __init__(self, message: str, source: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, degraded_functionality=source,
                         fallback_strategy="unknown", **kwargs)
        self.source = source
        self.status_code = status_code
