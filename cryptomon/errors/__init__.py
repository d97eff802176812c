"""
Error classification for the refresh pipeline.

Errors are grouped by how the pipeline reacts to them: recoverable errors
are retried, degradable errors collapse into an unknown value, and
unrecoverable errors fail the whole refresh cycle.
"""

from .data_quality import (
    DataQualityError,
    InsufficientDataError,
    MalformedResponseError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    MarketDataError,
)
from .recovery import (
    RecoverableError,
    UnrecoverableError,
    GracefulDegradationError,
    RateLimitedError,
    TransientNetworkError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "InsufficientDataError",
    "MalformedResponseError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "MarketDataError",
    # Recovery Categories
    "RecoverableError",
    "UnrecoverableError",
    "GracefulDegradationError",
    "RateLimitedError",
    "TransientNetworkError",
]
