"""
Time helpers for wall-clock timestamps and monotonic cache ages.
"""

import time
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def monotonic_seconds() -> float:
    """Monotonic clock reading used for TTL bookkeeping."""
    return time.monotonic()


def is_fresh(fetched_at: float, ttl_seconds: float, now: Optional[float] = None) -> bool:
    """
    Check whether an entry fetched at `fetched_at` is still within its TTL.

    Args:
        fetched_at: Monotonic timestamp of the fetch
        ttl_seconds: Time-to-live in seconds
        now: Monotonic timestamp to compare against, defaults to now

    Returns:
        True while now - fetched_at < ttl_seconds
    """
    if now is None:
        now = monotonic_seconds()
    return now - fetched_at < ttl_seconds


def format_timestamp(ts: datetime) -> str:
    """ISO8601 representation for logs and notifications."""
    return ts.isoformat()
