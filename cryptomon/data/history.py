"""Price history reconstruction for timestamp-less sparkline series."""

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..utils.time import utc_now
from .models import MarketQuote, PricePoint

SPARKLINE_SPAN_SECONDS = 7 * 24 * 3600


def history_from_sparkline(
    prices: Sequence[float],
    now: Optional[datetime] = None,
    span_seconds: int = SPARKLINE_SPAN_SECONDS
) -> list[PricePoint]:
    """
    Rebuild timestamps for a fixed-density price series.

    The series is assumed to cover exactly `span_seconds` ending at `now`:
    points are spaced uniformly and the last price is stamped `now`.

    Args:
        prices: Raw prices in provider order
        now: Timestamp of the last point, defaults to current UTC time
        span_seconds: Time covered by the series

    Returns:
        Ascending price points, empty if fewer than 2 positive prices
    """
    positive = [p for p in prices if p is not None and p > 0]
    if len(positive) < 2:
        return []

    if now is None:
        now = utc_now()

    # half-up rounding
    step_seconds = max(1, math.floor(span_seconds / (len(positive) - 1) + 0.5))
    last_index = len(positive) - 1

    return [
        PricePoint(
            timestamp=now - timedelta(seconds=step_seconds * (last_index - index)),
            price_usd=price,
        )
        for index, price in enumerate(positive)
    ]


def history_for_quote(quote: Optional[MarketQuote], now: Optional[datetime] = None) -> list[PricePoint]:
    """Explicit history if the provider returned one, otherwise a rebuilt sparkline."""
    if quote is None:
        return []
    if quote.history is not None:
        return list(quote.history)
    return history_from_sparkline(quote.sparkline or [], now=now)
