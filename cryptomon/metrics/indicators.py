"""SMA, EMA, RSI, standard deviation and rate-of-change calculations"""

import math
from typing import Optional, Sequence

from ..errors import InsufficientDataError


def _require(values: Sequence[float], count: int, name: str) -> None:
    if len(values) < count:
        raise InsufficientDataError(
            f"{name} needs {count} values, got {len(values)}",
            required_count=count,
            available_count=len(values),
        )


def calculate_sma(values: Sequence[float], period: Optional[int] = None) -> float:
    """
    Simple moving average of the last `period` values

    Args:
        values: Price series in chronological order
        period: Window size, defaults to the whole series

    Returns:
        Arithmetic mean of the window
    """
    window = list(values) if period is None else list(values[-period:])
    _require(window, 1, "SMA")
    if period is not None:
        _require(values, period, "SMA")
    return sum(window) / len(window)


def calculate_ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    Exponential moving average series

    alpha = 2 / (period + 1). The first output equals the first input
    (no SMA seed); each later output is alpha * value + (1 - alpha) * previous.

    Args:
        values: Input series in chronological order
        period: EMA period

    Returns:
        EMA series with the same length as `values`
    """
    if not values:
        return []

    alpha = 2.0 / (period + 1)
    result = [float(values[0])]
    for value in values[1:]:
        result.append(alpha * value + (1 - alpha) * result[-1])
    return result


def calculate_rsi(values: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index over the last `period` deltas

    Gains and losses are plain sums (no Wilder smoothing). A zero delta
    counts as a gain. Returns 100 when there are no losses.

    Args:
        values: Price series in chronological order
        period: Number of deltas to use

    Returns:
        RSI between 0 and 100
    """
    _require(values, period + 1, "RSI")

    gain = 0.0
    loss = 0.0
    last = len(values) - 1
    for i in range(last - period + 1, last + 1):
        delta = values[i] - values[i - 1]
        if delta >= 0:
            gain += delta
        else:
            loss -= delta

    if loss == 0.0:
        return 100.0
    rs = (gain / period) / (loss / period)
    return 100.0 - (100.0 / (1 + rs))


def calculate_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation"""
    _require(values, 1, "Standard deviation")
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def calculate_rate_of_change(values: Sequence[float], period: int = 10) -> Optional[float]:
    """
    Percentage change between the last value and the value `period` points earlier

    Returns:
        Percent change, or None when the reference value is zero
    """
    _require(values, period + 1, "Rate of change")
    current = values[-1]
    prior = values[-1 - period]
    if prior == 0:
        return None
    return (current - prior) / prior * 100.0
