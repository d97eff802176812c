"""Technical indicator calculations over close-price series"""

from .indicators import (
    calculate_ema_series,
    calculate_rate_of_change,
    calculate_rsi,
    calculate_sma,
    calculate_std_dev,
)

__all__ = [
    "calculate_sma",
    "calculate_ema_series",
    "calculate_rsi",
    "calculate_std_dev",
    "calculate_rate_of_change",
]
