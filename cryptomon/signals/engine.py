"""
Multi-indicator signal engine.

Runs five independent indicators over a close-price series and combines
them with a margin vote into a single BUY/SELL/HOLD recommendation.
"""

from typing import Optional, Sequence

import structlog

from ..config.defaults import SignalParams
from ..data.models import AlgorithmSignal, PricePoint, TradeAction, decide_final_action
from ..metrics.indicators import (
    calculate_ema_series,
    calculate_rate_of_change,
    calculate_rsi,
    calculate_sma,
    calculate_std_dev,
)

logger = structlog.get_logger(__name__)

DATA_CHECK = "Data Check"
SMA_CROSSOVER = "SMA Crossover"
RSI = "RSI"
MACD = "MACD"
BOLLINGER_BANDS = "Bollinger Bands"
RATE_OF_CHANGE = "Rate of Change"

ALGORITHM_NAMES = (SMA_CROSSOVER, RSI, MACD, BOLLINGER_BANDS, RATE_OF_CHANGE)


class SignalEngine:
    """Technical analysis vote over a price history"""

    def __init__(self, params: Optional[SignalParams] = None):
        self.params = params or SignalParams()

    def analyze(self, history: Sequence[PricePoint]) -> tuple[list[AlgorithmSignal], TradeAction]:
        """
        Classify a price history.

        Args:
            history: Price points in chronological order

        Returns:
            (signals, final_action); a single "Data Check" HOLD signal when the
            history is shorter than the minimum, five indicator signals otherwise
        """
        if len(history) < self.params.min_history_points:
            signal = AlgorithmSignal(
                algorithm=DATA_CHECK,
                action=TradeAction.HOLD,
                reason="Not enough price points yet",
            )
            return [signal], TradeAction.HOLD

        closes = [point.price_usd for point in history]
        signals = [
            self.sma_crossover(closes),
            self.rsi_signal(closes),
            self.macd_signal(closes),
            self.bollinger_signal(closes),
            self.rate_of_change_signal(closes),
        ]
        final_action = self.decide_final_action(signals)

        logger.debug(
            "Signals computed",
            points=len(closes),
            actions=[s.action.value for s in signals],
            final_action=final_action.value,
        )
        return signals, final_action

    def decide_final_action(self, signals: list[AlgorithmSignal]) -> TradeAction:
        return decide_final_action(signals, self.params.vote_margin)

    def sma_crossover(self, closes: Sequence[float]) -> AlgorithmSignal:
        short = calculate_sma(closes, self.params.sma_short_period)
        long = calculate_sma(closes, self.params.sma_long_period)
        if short > long:
            return AlgorithmSignal(SMA_CROSSOVER, TradeAction.BUY, "Short SMA above long SMA")
        if short < long:
            return AlgorithmSignal(SMA_CROSSOVER, TradeAction.SELL, "Short SMA below long SMA")
        return AlgorithmSignal(SMA_CROSSOVER, TradeAction.HOLD, "SMAs converged")

    def rsi_signal(self, closes: Sequence[float]) -> AlgorithmSignal:
        rsi = calculate_rsi(closes, self.params.rsi_period)
        if rsi < self.params.rsi_oversold:
            return AlgorithmSignal(RSI, TradeAction.BUY, f"RSI={rsi:.2f} indicates oversold")
        if rsi > self.params.rsi_overbought:
            return AlgorithmSignal(RSI, TradeAction.SELL, f"RSI={rsi:.2f} indicates overbought")
        return AlgorithmSignal(RSI, TradeAction.HOLD, f"RSI={rsi:.2f} is neutral")

    def macd_signal(self, closes: Sequence[float]) -> AlgorithmSignal:
        fast = calculate_ema_series(closes, self.params.macd_fast_period)
        slow = calculate_ema_series(closes, self.params.macd_slow_period)
        macd = [f - s for f, s in zip(fast, slow)]
        signal_line = calculate_ema_series(macd, self.params.macd_signal_period)

        macd_prev, macd_now = macd[-2], macd[-1]
        sig_prev, sig_now = signal_line[-2], signal_line[-1]

        if macd_prev <= sig_prev and macd_now > sig_now:
            return AlgorithmSignal(MACD, TradeAction.BUY, "MACD crossed above signal line")
        if macd_prev >= sig_prev and macd_now < sig_now:
            return AlgorithmSignal(MACD, TradeAction.SELL, "MACD crossed below signal line")
        return AlgorithmSignal(MACD, TradeAction.HOLD, "No recent MACD crossover")

    def bollinger_signal(self, closes: Sequence[float]) -> AlgorithmSignal:
        window = list(closes[-self.params.bollinger_period:])
        middle = calculate_sma(window)
        std_dev = calculate_std_dev(window)
        upper = middle + self.params.bollinger_stddev_mult * std_dev
        lower = middle - self.params.bollinger_stddev_mult * std_dev
        current = closes[-1]

        if current < lower:
            return AlgorithmSignal(BOLLINGER_BANDS, TradeAction.BUY, "Price below lower band")
        if current > upper:
            return AlgorithmSignal(BOLLINGER_BANDS, TradeAction.SELL, "Price above upper band")
        return AlgorithmSignal(BOLLINGER_BANDS, TradeAction.HOLD, "Price inside bands")

    def rate_of_change_signal(self, closes: Sequence[float]) -> AlgorithmSignal:
        roc = calculate_rate_of_change(closes, self.params.roc_period)
        if roc is None:
            return AlgorithmSignal(RATE_OF_CHANGE, TradeAction.HOLD, "Insufficient reference")

        threshold = self.params.roc_threshold_pct
        if roc > threshold:
            return AlgorithmSignal(RATE_OF_CHANGE, TradeAction.BUY, f"Momentum strong ({roc:.2f}%)")
        if roc < -threshold:
            return AlgorithmSignal(RATE_OF_CHANGE, TradeAction.SELL, f"Momentum weak ({roc:.2f}%)")
        return AlgorithmSignal(RATE_OF_CHANGE, TradeAction.HOLD, f"Momentum mild ({roc:.2f}%)")
