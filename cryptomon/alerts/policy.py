"""When to notify about a final action, and when to remember it."""

from typing import Optional

from ..data.models import TradeAction


class SignalAlertPolicy:
    """
    Notify only on a BUY or SELL that differs from the last stored action.

    An action is remembered once it has been delivered, or when it is HOLD;
    an undelivered BUY/SELL stays unremembered so the next check retries it.
    """

    @staticmethod
    def should_attempt_notification(action: TradeAction, previous: Optional[str]) -> bool:
        return action != TradeAction.HOLD and previous != action.value

    @staticmethod
    def should_cache_action(action: TradeAction, delivered: bool) -> bool:
        return action == TradeAction.HOLD or delivered
