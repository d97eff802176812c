"""BUY/SELL change alerts."""

from .monitor import SignalCheck, SignalCheckResult, notification_id_for
from .policy import SignalAlertPolicy

__all__ = ["SignalAlertPolicy", "SignalCheck", "SignalCheckResult", "notification_id_for"]
