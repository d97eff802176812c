"""Base class for notification delivery mechanisms."""

import logging
from abc import ABC, abstractmethod
from typing import Any


class BaseNotifier(ABC):
    """
    Base class for notification delivery.

    deliver() reports whether the notification actually reached the user;
    it does not raise for ordinary delivery failures.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"alert.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def deliver(self, notification_id: int, title: str, message: str) -> bool:
        """
        Deliver one notification.

        Args:
            notification_id: Stable id, a repeat replaces the earlier alert
            title: Short headline
            message: Body text

        Returns:
            True if delivered
        """

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
