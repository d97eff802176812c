"""Standard output notification delivery."""

import sys
from typing import Optional, TextIO

import orjson

from ..utils.time import format_timestamp, utc_now
from .base import BaseNotifier


class StdoutNotifier(BaseNotifier):
    """Writes alerts to a text stream, one per line."""

    def __init__(self, name: str = "stdout", format: str = "pretty",
                 stream: Optional[TextIO] = None, enabled: bool = True):
        super().__init__(name)
        self.format = format
        self.stream = stream
        self.enabled = enabled

    def deliver(self, notification_id: int, title: str, message: str) -> bool:
        if not self.enabled:
            return False

        try:
            print(self._format(notification_id, title, message),
                  file=self.stream or sys.stdout, flush=True)
        except (OSError, ValueError) as e:
            self._error_count += 1
            self.logger.error("Failed to print notification: %s", e)
            return False

        self._delivery_count += 1
        return True

    def _format(self, notification_id: int, title: str, message: str) -> str:
        if self.format == "json":
            return orjson.dumps({
                "id": notification_id,
                "title": title,
                "message": message,
                "timestamp": format_timestamp(utc_now()),
            }).decode()
        return f"[{format_timestamp(utc_now())}] {title} - {message}"
