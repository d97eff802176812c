"""
Structured logging setup for the crypto monitor.

Every module logs through structlog; configure_logging() routes the events
through the stdlib root logger so third-party libraries (httpx) end up in
the same stream with the same renderer.
"""
import logging
import sys
from collections import Counter
from typing import Any, Optional

import orjson
import structlog
from structlog.types import FilteringBoundLogger

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def _orjson_dumps(event_dict: dict[str, Any], **kwargs: Any) -> str:
    return orjson.dumps(event_dict, default=str).decode()


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    quiet_http: bool = True,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        format_json: One JSON object per line instead of console output
        include_timestamp: Add an ISO8601 UTC timestamp to each event
        quiet_http: Keep per-request HTTP client logs at WARNING and above
        extra_processors: Processors inserted before rendering
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s")
    if quiet_http:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer(serializer=_orjson_dumps))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """structlog logger for a module (pass __name__)."""
    return structlog.get_logger(name)


def get_refresh_logger(name: str) -> FilteringBoundLogger:
    """Logger for refresh cycle events, bound to subsystem="refresh"."""
    return get_logger(name).bind(subsystem="refresh")


def log_signal_vote(
    logger: FilteringBoundLogger,
    asset_id: str,
    signals: list,
    final_action: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Emit one "Signal vote" event with per-action vote counts.

    Args:
        logger: Structlog logger instance
        asset_id: Asset the vote was taken for
        signals: AlgorithmSignal list that was voted on
        final_action: Name of the winning action
        context: Additional context data
    """
    counts = Counter(signal.action.value for signal in signals)
    event = {
        "asset_id": asset_id,
        "buy_votes": counts.get("BUY", 0),
        "sell_votes": counts.get("SELL", 0),
        "hold_votes": counts.get("HOLD", 0),
        "final_action": final_action,
    }
    if context:
        event["context"] = context

    logger.info("Signal vote", **event)
