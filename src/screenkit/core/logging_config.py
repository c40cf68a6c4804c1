"""
Structured Logging Configuration
Event-style logging with structlog for renders and action chains.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog
from pythonjsonlogger import jsonlogger

# Longest rendered value; descriptors and state payloads can be large
MAX_VALUE_LENGTH = 512

# Keys bound by LogContext, moved to the front of every line
SCOPE_KEYS = ("screen_id", "chain_id")


def drop_none_values(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Remove keys logged as None, e.g. the source of a chain fired by the host."""
    return {k: v for k, v in event_dict.items() if v is not None or k == "event"}


def truncate_long_values(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Shorten containers and strings whose text exceeds MAX_VALUE_LENGTH."""
    for key, value in event_dict.items():
        if key == "event" or isinstance(value, (bool, int, float)):
            continue
        text = value if isinstance(value, str) else repr(value)
        if len(text) > MAX_VALUE_LENGTH:
            event_dict[key] = f"{text[:MAX_VALUE_LENGTH]}... ({len(text)} chars)"
    return event_dict


def order_scope_keys(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Put screen_id and chain_id first so lines of one chain line up."""
    scoped = {k: event_dict[k] for k in SCOPE_KEYS if k in event_dict}
    if not scoped:
        return event_dict
    return {**scoped, **{k: v for k, v in event_dict.items() if k not in scoped}}


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging for the host application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON formatter for machine-readable logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_logs:
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logging.basicConfig(level=log_level, handlers=[handler])
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stdout,
        )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            drop_none_values,
            truncate_long_values,
            order_scope_keys,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LogContext:
    """Bind key/values to every log line emitted inside the block (e.g. chain_id)."""

    def __init__(self, **kwargs: Any):
        self.context = kwargs
        self.tokens: Any = None

    def __enter__(self) -> "LogContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self.tokens)
