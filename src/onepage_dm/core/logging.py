"""Structured logging for the One Page DM adventure engine.

All engine modules log through structlog. The adventure session binds a
``session_id`` into the context for the lifetime of an adventure, so every
line written while it is active can be traced back to one game.

Example:
    >>> from onepage_dm.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Archetype chosen", archetype="Wizard", max_hp=10)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "onepage_dm"

QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "openai")
"""Client libraries whose chatter is kept at WARNING."""

REDACTED = "***"

_SECRET_MARKERS = ("api_key", "authorization", "secret")

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def redact_secrets(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask values of keys that look like provider credentials.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with credential values replaced.
    """
    for key in list(event_dict):
        if any(marker in key.lower() for marker in _SECRET_MARKERS) and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Options left as None are read from the application settings
    (``log_level`` and ``log_json``).

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of console output.
        log_file: Optional path of a file that also receives stdlib records.
    """
    if level is None or json_format is None:
        from onepage_dm.core.config import get_settings

        settings = get_settings()
        level = level or settings.log_level
        json_format = settings.log_json if json_format is None else json_format

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=_STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind keys that every later log entry in this context carries.

    Example:
        >>> bind_context(session_id="3f2a")
        >>> logger.info("Turn sent")  # includes session_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "redact_secrets",
]
