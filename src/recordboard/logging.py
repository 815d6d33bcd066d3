"""Structured logging for recordboard.

Usage:
    from recordboard.logging import configure_logging, get_logger

    configure_logging()  # once, at startup

    logger = get_logger(__name__)
    logger.info("record_list_created", list_id="abc", club_id="123")

The level and renderer come from the LOG_LEVEL / LOG_FORMAT / ENVIRONMENT
variables. Production defaults to JSON lines, everything else to a coloured
console renderer.
"""

import logging
import os
import sys
from typing import Any

import structlog

_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "supabase")


def _environment() -> str:
    return os.getenv("ENVIRONMENT", "local").lower()


def _log_level() -> int:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def _log_format() -> str:
    explicit = os.getenv("LOG_FORMAT")
    if explicit:
        return explicit.lower()
    return "json" if _environment() == "production" else "console"


def _add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp every entry with the app name and environment."""
    event_dict.setdefault("app", "recordboard")
    event_dict["environment"] = _environment()
    return event_dict


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Override for LOG_LEVEL (e.g. "DEBUG")
        log_format: Override for LOG_FORMAT ("json" or "console")
    """
    fmt = (log_format or _log_format()).lower()
    numeric_level = getattr(logging, level.upper(), logging.INFO) if level else _log_level()

    shared: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_app_context,
    ]

    if fmt == "json":
        renderer: list[structlog.typing.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=[*shared, *renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, typically `get_logger(__name__)`."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values (club_id, user_id, ...) to every subsequent log entry.

    Example:
        bind_context(club_id="abc123", user_id="456")
        logger.info("records_saved")  # includes club_id and user_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context variables (call at the end of a request)."""
    structlog.contextvars.clear_contextvars()
