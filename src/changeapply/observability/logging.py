"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development.
Changeset values are never logged, only tags and record types.
"""

from __future__ import annotations

import sys
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

from changeapply.config import LogFormat, LogLevel, get_settings

_LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def setup_logging(level: LogLevel | None = None, format: LogFormat | None = None) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level. Defaults to settings.log_level.
        format: "json" or "console". Defaults to settings.log_format.
    """
    settings = get_settings()
    level = level or settings.log_level
    format = format or settings.log_format

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level.upper(), 30)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def ensure_logging() -> None:
    """Apply settings-driven configuration unless the host already configured structlog."""
    if not structlog.is_configured():
        setup_logging()


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))
