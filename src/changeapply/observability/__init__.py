"""Observability: structured logging."""

from changeapply.observability.logging import ensure_logging, get_logger, setup_logging

__all__ = [
    "ensure_logging",
    "get_logger",
    "setup_logging",
]
