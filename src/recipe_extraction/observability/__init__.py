"""Observability components: logging and metrics."""

from recipe_extraction.observability.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    log_context,
    logger,
    setup_logging,
    unbind_context,
)
from recipe_extraction.observability.metrics import setup_metrics


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "log_context",
    "logger",
    "setup_logging",
    "setup_metrics",
    "unbind_context",
]
