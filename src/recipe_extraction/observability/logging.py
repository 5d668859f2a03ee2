"""Logging configuration using Loguru.

This module provides:
- Structured JSON logging for production
- Human-readable colorized output for development
- Request and extraction context (request_id, platform, content_id)
  carried through a ContextVar so concurrent extractions stay separate
- Interception of standard library logging (httpx, playwright, uvicorn)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import orjson
from loguru import logger


if TYPE_CHECKING:
    from collections.abc import Iterator


_log_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "log_context", default=None
)

_NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "asyncio",
    "playwright",
    "PIL",
)


class InterceptHandler(logging.Handler):
    """Forward standard library log records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _current_context() -> dict[str, Any]:
    return _log_context.get() or {}


def _serialize(record: dict[str, Any]) -> str:
    fields: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        **_current_context(),
        **{k: v for k, v in record["extra"].items() if k not in ("name", "serialized")},
    }
    exception = record["exception"]
    if exception:
        fields["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
        }
    return orjson.dumps(fields, default=str).decode()


def _json_patcher(record: dict[str, Any]) -> None:
    record["extra"]["serialized"] = _serialize(record)


def _format_record_dev(record: dict[str, Any]) -> str:
    """Human-readable format with context and structured extras appended."""
    extras = {
        **_current_context(),
        **{k: v for k, v in record["extra"].items() if k != "name"},
    }
    extras_str = ""
    if extras:
        # Braces and angle brackets would be read as format fields / color tags
        joined = " ".join(f"{k}={v}" for k, v in extras.items())
        escaped = joined.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
        extras_str = " | " + escaped

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        f"<level>{{message}}</level>{extras_str}\n"
    )
    if record["exception"]:
        fmt += "{exception}\n"
    return fmt


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    *,
    is_development: bool = False,
) -> None:
    """Configure Loguru sinks and route stdlib logging through them.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "text")
        is_development: Force the human-readable format
    """
    logger.remove()
    logger.configure(extra={"name": "root"})

    if log_format == "json" and not is_development:
        logger.configure(patcher=_json_patcher)
        logger.add(
            sys.stdout,
            format="{extra[serialized]}",
            level=log_level.upper(),
            colorize=False,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=_format_record_dev,
            level=log_level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a Loguru logger bound to ``name`` (typically ``__name__``)."""
    return logger.bind(name=name)


def bind_context(**kwargs: Any) -> None:
    """Add key/value pairs to every later log entry in this async context.

    Example:
        bind_context(request_id="abc-123", platform="youtube")
    """
    current = _current_context().copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_context() -> None:
    """Reset the logging context; called at the start of each request."""
    _log_context.set({})


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    current = _current_context().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


def get_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _current_context().copy()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind context for the duration of a block, restoring it afterwards."""
    token = _log_context.set({**_current_context(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "log_context",
    "logger",
    "setup_logging",
    "unbind_context",
]
