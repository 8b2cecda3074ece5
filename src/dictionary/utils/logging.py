"""Structured logging configuration using structlog."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.contextvars import (
    bind_contextvars,
    bound_contextvars,
    merge_contextvars,
)


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    service: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Stdlib loggers used across the package print through the same handler,
    so both ``logging.getLogger`` and ``get_logger`` output ends up on stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        json_format: Output logs as JSON (True) or human-readable (False).
        service: Service name bound to every log line, if given.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[Any] = [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer: Any = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if service:
        bind_contextvars(service=service)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller module).

    Returns:
        Configured structlog logger (BoundLogger).
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables to the current context.

    Example:
        >>> bind_context(client_id="11", language="es")
        >>> logger.info("menu lookup")
        # Output includes: {"client_id": "11", "language": "es", ...}
    """
    bind_contextvars(**kwargs)


@contextmanager
def record_context(**kwargs: Any) -> Iterator[None]:
    """Bind context for the duration of one queue record.

    Values are unbound on exit so one record's topic and offset never leak
    into the next record's log lines.
    """
    with bound_contextvars(**kwargs):
        yield
