"""Utility modules for the dictionary service."""

from dictionary.utils.logging import (
    bind_context,
    configure_logging,
    get_logger,
    record_context,
)

__all__ = [
    "bind_context",
    "configure_logging",
    "get_logger",
    "record_context",
]
