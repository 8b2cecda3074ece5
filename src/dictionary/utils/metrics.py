"""Prometheus metrics instrumentation for the dictionary service.

This module tracks:
- Query latency, throughput and errors per entity kind
- How far queries had to fall back through the index hierarchy
- Queue records applied, retried and skipped per topic
"""

import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, Info, generate_latest

# Service information
SERVICE_INFO = Info("dictionary_service", "Dictionary service information")

# ==================== Query Metrics ====================

QUERY_REQUESTS = Counter(
    "dictionary_query_requests_total",
    "Total dictionary queries",
    ["kind", "operation", "status"],
)

QUERY_LATENCY = Histogram(
    "dictionary_query_latency_seconds",
    "Dictionary query latency in seconds",
    ["kind", "operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

INDEX_FALLBACKS = Counter(
    "dictionary_index_fallbacks_total",
    "Queries answered by a shallower index than the deepest resolvable one",
    ["kind"],
)

# ==================== Sync Metrics ====================

EVENTS_PROCESSED = Counter(
    "dictionary_events_processed_total",
    "Total queue records processed",
    ["topic", "status"],
)


# ==================== Decorator Utilities ====================

P = ParamSpec("P")
T = TypeVar("T")


def track_query(operation: str) -> Callable[..., Any]:
    """Decorator to track query metrics on query service methods.

    The entity kind label is read from the bound service's ``kind``.

    Args:
        operation: Operation name (get, list).

    Returns:
        Decorated function.

    Example:
        @track_query(operation="list")
        async def list(self, context: TenantContext) -> list[EntityDocument]:
            ...
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            service = args[0] if args else None
            kind = getattr(getattr(service, "kind", None), "value", "unknown")
            start_time = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
                QUERY_REQUESTS.labels(kind=kind, operation=operation, status="success").inc()
                return result

            except Exception:
                QUERY_REQUESTS.labels(kind=kind, operation=operation, status="error").inc()
                raise

            finally:
                duration = time.perf_counter() - start_time
                QUERY_LATENCY.labels(kind=kind, operation=operation).observe(duration)

        return wrapper

    return decorator


# ==================== Helper Functions ====================


def record_index_fallback(kind: str) -> None:
    """Record a query served from a shallower index."""
    INDEX_FALLBACKS.labels(kind=kind).inc()


def record_event(topic: str, status: str) -> None:
    """Record the outcome of one queue record.

    Args:
        topic: Topic the record was received on.
        status: One of applied, retried, failed, skipped or ignored.
    """
    EVENTS_PROCESSED.labels(topic=topic, status=status).inc()


def get_metrics() -> bytes:
    """Generate Prometheus metrics in text exposition format."""
    return generate_latest()


def get_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST
