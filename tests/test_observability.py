"""Tests for structured logging context and Prometheus metrics."""

from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY
from structlog.contextvars import clear_contextvars, get_contextvars

from dictionary.errors import EngineError, QueryError
from dictionary.indexing import DictionaryEventConsumer, EventConsumerConfig, SyncApplier
from dictionary.models import EntityKind
from dictionary.retrieval import EntityQueryService, TenantContext
from dictionary.utils import bind_context, record_context
from dictionary.utils.metrics import get_content_type, get_metrics


def sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestLoggingContext:
    """Tests for contextvars binding helpers."""

    def test_record_context_unbinds_on_exit(self) -> None:
        clear_contextvars()
        bind_context(kind="menu")

        with record_context(topic="menu", offset=3):
            assert get_contextvars() == {"kind": "menu", "topic": "menu", "offset": 3}

        assert get_contextvars() == {"kind": "menu"}
        clear_contextvars()
        assert get_contextvars() == {}


class TestMetrics:
    """Tests for query and sync metrics."""

    def test_exposition(self) -> None:
        assert b"dictionary_events_processed_total" in get_metrics()
        assert get_content_type().startswith("text/plain")

    @pytest.mark.asyncio
    async def test_query_outcomes_counted(self, mock_gateway) -> None:
        service = EntityQueryService(mock_gateway, EntityKind.FORM)
        labels = {"kind": "form", "operation": "list", "status": "error"}
        before_success = sample(
            "dictionary_query_requests_total", {**labels, "status": "success"}
        )
        before_error = sample("dictionary_query_requests_total", labels)

        await service.list()
        mock_gateway.search.side_effect = EngineError("down")
        with pytest.raises(QueryError):
            await service.list()

        after_success = sample(
            "dictionary_query_requests_total", {**labels, "status": "success"}
        )
        assert after_success == before_success + 1
        assert sample("dictionary_query_requests_total", labels) == before_error + 1

    @pytest.mark.asyncio
    async def test_index_fallback_counted(self, mock_gateway) -> None:
        mock_gateway.index_exists.side_effect = lambda index: index == "process"
        service = EntityQueryService(mock_gateway, EntityKind.PROCESS)
        before = sample("dictionary_index_fallbacks_total", {"kind": "process"})

        await service.list(TenantContext(language="en"))

        assert sample("dictionary_index_fallbacks_total", {"kind": "process"}) == before + 1

    @pytest.mark.asyncio
    async def test_event_outcomes_counted(self, mock_gateway, make_record) -> None:
        consumer = DictionaryEventConsumer(
            MagicMock(), SyncApplier(mock_gateway), EventConsumerConfig(retry_backoff_ms=0)
        )
        labels = {"topic": "unknown-topic", "status": "ignored"}
        before = sample("dictionary_events_processed_total", labels)

        await consumer.process_record(make_record("unknown-topic", '"new"', {"document": None}))

        assert sample("dictionary_events_processed_total", labels) == before + 1
