"""Pytest configuration and shared fixtures."""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiokafka.structs import ConsumerRecord
from httpx import ASGITransport, AsyncClient

from dictionary.config import Settings
from dictionary.main import create_app
from dictionary.retrieval import build_query_services


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file, with the consumer disabled."""
    return Settings(_env_file=None, kafka_enabled=False, version="1.0.0-test")


@pytest.fixture
def mock_gateway() -> MagicMock:
    """Search gateway double where every index exists and is empty.

    Returns:
        MagicMock with async index primitives.
    """
    gateway = MagicMock()
    gateway.index_exists = AsyncMock(return_value=True)
    gateway.get = AsyncMock(return_value=None)
    gateway.search = AsyncMock(return_value=[])
    gateway.create = AsyncMock()
    gateway.delete = AsyncMock()
    gateway.health_check = AsyncMock(return_value=True)
    return gateway


class InMemoryGateway:
    """Dict-backed stand-in for SearchGateway that keeps what it is sent."""

    def __init__(self) -> None:
        self.indices: dict[str, dict[int, dict[str, Any]]] = {}

    async def index_exists(self, index: str) -> bool:
        return index in self.indices

    async def get(self, index: str, document_id: int) -> dict[str, Any] | None:
        return self.indices.get(index, {}).get(document_id)

    async def search(
        self,
        index: str,
        search_value: str | None = None,
        fields: tuple[str, ...] = ("name",),
        offset: int = 0,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        bodies = [body for _, body in sorted(self.indices.get(index, {}).items())]
        if search_value:
            needle = search_value.lower()
            bodies = [
                body
                for body in bodies
                if any(needle in str(body.get(field) or "").lower() for field in fields)
            ]
        return bodies[offset : offset + limit]

    async def create(self, index: str, document_id: int, body: dict[str, Any]) -> None:
        self.indices.setdefault(index, {})[document_id] = body

    async def delete(self, index: str, document_id: int) -> None:
        self.indices.get(index, {}).pop(document_id, None)


@pytest.fixture
def memory_gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def app(settings, mock_gateway):
    """Create a test FastAPI application wired to the mock gateway.

    The lifespan does not run under ASGITransport, so the state it would
    build is set directly.
    """
    application = create_app(settings)
    application.state.gateway = mock_gateway
    application.state.query_services = build_query_services(mock_gateway)
    application.state.consumer = None
    return application


@pytest.fixture
async def client(app):
    """Create an async test client.

    Yields:
        AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_record():
    """Factory for Kafka records as aiokafka delivers them."""

    def _make(
        topic: str,
        key: str | bytes | None,
        value: dict[str, Any] | str | bytes | None,
        offset: int = 0,
        partition: int = 0,
    ) -> ConsumerRecord:
        if isinstance(key, str):
            key = key.encode("utf-8")
        if isinstance(value, dict):
            value = json.dumps(value)
        if isinstance(value, str):
            value = value.encode("utf-8")
        return ConsumerRecord(
            topic=topic,
            partition=partition,
            offset=offset,
            timestamp=0,
            timestamp_type=0,
            key=key,
            value=value,
            checksum=None,
            serialized_key_size=len(key) if key else -1,
            serialized_value_size=len(value) if value else -1,
            headers=(),
        )

    return _make
