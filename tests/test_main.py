"""Tests for application wiring and lifespan."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiokafka.errors import KafkaConnectionError
from fastapi import FastAPI

from dictionary.config import Settings
from dictionary.main import create_app, lifespan


class TestCreateApp:
    """Tests for create_app function."""

    def test_creates_fastapi_app(self, settings) -> None:
        app = create_app(settings)
        assert isinstance(app, FastAPI)
        assert app.version == "1.0.0-test"
        assert app.state.settings is settings

    def test_app_has_routes(self, settings) -> None:
        route_paths = {route.path for route in create_app(settings).routes}
        assert {"/api/", "/api/health", "/api/metrics", "/api/security/menus"} <= route_paths
        assert "/api/dictionary/windows/{id}" in route_paths

    def test_app_has_cors_middleware(self, settings) -> None:
        middleware_classes = [m.cls.__name__ for m in create_app(settings).user_middleware]
        assert "CORSMiddleware" in middleware_classes


class TestLifespan:
    """Tests for lifespan context manager."""

    @pytest.fixture
    def mock_gateway_cls(self):
        """Patch SearchGateway in main."""
        with patch("dictionary.main.SearchGateway") as mock_cls:
            gateway = MagicMock()
            gateway.connect = AsyncMock()
            gateway.close = AsyncMock()
            mock_cls.return_value = gateway
            yield mock_cls

    @pytest.fixture
    def mock_kafka_cls(self):
        """Patch KafkaClient in main with a broker that cannot be reached."""
        with patch("dictionary.main.KafkaClient") as mock_cls:
            kafka = MagicMock()
            kafka.create_consumer = AsyncMock(side_effect=KafkaConnectionError("no broker"))
            kafka.stop_consumer = AsyncMock()
            kafka.close = AsyncMock()
            mock_cls.return_value = kafka
            yield mock_cls

    @pytest.mark.asyncio
    async def test_unreachable_broker_keeps_retrying_and_shuts_down(
        self, mock_gateway_cls, mock_kafka_cls
    ) -> None:
        app = create_app(
            Settings(_env_file=None, kafka_enabled=True, kafka_reconnect_backoff_ms=5)
        )
        kafka = mock_kafka_cls.return_value
        gateway = mock_gateway_cls.return_value

        async with lifespan(app):
            await asyncio.sleep(0.05)
            assert app.state.consumer.running is True
            assert not app.state.consumer_task.done()

        assert kafka.create_consumer.await_count >= 2
        assert app.state.consumer_task.done()
        kafka.close.assert_awaited_once()
        gateway.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_search_engine_down_runs_degraded(
        self, mock_gateway_cls, mock_kafka_cls
    ) -> None:
        mock_gateway_cls.return_value.connect.side_effect = ConnectionError("refused")
        app = create_app(Settings(_env_file=None, kafka_enabled=True))

        async with lifespan(app):
            assert app.state.gateway is None
            assert app.state.query_services is None
            assert app.state.consumer is None

        mock_kafka_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_kafka_disabled(self, mock_gateway_cls, mock_kafka_cls) -> None:
        app = create_app(Settings(_env_file=None, kafka_enabled=False))

        async with lifespan(app):
            assert app.state.query_services is not None
            assert app.state.consumer is None

        mock_kafka_cls.assert_not_called()
        mock_gateway_cls.return_value.close.assert_awaited_once()
