"""Dictionary Search Service - FastAPI application entry point."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dictionary.api import router
from dictionary.api.schemas import ErrorResponse
from dictionary.clients import ConsumerConfig, KafkaClient, SearchGateway
from dictionary.config import Settings, get_settings
from dictionary.errors import DictionaryError
from dictionary.indexing import DictionaryEventConsumer, EventConsumerConfig, SyncApplier
from dictionary.retrieval import build_query_services
from dictionary.utils.logging import configure_logging, get_logger
from dictionary.utils.metrics import SERVICE_INFO

settings = get_settings()
configure_logging(level=settings.log_level, json_format=settings.log_json, service="dictionary")
logger = get_logger(__name__)

SERVICE_INFO.info({"version": settings.version, "service": "dictionary"})


async def start_consumer(app: FastAPI, settings: Settings, gateway: SearchGateway) -> None:
    """Create the Kafka consumer and run it as a background task."""
    kafka_client = KafkaClient(
        consumer_config=ConsumerConfig(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            group_id=settings.kafka_group,
        )
    )
    consumer = DictionaryEventConsumer(
        kafka_client=kafka_client,
        applier=SyncApplier(gateway),
        config=EventConsumerConfig.from_settings(settings),
    )
    app.state.kafka_client = kafka_client
    app.state.consumer = consumer
    app.state.consumer_task = asyncio.create_task(consumer.start())
    logger.info(
        "Kafka consumer task scheduled", host=settings.kafka_host, topics=settings.kafka_topics
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Connects the search gateway, builds the per-kind query services and,
    when enabled, starts the queue consumer next to the request-serving path.
    """
    settings: Settings = app.state.settings
    settings.log_defaults()

    logger.info("Starting Dictionary Search Service...", version=settings.version)

    gateway = SearchGateway(settings)
    try:
        await gateway.connect()
        app.state.gateway = gateway
        app.state.query_services = build_query_services(gateway)
        logger.info("Search gateway initialized", qdrant_url=settings.qdrant_url)
    except Exception as e:
        logger.error("Failed to initialize search gateway", error=str(e))
        logger.warning("Service starting in degraded mode without search engine")
        app.state.gateway = None
        app.state.query_services = None

    app.state.consumer = None
    app.state.consumer_task = None
    app.state.kafka_client = None
    if not settings.kafka_enabled:
        logger.info("Kafka consumer is disabled")
    elif app.state.gateway is None:
        logger.warning("Kafka consumer not started (search engine unavailable)")
    else:
        try:
            await start_consumer(app, settings, gateway)
        except Exception as e:
            logger.error("Failed to start Kafka consumer", error=str(e))
            logger.warning("Service running without index synchronization")

    yield

    logger.info("Shutting down Dictionary Search Service...")

    if app.state.consumer is not None:
        try:
            await app.state.consumer.stop()
        except Exception as e:
            logger.error("Error stopping Kafka consumer", error=str(e))

    if app.state.consumer_task is not None:
        app.state.consumer_task.cancel()
        try:
            await app.state.consumer_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Kafka consumer task failed", error=str(e))

    if app.state.kafka_client is not None:
        try:
            await app.state.kafka_client.close()
        except Exception as e:
            logger.error("Error closing Kafka client", error=str(e))

    if app.state.gateway is not None:
        try:
            await app.state.gateway.close()
        except Exception as e:
            logger.error("Error closing search gateway", error=str(e))

    logger.info("Dictionary Search Service shutdown complete")


async def dictionary_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render service errors as ``{status, message}`` with a 500 status."""
    logger.error("Request failed", path=request.url.path, error=str(exc))
    body = ErrorResponse(status=status.HTTP_500_INTERNAL_SERVER_ERROR, message=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
    )


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to run with. Defaults to the cached environment settings.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = app_settings or get_settings()

    app = FastAPI(
        title="Dictionary Search Service",
        description=(
            "Tenant-aware search over dictionary menus, windows, processes, browsers and "
            "forms, kept in sync from the dictionary event feed"
        ),
        version=app_settings.version,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.allowed_origin],
        allow_methods=["OPTIONS", "GET"],
        allow_headers=[
            "Access-Control-Request-Method",
            "Access-Control-Request-Headers",
            "Authorization",
        ],
    )

    app.add_exception_handler(DictionaryError, dictionary_error_handler)

    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


def run() -> None:
    """Run the application with uvicorn.

    This is the entry point for the 'dictionary' command defined in pyproject.toml.
    """
    settings = get_settings()

    logger.info("Starting server", host=settings.host, port=settings.port)

    uvicorn.run(
        "dictionary.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
