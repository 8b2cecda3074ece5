"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field


class SystemInfoResponse(BaseModel):
    """Service information returned by ``GET /api/``."""

    version: str = Field(description="Service version")
    is_kafka_enabled: bool = Field(description="Whether the queue consumer is enabled")
    kafka_queues: str = Field(description="Subscribed topics, whitespace-separated")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status: 'healthy' or 'degraded'")
    version: str = Field(description="Service version")
    search_connected: bool = Field(description="Whether the search engine is responsive")
    consumer_running: bool = Field(description="Whether the queue consumer loop is running")


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    status: int = Field(description="HTTP status code")
    message: str = Field(description="Error message")
