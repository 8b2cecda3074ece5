"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_KAFKA_QUEUES = "menu process browser window form"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The settings value is frozen: it is built once at startup and handed to
    both the HTTP layer and the queue consumer.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=7878, description="Server port")
    allowed_origin: str = Field(default="*", description="Allowed CORS origin")
    version: str = Field(default="1.0.0-dev", description="Reported service version")

    # Kafka
    kafka_enabled: bool = Field(default=True, description="Run the queue consumer (Y/N)")
    kafka_host: str = Field(
        default="127.0.0.1:9092", description="Kafka bootstrap servers (comma-separated)"
    )
    kafka_group: str = Field(default="default", description="Kafka consumer group ID")
    kafka_queues: str = Field(
        default=DEFAULT_KAFKA_QUEUES, description="Topics to subscribe (whitespace-separated)"
    )
    kafka_retry_backoff_ms: int = Field(
        default=1000, ge=0, description="Delay before redelivering a failed record"
    )
    kafka_reconnect_backoff_ms: int = Field(
        default=5000, ge=0, description="Delay between attempts to reach the Kafka broker"
    )

    # Qdrant
    qdrant_url: str = Field(default="http://localhost:6333", description="Qdrant server URL")
    qdrant_api_key: str | None = Field(default=None, description="Qdrant API key (optional)")
    qdrant_timeout: int = Field(default=30, description="Qdrant request timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(default=True, description="Render logs as JSON")

    @field_validator("kafka_enabled", mode="before")
    @classmethod
    def parse_kafka_enabled(cls, v: str | bool) -> bool:
        """Accept the Y/N flag used by deployments alongside plain booleans."""
        if isinstance(v, str):
            return v.strip().upper() in ("Y", "YES", "TRUE", "1")
        return v

    @property
    def kafka_topics(self) -> list[str]:
        """Topics to subscribe, split on whitespace or commas."""
        return self.kafka_queues.replace(",", " ").split()

    @property
    def kafka_bootstrap_servers(self) -> list[str]:
        """Kafka bootstrap servers as a list."""
        return [server.strip() for server in self.kafka_host.split(",") if server.strip()]

    def log_defaults(self) -> list[str]:
        """Log a notice for every setting that fell back to its default.

        Returns:
            Environment variable names that were not provided.
        """
        missing = [name for name in type(self).model_fields if name not in self.model_fields_set]
        for name in missing:
            value = getattr(self, name)
            if name == "qdrant_api_key":
                value = "<unset>"
            logger.info(
                f"Variable `{name.upper()}` not found in environment, using default {value!r}"
            )
        return [name.upper() for name in missing]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
