"""Async Kafka client wrapper using aiokafka."""

import logging
from typing import Any

from aiokafka import AIOKafkaConsumer
from aiokafka.structs import ConsumerRecord, TopicPartition
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ConsumerConfig(BaseModel):
    """Configuration for Kafka consumer.

    Auto commit is off: offsets are committed by the caller once a record
    has been applied, which is what gives at-least-once delivery.
    """

    bootstrap_servers: list[str] = Field(
        default=["127.0.0.1:9092"], description="Kafka bootstrap servers"
    )
    group_id: str = Field(default="default", description="Consumer group ID")
    client_id: str = Field(default="dictionary-consumer", description="Kafka client ID")
    auto_offset_reset: str = Field(default="earliest", description="Auto offset reset strategy")
    session_timeout_ms: int = Field(default=120000, description="Session timeout (2 minutes)")
    max_poll_interval_ms: int = Field(default=180000, description="Max poll interval (3 minutes)")


class KafkaClient:
    """Async Kafka client wrapper with consumer management and manual commits."""

    def __init__(
        self,
        bootstrap_servers: list[str] | None = None,
        consumer_config: ConsumerConfig | None = None,
    ) -> None:
        """Initialize Kafka client.

        Args:
            bootstrap_servers: Kafka bootstrap servers. Overrides config if provided.
            consumer_config: Consumer configuration.
        """
        self._consumer_config = consumer_config or ConsumerConfig()

        if bootstrap_servers:
            self._consumer_config.bootstrap_servers = bootstrap_servers

        self._consumers: dict[str, AIOKafkaConsumer] = {}

    @property
    def bootstrap_servers(self) -> list[str]:
        return self._consumer_config.bootstrap_servers

    async def create_consumer(
        self, topics: list[str], group_id: str | None = None
    ) -> AIOKafkaConsumer:
        """Create and start a consumer subscribed to ``topics``.

        Args:
            topics: List of topics to subscribe to.
            group_id: Consumer group ID (uses config default if not provided).

        Returns:
            Started AIOKafkaConsumer instance.
        """
        consumer_group_id = group_id or self._consumer_config.group_id
        consumer_key = f"{consumer_group_id}:{','.join(sorted(topics))}"

        if consumer_key in self._consumers:
            logger.warning(f"Consumer for {consumer_key} already exists")
            return self._consumers[consumer_key]

        logger.info(f"Creating Kafka consumer for topics {topics} with group {consumer_group_id}")

        consumer = AIOKafkaConsumer(
            *topics,
            bootstrap_servers=self._consumer_config.bootstrap_servers,
            group_id=consumer_group_id,
            client_id=self._consumer_config.client_id,
            auto_offset_reset=self._consumer_config.auto_offset_reset,
            enable_auto_commit=False,
            session_timeout_ms=self._consumer_config.session_timeout_ms,
            max_poll_interval_ms=self._consumer_config.max_poll_interval_ms,
        )

        try:
            await consumer.start()
        except Exception:
            await consumer.stop()
            raise
        self._consumers[consumer_key] = consumer
        logger.info(f"Kafka consumer started for {consumer_key}")

        return consumer

    async def commit(self, consumer: AIOKafkaConsumer, record: ConsumerRecord) -> None:
        """Commit the offset following ``record`` on its partition."""
        partition = TopicPartition(record.topic, record.partition)
        await consumer.commit({partition: record.offset + 1})
        logger.debug(f"Committed {record.topic}[{record.partition}] offset {record.offset + 1}")

    def rewind(self, consumer: AIOKafkaConsumer, record: ConsumerRecord) -> None:
        """Seek back to ``record`` so the next poll delivers it again."""
        partition = TopicPartition(record.topic, record.partition)
        consumer.seek(partition, record.offset)
        logger.debug(f"Rewound {record.topic}[{record.partition}] to offset {record.offset}")

    async def stop_consumer(self, consumer: AIOKafkaConsumer) -> None:
        """Stop one consumer and forget it."""
        for consumer_key, known in list(self._consumers.items()):
            if known is consumer:
                del self._consumers[consumer_key]
                logger.info(f"Kafka consumer stopped: {consumer_key}")
        await consumer.stop()

    async def close(self) -> None:
        """Stop all consumers."""
        logger.info("Closing Kafka client")

        for consumer_key, consumer in self._consumers.items():
            await consumer.stop()
            logger.info(f"Kafka consumer stopped: {consumer_key}")

        self._consumers.clear()

    async def __aenter__(self) -> "KafkaClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
