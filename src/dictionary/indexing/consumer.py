"""Kafka consumer keeping the dictionary indices in sync."""

import asyncio
import logging

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import ConsumerStoppedError, KafkaError
from aiokafka.structs import ConsumerRecord
from pydantic import BaseModel, Field

from dictionary.clients.kafka import KafkaClient
from dictionary.config import DEFAULT_KAFKA_QUEUES, Settings
from dictionary.errors import DecodeError
from dictionary.indexing.applier import SyncApplier
from dictionary.models.envelope import (
    DocumentEnvelope,
    decode_envelope,
    decode_text,
    event_type_from_key,
    kind_for_topic,
)
from dictionary.utils.logging import record_context
from dictionary.utils.metrics import record_event

logger = logging.getLogger(__name__)


class EventConsumerConfig(BaseModel):
    """Configuration for the dictionary event consumer."""

    topics: list[str] = Field(
        default_factory=lambda: DEFAULT_KAFKA_QUEUES.split(), description="Topics to consume"
    )
    group_id: str = Field(default="default", description="Consumer group ID")
    retry_backoff_ms: int = Field(
        default=1000, ge=0, description="Delay before polling a rewound record again"
    )
    reconnect_backoff_ms: int = Field(
        default=5000, ge=0, description="Delay between attempts to create the Kafka consumer"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "EventConsumerConfig":
        return cls(
            topics=settings.kafka_topics,
            group_id=settings.kafka_group,
            retry_backoff_ms=settings.kafka_retry_backoff_ms,
            reconnect_backoff_ms=settings.kafka_reconnect_backoff_ms,
        )


class DictionaryEventConsumer:
    """Consumes dictionary events from Kafka and applies them to the indices.

    Records are handled one at a time in arrival order. A record's offset is
    committed only after the applier reports success; on failure the
    partition is rewound to the record so the next poll delivers it again.
    Records on topics without a document kind are skipped untouched.

    The loop outlives individual failures: an error while handling one record
    is logged and the record retried, and an unreachable broker is retried
    every ``reconnect_backoff_ms`` until the consumer is stopped.
    """

    def __init__(
        self,
        kafka_client: KafkaClient,
        applier: SyncApplier,
        config: EventConsumerConfig | None = None,
    ) -> None:
        """Initialize the event consumer.

        Args:
            kafka_client: Kafka client for consuming events.
            applier: Applies decoded documents to the search engine.
            config: Consumer configuration.
        """
        self.kafka = kafka_client
        self.applier = applier
        self.config = config or EventConsumerConfig()
        self._consumer: AIOKafkaConsumer | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Subscribe and run the receive loop until stopped or cancelled."""
        if self._running:
            logger.warning("Consumer already running")
            return

        logger.info(
            f"Starting dictionary consumer for topics {self.config.topics} "
            f"(group: {self.config.group_id})"
        )

        self._running = True

        try:
            while self._running:
                if self._consumer is None:
                    await self._connect()
                    continue

                try:
                    record = await self._consumer.getone()
                except ConsumerStoppedError:
                    break
                except KafkaError as e:
                    logger.error(f"Kafka error: {e}")
                    continue

                await self._handle_record(record)

        except asyncio.CancelledError:
            logger.info("Consumer task cancelled")
        except Exception as e:
            logger.error(f"Error in consumer loop: {e}", exc_info=True)
        finally:
            await self.stop()

    async def _connect(self) -> None:
        """Create the Kafka consumer, backing off if the broker is unreachable."""
        try:
            self._consumer = await self.kafka.create_consumer(
                topics=self.config.topics, group_id=self.config.group_id
            )
        except KafkaError as e:
            logger.error(
                f"Failed to create Kafka consumer: {e}, "
                f"retrying in {self.config.reconnect_backoff_ms}ms"
            )
            await asyncio.sleep(self.config.reconnect_backoff_ms / 1000.0)

    async def _handle_record(self, record: ConsumerRecord) -> None:
        """Process one record without letting its failure end the loop."""
        try:
            await self.process_record(record)
        except Exception as e:
            logger.error(
                f"Error processing {record.topic}[{record.partition}] offset {record.offset}: {e}",
                exc_info=True,
            )
            record_event(record.topic, "failed")
            await self._retry_later(record)

    async def stop(self) -> None:
        """Stop consuming and release the Kafka consumer."""
        if not self._running:
            return

        logger.info("Stopping dictionary consumer...")
        self._running = False

        if self._consumer is not None:
            await self.kafka.stop_consumer(self._consumer)
            self._consumer = None

        logger.info("Dictionary consumer stopped")

    def decode_record(self, record: ConsumerRecord) -> DocumentEnvelope | None:
        """Decode a record into an envelope.

        Returns:
            The envelope, or None if the topic carries no known document kind.
            Malformed payloads produce an envelope without a document.
        """
        kind = kind_for_topic(record.topic)
        if kind is None:
            return None

        key = decode_text(record.key)
        payload = decode_text(record.value)

        try:
            return decode_envelope(kind, payload, topic=record.topic, key=key)
        except DecodeError as e:
            logger.warning(str(e))
            return DocumentEnvelope(
                topic=record.topic, event_type=event_type_from_key(key), key=key
            )

    async def process_record(self, record: ConsumerRecord) -> bool:
        """Decode, apply and commit one record.

        Args:
            record: Record received from Kafka.

        Returns:
            True if the record's offset was committed.
        """
        envelope = self.decode_record(record)
        if envelope is None:
            record_event(record.topic, "ignored")
            return False
        if not envelope.has_document:
            record_event(record.topic, "skipped")
            return False

        with record_context(
            topic=record.topic,
            partition=record.partition,
            offset=record.offset,
            event_type=envelope.event_type,
        ):
            applied = await self.applier.apply(envelope.event_type, envelope.document)
            if not applied:
                record_event(record.topic, "retried")
                await self._retry_later(record)
                return False

            try:
                await self.kafka.commit(self._require_consumer(), record)
            except KafkaError as e:
                logger.warning(f"Failed to commit offset {record.offset}: {e}")
                return False
            record_event(record.topic, "applied")
        return True

    async def _retry_later(self, record: ConsumerRecord) -> None:
        """Rewind to ``record`` and wait out the retry backoff.

        A partition revoked in the meantime cannot be rewound; its new owner
        resumes from the last committed offset, which still precedes ``record``.
        """
        logger.info(f"Withholding commit for offset {record.offset}, record will be redelivered")
        if self._consumer is not None:
            try:
                self.kafka.rewind(self._consumer, record)
            except KafkaError as e:
                logger.warning(f"Failed to rewind to offset {record.offset}: {e}")
        if self.config.retry_backoff_ms:
            await asyncio.sleep(self.config.retry_backoff_ms / 1000.0)

    def _require_consumer(self) -> AIOKafkaConsumer:
        if self._consumer is None:
            raise RuntimeError("Consumer not started. Call start() first.")
        return self._consumer
