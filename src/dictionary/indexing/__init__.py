"""Index synchronization pipeline for the dictionary service.

This module provides the Kafka consumer that keeps the cascading Qdrant
indices in sync with the upstream dictionary event feed.

Components:
    - SyncApplier: Maps new/update/delete events to index mutations
    - DictionaryEventConsumer: Kafka consumer with commit-after-apply semantics

Usage:
    from dictionary.clients import KafkaClient, SearchGateway
    from dictionary.indexing import DictionaryEventConsumer, EventConsumerConfig, SyncApplier

    gateway = SearchGateway(settings)
    await gateway.connect()
    consumer = DictionaryEventConsumer(
        kafka_client=KafkaClient(settings.kafka_bootstrap_servers),
        applier=SyncApplier(gateway),
        config=EventConsumerConfig.from_settings(settings),
    )
    await consumer.start()
"""

from dictionary.indexing.applier import SyncApplier
from dictionary.indexing.consumer import DictionaryEventConsumer, EventConsumerConfig

__all__ = [
    "DictionaryEventConsumer",
    "EventConsumerConfig",
    "SyncApplier",
]
