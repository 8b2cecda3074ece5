"""Client wrappers for external services.

Provides async client wrappers for:
- Qdrant: search engine holding the cascading dictionary indices
- Kafka: event feed the indices are synchronized from
"""

from dictionary.clients.kafka import ConsumerConfig, KafkaClient
from dictionary.clients.qdrant import SearchGateway

__all__ = [
    "ConsumerConfig",
    "KafkaClient",
    "SearchGateway",
]
