"""Dictionary search service.

Serves tenant-aware dictionary queries from cascading Qdrant indices and
keeps those indices in sync from the Kafka dictionary event feed.
"""

__version__ = "1.0.0"
