"""Async Qdrant gateway for dictionary indices.

Each cascading index is a Qdrant collection. Documents are stored as
vectorless points whose id is the record id and whose payload is the
document body, so lookups are by id and searches are payload text matches.
"""

import logging
from typing import Any

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models
from qdrant_client.http.exceptions import UnexpectedResponse

from dictionary.config import Settings
from dictionary.errors import EngineError

logger = logging.getLogger(__name__)


def _is_not_found(error: Exception) -> bool:
    return isinstance(error, UnexpectedResponse) and error.status_code == 404


class SearchGateway:
    """Wrapper around AsyncQdrantClient exposing the index primitives.

    Provides async context manager interface for proper resource cleanup.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the gateway.

        Args:
            settings: Application settings containing Qdrant configuration.
        """
        self.settings = settings
        self._client: AsyncQdrantClient | None = None

    async def connect(self) -> None:
        """Create the AsyncQdrantClient instance."""
        if self._client is not None:
            return

        logger.info(f"Connecting to Qdrant at {self.settings.qdrant_url}")
        self._client = AsyncQdrantClient(
            url=self.settings.qdrant_url,
            api_key=self.settings.qdrant_api_key,
            timeout=self.settings.qdrant_timeout,
        )

    async def close(self) -> None:
        """Close the Qdrant client connection."""
        if self._client is not None:
            logger.info("Closing Qdrant client connection")
            await self._client.close()
            self._client = None

    @property
    def client(self) -> AsyncQdrantClient:
        """Get the underlying AsyncQdrantClient instance.

        Raises:
            RuntimeError: If client is not connected.
        """
        if self._client is None:
            raise RuntimeError("Qdrant client not connected. Call connect() first.")
        return self._client

    async def health_check(self) -> bool:
        """Check if Qdrant is reachable.

        Returns:
            True if Qdrant answered, False otherwise.
        """
        if self._client is None:
            return False
        try:
            await self._client.get_collections()
            return True
        except Exception as e:
            logger.error(f"Qdrant health check failed: {e}")
            return False

    async def index_exists(self, index: str) -> bool:
        """Check whether an index has been provisioned.

        Raises:
            EngineError: If Qdrant cannot be queried.
        """
        try:
            return await self.client.collection_exists(collection_name=index)
        except Exception as e:
            raise EngineError(f"Failed to check index '{index}': {e}", index=index) from e

    async def ensure_index(self, index: str) -> bool:
        """Provision an index if it does not exist yet.

        Returns:
            True if the index was created by this call.

        Raises:
            EngineError: If the index cannot be created.
        """
        if await self.index_exists(index):
            return False

        logger.info(f"Creating index '{index}'")
        try:
            await self.client.create_collection(collection_name=index, vectors_config={})
        except UnexpectedResponse as e:
            # Created concurrently by another writer
            if e.status_code == 409:
                return False
            raise EngineError(f"Failed to create index '{index}': {e}", index=index) from e
        except Exception as e:
            raise EngineError(f"Failed to create index '{index}': {e}", index=index) from e
        return True

    async def get(self, index: str, document_id: int) -> dict[str, Any] | None:
        """Fetch one document body by id.

        Returns:
            Document body, or None if the index or document does not exist.

        Raises:
            EngineError: If the lookup fails.
        """
        try:
            records = await self.client.retrieve(
                collection_name=index,
                ids=[document_id],
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            if _is_not_found(e):
                return None
            raise EngineError(
                f"Failed to get document {document_id} from '{index}': {e}", index=index
            ) from e

        if not records:
            return None
        return dict(records[0].payload or {})

    async def search(
        self,
        index: str,
        search_value: str | None = None,
        fields: tuple[str, ...] = ("name",),
        offset: int = 0,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Search an index for documents whose text fields contain ``search_value``.

        Args:
            index: Index to search.
            search_value: Free text; empty or None returns every document.
            fields: Payload fields matched against the text (any may match).
            offset: Number of documents to skip.
            limit: Maximum number of documents to return.

        Returns:
            Matching document bodies ordered by document id.

        Raises:
            EngineError: If the search fails.
        """
        query_filter = self._build_filter(search_value, fields)
        try:
            response = await self.client.query_points(
                collection_name=index,
                query_filter=query_filter,
                offset=offset,
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            if _is_not_found(e):
                return []
            raise EngineError(f"Failed to search '{index}': {e}", index=index) from e

        return [dict(point.payload or {}) for point in response.points]

    async def create(self, index: str, document_id: int, body: dict[str, Any]) -> None:
        """Write a document, provisioning the index on first use.

        Raises:
            EngineError: If the write fails.
        """
        await self.ensure_index(index)
        try:
            await self.client.upsert(
                collection_name=index,
                points=[models.PointStruct(id=document_id, vector={}, payload=body)],
                wait=True,
            )
        except Exception as e:
            raise EngineError(
                f"Failed to index document {document_id} in '{index}': {e}", index=index
            ) from e
        logger.debug(f"Indexed document {document_id} in '{index}'")

    async def delete(self, index: str, document_id: int) -> None:
        """Remove a document. Missing documents and indices are not errors.

        Raises:
            EngineError: If the delete fails.
        """
        try:
            await self.client.delete(
                collection_name=index,
                points_selector=models.PointIdsList(points=[document_id]),
                wait=True,
            )
        except Exception as e:
            if _is_not_found(e):
                logger.debug(f"Index '{index}' not found, nothing to delete")
                return
            raise EngineError(
                f"Failed to delete document {document_id} from '{index}': {e}", index=index
            ) from e
        logger.debug(f"Deleted document {document_id} from '{index}'")

    @staticmethod
    def _build_filter(search_value: str | None, fields: tuple[str, ...]) -> models.Filter | None:
        """Build a payload filter matching ``search_value`` in any of ``fields``."""
        if not search_value or not search_value.strip():
            return None

        conditions: list[models.Condition] = [
            models.FieldCondition(key=field, match=models.MatchText(text=search_value.strip()))
            for field in fields
        ]
        return models.Filter(should=conditions)

    async def __aenter__(self) -> "SearchGateway":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
