"""Read queries over the cascading dictionary indices."""

import logging

from pydantic import ValidationError

from dictionary.clients.qdrant import SearchGateway
from dictionary.errors import EngineError, QueryError
from dictionary.models.documents import DOCUMENT_TYPES, EntityDocument, EntityKind
from dictionary.retrieval.constants import MAX_PAGE_SIZE
from dictionary.retrieval.resolver import candidate_indices
from dictionary.retrieval.types import Pagination, TenantContext
from dictionary.utils.metrics import record_index_fallback, track_query

logger = logging.getLogger(__name__)


class EntityQueryService:
    """Fetch-by-id and list/search for one entity kind.

    Both operations walk the resolver's candidate chain, most specific index
    first, and fall back to shallower indices. ``get_by_id`` uses the first
    existing index that holds the document; ``list`` answers from the first
    index that exists at all.
    """

    def __init__(self, gateway: SearchGateway, kind: EntityKind) -> None:
        self.gateway = gateway
        self.kind = kind
        self.document_type = DOCUMENT_TYPES[kind]

    @track_query(operation="get")
    async def get_by_id(
        self, document_id: int, context: TenantContext | None = None
    ) -> EntityDocument | None:
        """Fetch one document by id.

        Args:
            document_id: Record id.
            context: Tenant scope of the request.

        Returns:
            The document, or None if no candidate index holds it.

        Raises:
            QueryError: If the search engine fails.
        """
        try:
            for depth, index in enumerate(candidate_indices(self.kind.value, context)):
                if not await self.gateway.index_exists(index):
                    continue
                body = await self.gateway.get(index, document_id)
                if body is not None:
                    logger.debug(f"Found {self.kind.value} {document_id} in '{index}'")
                    if depth:
                        record_index_fallback(self.kind.value)
                    return self._to_document(body)
        except EngineError as e:
            logger.error(f"Failed to get {self.kind.value} {document_id}: {e}")
            raise QueryError(str(e)) from e
        return None

    async def resolve_existing_index(self, context: TenantContext | None = None) -> str | None:
        """Most specific candidate index that exists, or None."""
        for depth, index in enumerate(candidate_indices(self.kind.value, context)):
            if await self.gateway.index_exists(index):
                if depth:
                    record_index_fallback(self.kind.value)
                return index
        return None

    def _to_document(self, body: dict) -> EntityDocument:
        try:
            return self.document_type.model_validate(body)
        except ValidationError as e:
            raise QueryError(f"Stored {self.kind.value} document is invalid: {e}") from e

    @track_query(operation="list")
    async def list(
        self,
        context: TenantContext | None = None,
        search_value: str | None = None,
        pagination: Pagination | None = None,
    ) -> list[EntityDocument]:
        """List documents, optionally filtered by free text and paginated.

        Args:
            context: Tenant scope of the request.
            search_value: Free text matched against the kind's text fields.
            pagination: Page to return. Without one, the first MAX_PAGE_SIZE
                documents are returned.

        Returns:
            Matching documents; empty if no candidate index exists.

        Raises:
            QueryError: If the search engine fails.
        """
        page = pagination or Pagination(page_size=MAX_PAGE_SIZE)
        try:
            index = await self.resolve_existing_index(context)
            if index is None:
                logger.info(f"No {self.kind.value} index provisioned for {context}")
                return []

            bodies = await self.gateway.search(
                index,
                search_value=search_value,
                fields=self.document_type.search_fields,
                offset=page.offset,
                limit=page.page_size,
            )
        except EngineError as e:
            logger.error(f"Failed to list {self.kind.value} documents: {e}")
            raise QueryError(str(e)) from e

        return [self._to_document(body) for body in bodies]


def build_query_services(gateway: SearchGateway) -> dict[EntityKind, EntityQueryService]:
    """Create one query service per entity kind."""
    return {kind: EntityQueryService(gateway, kind) for kind in EntityKind}
