"""Applies dictionary events to the search engine."""

import logging

from dictionary.clients.qdrant import SearchGateway
from dictionary.errors import EngineError
from dictionary.models.documents import EntityDocument
from dictionary.models.envelope import EventType
from dictionary.retrieval.resolver import resolve_index

logger = logging.getLogger(__name__)


class SyncApplier:
    """Maps an event type to an index mutation.

    ``new`` creates the document, ``update`` deletes then recreates it and
    ``delete`` removes it. Any other event type is a no-op. The target index
    is resolved from the document's kind and the tenant scope it was
    published for.

    ``apply`` never raises for engine failures: it returns False so the
    caller withholds the record's offset and the record is redelivered.
    An update whose delete succeeded but whose create failed leaves the
    document absent until that redelivery succeeds.
    """

    def __init__(self, gateway: SearchGateway) -> None:
        """Initialize the applier.

        Args:
            gateway: Search gateway the mutations are sent to.
        """
        self.gateway = gateway

    def target_index(self, document: EntityDocument) -> str:
        return resolve_index(document.index_base, document.tenant_context())

    async def apply(self, event_type: str, document: EntityDocument) -> bool:
        """Apply one event.

        Args:
            event_type: Event type from the record key.
            document: Decoded document.

        Returns:
            True if the record can be committed, False if it must be retried.
        """
        try:
            event = EventType(event_type)
        except ValueError:
            logger.debug(
                f"Ignoring event type '{event_type}' for {document.kind.value} {document.id}"
            )
            return True

        index = self.target_index(document)
        try:
            if event is EventType.NEW:
                await self.create(index, document)
            elif event is EventType.UPDATE:
                await self.delete(index, document)
                await self.create(index, document)
            elif event is EventType.DELETE:
                await self.delete(index, document)
        except EngineError as e:
            logger.warning(f"Failed to apply '{event.value}' to '{index}': {e}")
            return False

        logger.info(f"Applied '{event.value}' for {document.kind.value} {document.id} to '{index}'")
        return True

    async def create(self, index: str, document: EntityDocument) -> None:
        await self.gateway.create(index, document.document_id, document.to_body())

    async def delete(self, index: str, document: EntityDocument) -> None:
        await self.gateway.delete(index, document.document_id)
