"""Queue record envelopes and the topic to document kind table."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from dictionary.errors import DecodeError
from dictionary.models.documents import DOCUMENT_TYPES, EntityDocument, EntityKind

# Topic name -> document kind. Records on any other topic are ignored.
TOPIC_KINDS: dict[str, EntityKind] = {
    "menu": EntityKind.MENU,
    "process": EntityKind.PROCESS,
    "browser": EntityKind.BROWSER,
    "window": EntityKind.WINDOW,
    "form": EntityKind.FORM,
}


class EventType(str, Enum):
    """Mutation announced by a record key."""

    NEW = "new"
    UPDATE = "update"
    DELETE = "delete"


class DocumentEnvelope(BaseModel):
    """Decoded queue record.

    Attributes:
        topic: Topic the record was received on.
        event_type: Event type taken from the record key, quotes stripped.
        key: Raw record key.
        document: Decoded document, or None when there is nothing to apply.
    """

    topic: str
    event_type: str = ""
    key: str = ""
    document: EntityDocument | None = None

    @property
    def has_document(self) -> bool:
        return self.document is not None


def kind_for_topic(topic: str) -> EntityKind | None:
    """Look up the document kind published on ``topic``."""
    return TOPIC_KINDS.get(topic)


def event_type_from_key(key: str) -> str:
    """Strip the JSON quoting from a record key (``"new"`` -> ``new``)."""
    return key.replace('"', "").strip()


def decode_text(raw: bytes | str | None) -> str:
    """Decode raw record bytes as UTF-8, treating undecodable input as empty."""
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def decode_envelope(
    kind: EntityKind,
    payload: str,
    topic: str | None = None,
    key: str = "",
) -> DocumentEnvelope:
    """Decode a record value of the form ``{"document": <entity-or-null>}``.

    Args:
        kind: Document kind fixed by the record's topic.
        payload: Record value as text.
        topic: Topic name, defaults to the kind's own topic.
        key: Raw record key.

    Returns:
        Envelope carrying the typed document, or no document when the value
        holds ``null``.

    Raises:
        DecodeError: If the value is not JSON or the document does not match
            the kind's model.
    """
    topic = topic or kind.value
    try:
        data: Any = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON payload on topic '{topic}': {e}", topic=topic) from e

    if not isinstance(data, dict):
        raise DecodeError(f"Payload on topic '{topic}' is not an object", topic=topic)

    raw_document = data.get("document")
    document: EntityDocument | None = None
    if raw_document is not None:
        try:
            document = DOCUMENT_TYPES[kind].model_validate(raw_document)
        except ValidationError as e:
            raise DecodeError(f"Invalid {kind.value} document: {e}", topic=topic) from e

    return DocumentEnvelope(
        topic=topic,
        event_type=event_type_from_key(key),
        key=key,
        document=document,
    )
