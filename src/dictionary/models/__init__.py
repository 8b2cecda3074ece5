"""Dictionary entity documents and queue envelopes."""

from dictionary.models.documents import (
    DOCUMENT_TYPES,
    Browser,
    EntityDocument,
    EntityKind,
    Form,
    Menu,
    Process,
    Window,
)
from dictionary.models.envelope import (
    TOPIC_KINDS,
    DocumentEnvelope,
    EventType,
    decode_envelope,
    decode_text,
    event_type_from_key,
    kind_for_topic,
)
from dictionary.models.tenant import ScopeLevel, TenantContext

__all__ = [
    "DOCUMENT_TYPES",
    "TOPIC_KINDS",
    "Browser",
    "DocumentEnvelope",
    "EntityDocument",
    "EntityKind",
    "EventType",
    "Form",
    "Menu",
    "Process",
    "ScopeLevel",
    "TenantContext",
    "Window",
    "decode_envelope",
    "decode_text",
    "event_type_from_key",
    "kind_for_topic",
]
