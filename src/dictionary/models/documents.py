"""Dictionary entity documents.

Each entity kind is a pydantic model carrying its target index base name and
the payload fields it publishes. Upstream fields not declared here are kept
in the document body so search results return what the publisher sent.
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dictionary.models.tenant import TenantContext

# Upstream publishers may send a precomputed index name; it is never trusted
DISCARDED_FIELDS = ("index_value",)


class EntityKind(str, Enum):
    """Dictionary entity kinds, one per queue topic."""

    MENU = "menu"
    PROCESS = "process"
    BROWSER = "browser"
    WINDOW = "window"
    FORM = "form"


class EntityDocument(BaseModel):
    """Base class for indexable dictionary entities.

    Attributes:
        id: Record identifier, used as the document id in every index.
        uuid: Record UUID.
        name: Display name.
        description: Short description.
        help: Long help text.
        is_active: Whether the record is active.
        language: Language the document was published for.
        client_id: Client the document was published for.
        role_id: Role the document was published for.
        user_id: User the document was published for.
    """

    model_config = ConfigDict(extra="allow")

    kind: ClassVar[EntityKind]
    plural: ClassVar[str]
    search_fields: ClassVar[tuple[str, ...]] = ("name", "description", "help")

    id: int = Field(description="Record identifier")
    uuid: str | None = None
    name: str | None = None
    description: str | None = None
    help: str | None = None
    is_active: bool | None = None

    language: str | None = None
    client_id: int | str | None = None
    role_id: int | str | None = None
    user_id: int | str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_index_name(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in DISCARDED_FIELDS}
        return data

    @property
    def index_base(self) -> str:
        """Base name of the index family this document belongs to."""
        return self.kind.value

    @property
    def document_id(self) -> int:
        return self.id

    def tenant_context(self) -> TenantContext:
        """Scope the document was published for."""
        return TenantContext(
            language=self.language,
            client_id=self.client_id,
            role_id=self.role_id,
            user_id=self.user_id,
        )

    def to_body(self) -> dict[str, Any]:
        """Serializable document body as stored in the search engine."""
        return self.model_dump(mode="json")


class Menu(EntityDocument):
    """Menu tree node; leaves point at the window, process, form or browser they open."""

    kind: ClassVar[EntityKind] = EntityKind.MENU
    plural: ClassVar[str] = "menus"

    parent_id: int | None = None
    sequence: int | None = None
    is_summary: bool | None = None
    is_sales_transaction: bool | None = None
    is_read_only: bool | None = None
    action: str | None = None
    action_id: int | None = None
    action_uuid: str | None = None
    window: dict[str, Any] | None = None
    process: dict[str, Any] | None = None
    form: dict[str, Any] | None = None
    browser: dict[str, Any] | None = None
    children: list[dict[str, Any]] | None = None


class Process(EntityDocument):
    """Process or report definition."""

    kind: ClassVar[EntityKind] = EntityKind.PROCESS
    plural: ClassVar[str] = "processes"
    search_fields: ClassVar[tuple[str, ...]] = ("code", "name", "description", "help")

    code: str | None = None
    is_report: bool | None = None
    show_help: str | None = None
    is_multi_selection: bool | None = None
    report_export_types: list[dict[str, Any]] | None = None
    parameters: list[dict[str, Any]] | None = None


class Browser(EntityDocument):
    """Smart browser definition."""

    kind: ClassVar[EntityKind] = EntityKind.BROWSER
    plural: ClassVar[str] = "browsers"
    search_fields: ClassVar[tuple[str, ...]] = ("code", "name", "description", "help")

    code: str | None = None
    is_execute_query_by_default: bool | None = None
    is_collapsible_by_default: bool | None = None
    is_selected_by_default: bool | None = None
    is_show_total: bool | None = None
    field_key: str | None = None
    table_name: str | None = None
    process: dict[str, Any] | None = None
    window: dict[str, Any] | None = None


class Window(EntityDocument):
    """Window definition with its tabs."""

    kind: ClassVar[EntityKind] = EntityKind.WINDOW
    plural: ClassVar[str] = "windows"

    window_type: str | None = None
    is_sales_transaction: bool | None = None
    tabs: list[dict[str, Any]] | None = None


class Form(EntityDocument):
    """Custom form definition."""

    kind: ClassVar[EntityKind] = EntityKind.FORM
    plural: ClassVar[str] = "forms"

    file_name: str | None = None


DOCUMENT_TYPES: dict[EntityKind, type[EntityDocument]] = {
    EntityKind.MENU: Menu,
    EntityKind.PROCESS: Process,
    EntityKind.BROWSER: Browser,
    EntityKind.WINDOW: Window,
    EntityKind.FORM: Form,
}
