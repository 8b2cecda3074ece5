"""Tenant scope carried by queries and published documents."""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScopeLevel(IntEnum):
    """Specificity of an index in the cascading hierarchy.

    Attributes:
        BASE: Global index, named after the entity kind only.
        LANGUAGE: Per-language index.
        CLIENT: Per-language, per-client index.
        ROLE: Per-language, per-client, per-role index.
        USER: Per-language, per-client, per-role, per-user index.
    """

    BASE = 0
    LANGUAGE = 1
    CLIENT = 2
    ROLE = 3
    USER = 4


class TenantContext(BaseModel):
    """Tenant scope of a query or a published document.

    Identifiers are opaque and always held as strings; integers coming from
    upstream payloads are converted. Blank values count as absent.

    Attributes:
        language: Language code (e.g. ``en_US``).
        client_id: Client identifier.
        role_id: Role identifier.
        user_id: User identifier.
    """

    model_config = ConfigDict(frozen=True)

    language: str | None = Field(default=None, description="Language code")
    client_id: str | None = Field(default=None, description="Client identifier")
    role_id: str | None = Field(default=None, description="Role identifier")
    user_id: str | None = Field(default=None, description="User identifier")

    @field_validator("language", "client_id", "role_id", "user_id", mode="before")
    @classmethod
    def stringify(cls, v: object) -> str | None:
        if v is None or isinstance(v, bool):
            return None
        value = str(v).strip()
        return value or None

    def segments(self) -> tuple[str | None, ...]:
        """Scope values in hierarchy order, language first."""
        return (self.language, self.client_id, self.role_id, self.user_id)
