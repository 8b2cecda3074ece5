"""Core types for the retrieval module."""

from pydantic import BaseModel, Field

from dictionary.models.tenant import ScopeLevel, TenantContext
from dictionary.retrieval.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

__all__ = ["Pagination", "ScopeLevel", "TenantContext"]


class Pagination(BaseModel):
    """Page selection for list queries.

    Attributes:
        page_number: 1-based page number.
        page_size: Number of records per page.
    """

    page_number: int = Field(default=1, ge=1, description="1-based page number")
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Records per page"
    )

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size
