"""Retrieval module for the cascading dictionary indices.

This module provides:
- Tenant context and scope levels for index resolution
- The cascading index resolver with degrade-to-deepest-resolvable semantics
- Per-kind query services with fallback through shallower indices

Example usage:
    >>> from dictionary.retrieval import TenantContext, resolve_index
    >>> resolve_index("menu", TenantContext(language="en", client_id=7))
    'menu_en_7'
"""

from dictionary.retrieval.constants import DEFAULT_PAGE_SIZE, INDEX_SEPARATOR, MAX_PAGE_SIZE
from dictionary.retrieval.types import Pagination, ScopeLevel, TenantContext
from dictionary.retrieval.resolver import candidate_indices, resolve_index, resolved_level
from dictionary.retrieval.query import EntityQueryService, build_query_services

__all__ = [
    # Types
    "Pagination",
    "ScopeLevel",
    "TenantContext",
    # Resolver
    "candidate_indices",
    "resolve_index",
    "resolved_level",
    # Query
    "EntityQueryService",
    "build_query_services",
    # Constants
    "DEFAULT_PAGE_SIZE",
    "INDEX_SEPARATOR",
    "MAX_PAGE_SIZE",
]
