"""Configuration constants for the retrieval module."""

INDEX_SEPARATOR = "_"
"""Separator placed between the base name and each scope segment."""

DEFAULT_PAGE_SIZE = 100
"""Number of records returned by a list query when no page size is given."""

MAX_PAGE_SIZE = 1000
"""Upper bound accepted for ``page_size``."""
