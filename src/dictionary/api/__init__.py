"""HTTP API for dictionary queries."""

from dictionary.api.router import router

__all__ = ["router"]
