"""In-memory catalog storage."""

from .store import CatalogStore

__all__ = ['CatalogStore']
