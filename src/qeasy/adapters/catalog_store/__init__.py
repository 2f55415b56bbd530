"""JSON document storage for catalog items and settings."""

from __future__ import annotations

from .schema import CatalogItemDocument
from .store import CatalogStoreError, JsonCatalogStore
from .translator import to_catalog_item, to_document

__all__ = [
    "CatalogItemDocument",
    "CatalogStoreError",
    "JsonCatalogStore",
    "to_catalog_item",
    "to_document",
]
