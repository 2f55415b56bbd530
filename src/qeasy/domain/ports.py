"""Ports implemented by the marketplace and storage adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .identifiers import Identifier
    from .types import CatalogItem, ExistenceCheckResult, FactFetchResult, ListingRequest


@runtime_checkable
class ProductFactSource(Protocol):
    """Live source of price and availability facts."""

    async def fetch_facts(self, identifiers: set[Identifier]) -> FactFetchResult: ...


@runtime_checkable
class ExistenceProbe(Protocol):
    """Answers which identifiers already have a listing on the destination marketplace."""

    async def find_existing(self, identifiers: set[Identifier]) -> ExistenceCheckResult: ...


@runtime_checkable
class ListingPublisher(Protocol):
    async def create_listing(self, request: ListingRequest) -> str: ...


class CatalogStore(Protocol):
    def load_items(self) -> list[CatalogItem]: ...

    def save_items(self, items: list[CatalogItem]) -> None: ...

    def load_settings(self) -> dict[str, object]: ...

    def save_settings(self, settings: dict[str, object]) -> None: ...


__all__ = ["CatalogStore", "ExistenceProbe", "ListingPublisher", "ProductFactSource"]
