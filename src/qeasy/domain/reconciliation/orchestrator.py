"""Compose fact fetching, existence checks and publishing over a catalog snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from qeasy.domain.identifiers import normalize_identifiers
from qeasy.domain.types import ExistenceCheckResult, FactFetchResult, RefreshResult

from .fallback import catalog_existing, catalog_facts
from .publish import publish_listings
from .refresh import apply_facts, catalog_identifiers

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from qeasy.domain.ports import ExistenceProbe, ListingPublisher, ProductFactSource
    from qeasy.domain.types import CatalogItem, ListingRequest, PublishResult

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationOrchestrator:
    """Entry point for refresh, lookup and publish requests.

    A collaborator left as ``None`` puts that concern into degraded mode, where
    the caller's catalog snapshot stands in for the marketplace.
    """

    fact_source: ProductFactSource | None = None
    existence_probe: ExistenceProbe | None = None
    publisher: ListingPublisher | None = None
    now_provider: Callable[[], datetime] = _utcnow

    async def fetch_facts(
        self,
        raw_identifiers: Iterable[object] | None,
        catalog: Iterable[CatalogItem] = (),
    ) -> FactFetchResult:
        identifiers = normalize_identifiers(raw_identifiers)
        if not identifiers:
            return FactFetchResult()
        if self.fact_source is None:
            log.info("Keepa not configured; answering %d ASINs from catalog", len(identifiers))
            return catalog_facts(identifiers, catalog)
        return await self.fact_source.fetch_facts(identifiers)

    async def refresh(
        self,
        catalog: list[CatalogItem],
        identifiers: Iterable[object] | None = None,
    ) -> RefreshResult:
        requested = list(identifiers) if identifiers else catalog_identifiers(catalog)
        result = await self.fetch_facts(requested, catalog)
        updated = apply_facts(catalog, result.by_identifier(), now=self.now_provider())
        degraded = len(result.degraded)
        if degraded:
            log.warning(
                "Refresh used placeholders for %d of %d ASINs", degraded, len(result.outcomes)
            )
        log.info("Refreshed %d catalog entries", updated)
        return RefreshResult(updated=updated, requested=len(result.outcomes), degraded=degraded)

    async def find_existing(
        self,
        raw_identifiers: Iterable[object] | None,
        catalog: Iterable[CatalogItem] = (),
    ) -> ExistenceCheckResult:
        identifiers = normalize_identifiers(raw_identifiers)
        if not identifiers:
            return ExistenceCheckResult(existing=frozenset())
        if self.existence_probe is None:
            return catalog_existing(identifiers, catalog)
        result = await self.existence_probe.find_existing(identifiers)
        if not result.complete:
            log.warning(
                "Existence check incomplete: found %d of %d ASINs before stopping",
                len(result.existing),
                len(identifiers),
            )
        return result

    async def publish(
        self,
        requests: Iterable[ListingRequest],
        catalog: list[CatalogItem],
    ) -> list[PublishResult]:
        return await publish_listings(
            requests,
            catalog,
            publisher=self.publisher,
            now=self.now_provider(),
        )
