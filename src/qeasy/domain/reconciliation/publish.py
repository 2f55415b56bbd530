"""Per-item listing creation with catalog upsert."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from qeasy.domain.errors import FailureKind, ReconciliationError
from qeasy.domain.identifiers import canonical_identifier
from qeasy.domain.types import CatalogItem, PublishResult, PublishStatus

from .fallback import index_catalog, local_listing_code

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from qeasy.domain.identifiers import Identifier
    from qeasy.domain.ports import ListingPublisher
    from qeasy.domain.types import ListingRequest

log = getLogger(__name__)


async def publish_listings(
    requests: Iterable[ListingRequest],
    catalog: list[CatalogItem],
    *,
    publisher: ListingPublisher | None,
    now: datetime,
) -> list[PublishResult]:
    """Publish each request independently; one result per request, in order.

    ``publisher=None`` is the dry-run mode: a local code is synthesized and the
    catalog updated without touching the network.
    """

    results: list[PublishResult] = []
    for request in requests:
        identifier = canonical_identifier(request.identifier)
        if identifier is None:
            log.warning("Skipping listing with invalid ASIN %r", request.identifier)
            results.append(
                PublishResult(
                    identifier=str(request.identifier),
                    status=PublishStatus.FAILED,
                    failure=FailureKind.INVALID_ASIN,
                    message=f"Invalid ASIN: {request.identifier!r}",
                    dry_run=publisher is None,
                )
            )
            continue

        canonical_request = replace(request, identifier=identifier)
        if publisher is None:
            code = local_listing_code(identifier)
            upsert_listing(catalog, canonical_request, listing_code=code, now=now)
            results.append(
                PublishResult(
                    identifier=identifier,
                    status=PublishStatus.CREATED,
                    listing_code=code,
                    dry_run=True,
                )
            )
            continue

        results.append(
            await _publish_one(publisher, canonical_request, identifier, catalog, now=now)
        )
    return results


async def _publish_one(
    publisher: ListingPublisher,
    request: ListingRequest,
    identifier: Identifier,
    catalog: list[CatalogItem],
    *,
    now: datetime,
) -> PublishResult:
    try:
        code = await publisher.create_listing(request)
    except ReconciliationError as exc:
        log.warning("Listing %s failed (%s): %s", identifier, exc.kind, exc)
        return PublishResult(
            identifier=identifier,
            status=PublishStatus.FAILED,
            failure=exc.kind,
            message=str(exc),
        )

    if not code:
        log.warning("Listing %s accepted upstream without a listing code", identifier)
        return PublishResult(
            identifier=identifier,
            status=PublishStatus.AMBIGUOUS,
            message="Listing accepted without a listing code",
        )

    upsert_listing(catalog, request, listing_code=code, now=now)
    log.info("Listed %s as %s", identifier, code)
    return PublishResult(identifier=identifier, status=PublishStatus.CREATED, listing_code=code)


def upsert_listing(
    catalog: list[CatalogItem],
    request: ListingRequest,
    *,
    listing_code: str,
    now: datetime,
) -> CatalogItem:
    """Record a listing on the matching catalog entry, appending one if none exists."""

    item = index_catalog(catalog).get(request.identifier)
    if item is None:
        item = CatalogItem(
            identifier=request.identifier,
            display_name=request.title,
            image_url=request.image_url,
        )
        catalog.append(item)
    item.listing_code = listing_code
    item.listing_price = request.price
    item.updated_at = now
    return item
