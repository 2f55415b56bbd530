"""Catalog-backed stand-ins used when marketplace credentials are not configured."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from qeasy.domain.identifiers import canonical_identifier, seller_code
from qeasy.domain.types import (
    EXPEDITED_SHIP_DAYS,
    Degraded,
    ExistenceCheckResult,
    FactFetchResult,
    FactSource,
    Resolved,
    SourceProductFact,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from qeasy.domain.identifiers import Identifier
    from qeasy.domain.types import CatalogItem

CATALOG_SELLER_COUNT: Final[int] = 5
LOCAL_CODE_PREFIX: Final[str] = "LOCAL-"


def index_catalog(catalog: Iterable[CatalogItem]) -> dict[Identifier, CatalogItem]:
    """Map canonical identifiers to their first catalog entry."""

    index: dict[Identifier, CatalogItem] = {}
    for item in catalog:
        identifier = canonical_identifier(item.identifier)
        if identifier is not None and identifier not in index:
            index[identifier] = item
    return index


def catalog_facts(identifiers: set[Identifier], catalog: Iterable[CatalogItem]) -> FactFetchResult:
    """Synthesize one fact per identifier from the catalog snapshot."""

    index = index_catalog(catalog)
    result = FactFetchResult()
    for identifier in sorted(identifiers):
        item = index.get(identifier)
        if item is None:
            result.outcomes.append(
                Degraded(SourceProductFact.placeholder(identifier), cause="not in catalog")
            )
            continue
        result.outcomes.append(
            Resolved(
                SourceProductFact(
                    identifier=identifier,
                    price=max(item.local_price, 0),
                    seller_count=CATALOG_SELLER_COUNT,
                    title=item.display_name or identifier,
                    image_url=item.image_url,
                    is_expedited=True,
                    estimated_ship_days=EXPEDITED_SHIP_DAYS,
                    source=FactSource.CATALOG,
                )
            )
        )
    return result


def catalog_existing(
    identifiers: set[Identifier], catalog: Iterable[CatalogItem]
) -> ExistenceCheckResult:
    listed = {
        identifier
        for identifier, item in index_catalog(catalog).items()
        if item.is_listed
    }
    return ExistenceCheckResult(existing=frozenset(identifiers & listed))


def local_listing_code(identifier: Identifier) -> str:
    return f"{LOCAL_CODE_PREFIX}{seller_code(identifier)}"
