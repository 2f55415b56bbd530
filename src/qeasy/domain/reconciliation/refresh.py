"""Fold fetched product facts back into catalog entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from qeasy.domain.identifiers import canonical_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from qeasy.domain.identifiers import Identifier
    from qeasy.domain.types import CatalogItem, SourceProductFact


def catalog_identifiers(catalog: Iterable[CatalogItem]) -> list[str]:
    return [item.identifier for item in catalog if item.identifier]


def apply_facts(
    catalog: Iterable[CatalogItem],
    facts: Mapping[Identifier, SourceProductFact],
    *,
    now: datetime,
) -> int:
    """Overwrite marketplace-derived fields in place; return the number of entries touched.

    Entries without a matching fact are left alone and nothing is ever removed.
    """

    updated = 0
    for item in catalog:
        identifier = canonical_identifier(item.identifier)
        if identifier is None:
            continue
        fact = facts.get(identifier)
        if fact is None:
            continue
        item.local_price = fact.price
        item.source_title = fact.title or item.source_title
        item.image_url = fact.image_url or item.image_url
        item.is_expedited = fact.is_expedited
        item.ship_days = fact.estimated_ship_days
        item.updated_at = now
        updated += 1
    return updated
