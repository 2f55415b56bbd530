"""Batched, failure-isolating fetch of product facts from Keepa."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from qeasy.domain.types import Degraded, FactFetchResult, Resolved, SourceProductFact

from .client import MAX_ASINS_PER_REQUEST, KeepaAPIError, KeepaClient
from .schema import KeepaProduct
from .translator import translate_product

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from qeasy.adapters.http_resilience import ResilientClient
    from qeasy.domain.identifiers import Identifier
    from qeasy.domain.types import FactOutcome

log = getLogger(__name__)


def _iter_products(records: Sequence[object]) -> Iterator[KeepaProduct]:
    for index, record in enumerate(records):
        try:
            yield KeepaProduct.model_validate(record)
        except ValidationError as exc:
            log.warning(
                "Skipping malformed Keepa product #%d (%d errors)", index, exc.error_count()
            )


def iter_batches[T](values: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size <= 0:
        raise ValueError("Batch size must be positive")
    for start in range(0, len(values), size):
        yield values[start : start + size]


@dataclass(slots=True)
class KeepaFactFetcher:
    """Fetch facts for any number of ASINs, one Keepa call per batch.

    A failed batch never fails the fetch: each of its ASINs gets a placeholder
    fact and the next batch is attempted. ASINs Keepa silently omits are
    filled the same way, so every requested ASIN yields exactly one fact.
    """

    client: KeepaClient
    batch_size: int = MAX_ASINS_PER_REQUEST

    async def fetch_facts(self, identifiers: set[Identifier]) -> FactFetchResult:
        result = FactFetchResult()
        if not identifiers:
            return result

        ordered = sorted(identifiers)
        size = min(self.batch_size, MAX_ASINS_PER_REQUEST)
        async with self.client.open() as http:
            for batch in iter_batches(ordered, size):
                result.extend(await self._fetch_batch(http, batch))
        return result

    async def _fetch_batch(
        self,
        http: ResilientClient,
        batch: Sequence[Identifier],
    ) -> list[FactOutcome]:
        try:
            response = await self.client.fetch_products(http, batch)
        except (httpx.HTTPError, KeepaAPIError, ValueError) as exc:
            log.warning("Keepa batch of %d ASINs failed, using placeholders: %s", len(batch), exc)
            cause = str(exc) or type(exc).__name__
            return [Degraded(SourceProductFact.placeholder(asin), cause=cause) for asin in batch]

        wanted = set(batch)
        resolved: dict[Identifier, SourceProductFact] = {}
        for product in _iter_products(response.products):
            fact = translate_product(product)
            if fact is None or fact.identifier not in wanted or fact.identifier in resolved:
                continue
            resolved[fact.identifier] = fact

        outcomes: list[FactOutcome] = []
        for asin in batch:
            fact = resolved.get(asin)
            if fact is None:
                outcomes.append(
                    Degraded(SourceProductFact.placeholder(asin), cause="missing from response")
                )
            else:
                outcomes.append(Resolved(fact))
        return outcomes

