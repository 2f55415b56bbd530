"""Domain records exchanged between the adapters and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import FailureKind  # noqa: TC001
from .identifiers import Identifier  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterable

STANDARD_SHIP_DAYS = 3
EXPEDITED_SHIP_DAYS = 1


class FactSource(StrEnum):
    """Where a product fact came from."""

    KEEPA = "keepa"
    CATALOG = "catalog"
    PLACEHOLDER = "placeholder"


@dataclass(slots=True, frozen=True)
class SourceProductFact:
    """Price and availability facts for one identifier, fresh per fetch."""

    identifier: Identifier
    price: int
    seller_count: int
    title: str
    image_url: str | None
    is_expedited: bool
    estimated_ship_days: int
    source: FactSource = FactSource.KEEPA

    @classmethod
    def placeholder(cls, identifier: Identifier) -> SourceProductFact:
        return cls(
            identifier=identifier,
            price=0,
            seller_count=0,
            title=identifier,
            image_url=None,
            is_expedited=True,
            estimated_ship_days=STANDARD_SHIP_DAYS,
            source=FactSource.PLACEHOLDER,
        )


@dataclass(slots=True, frozen=True)
class Resolved:
    fact: SourceProductFact


@dataclass(slots=True, frozen=True)
class Degraded:
    """A placeholder fact standing in for data that could not be obtained."""

    fact: SourceProductFact
    cause: str


type FactOutcome = Resolved | Degraded


@dataclass(slots=True)
class FactFetchResult:
    outcomes: list[FactOutcome] = field(default_factory=list["FactOutcome"])

    @property
    def facts(self) -> list[SourceProductFact]:
        return [outcome.fact for outcome in self.outcomes]

    @property
    def degraded(self) -> list[Degraded]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, Degraded)]

    def by_identifier(self) -> dict[Identifier, SourceProductFact]:
        return {outcome.fact.identifier: outcome.fact for outcome in self.outcomes}

    def extend(self, outcomes: Iterable[FactOutcome]) -> None:
        self.outcomes.extend(outcomes)


@dataclass(slots=True)
class CatalogItem:
    """Local catalog entry.

    Only the marketplace-derived fields are modelled; anything else the
    catalog document carries rides along in ``extra`` untouched.
    """

    identifier: Identifier
    display_name: str | None = None
    local_price: int = 0
    source_title: str | None = None
    image_url: str | None = None
    is_expedited: bool = False
    ship_days: int | None = None
    listing_code: str | None = None
    listing_price: int | None = None
    updated_at: datetime | None = None
    extra: dict[str, object] = field(default_factory=dict[str, object])

    @property
    def is_listed(self) -> bool:
        return bool(self.listing_code and self.listing_code.strip())


@dataclass(slots=True, frozen=True)
class ListingRequest:
    identifier: str
    price: int
    title: str
    image_url: str | None = None
    category_code: str | None = None
    shipping_code: str | None = None
    stock_qty: int | None = None
    product_code: str | None = None


class PublishStatus(StrEnum):
    CREATED = "created"
    # Upstream reported success without any recognisable listing code.
    AMBIGUOUS = "ambiguous"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class PublishResult:
    identifier: str
    status: PublishStatus
    listing_code: str | None = None
    failure: FailureKind | None = None
    message: str | None = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.status is not PublishStatus.FAILED


@dataclass(slots=True, frozen=True)
class ExistenceCheckResult:
    existing: frozenset[Identifier]
    # False when the scan stopped (page cap or failed page) before every target was seen.
    complete: bool = True


@dataclass(slots=True, frozen=True)
class RefreshResult:
    updated: int
    requested: int
    degraded: int = 0
