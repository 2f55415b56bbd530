"""Translate Keepa product payloads into source product facts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from qeasy.domain.identifiers import canonical_identifier
from qeasy.domain.types import (
    EXPEDITED_SHIP_DAYS,
    STANDARD_SHIP_DAYS,
    FactSource,
    SourceProductFact,
)

if TYPE_CHECKING:
    from .schema import KeepaProduct

AMAZON_IMAGE_BASE_URL: Final[str] = "https://images-na.ssl-images-amazon.com/images/I/"


def minor_to_whole(amount: int | None) -> int:
    """Convert a minor-unit amount to whole units, rounding halves up; absent or <= 0 is 0."""

    if amount is None or amount <= 0:
        return 0
    return (amount + 50) // 100


def derive_price(product: KeepaProduct) -> int:
    stats = product.stats
    return (
        minor_to_whole(stats.buy_box_price)
        or minor_to_whole(stats.current)
        or minor_to_whole(product.new_price)
    )


def derive_seller_count(product: KeepaProduct) -> int:
    stats = product.stats
    count = stats.offer_count_fba if stats.offer_count_fba is not None else stats.offer_count_new
    return max(count or 0, 0)


def derive_image_url(images_csv: str | None) -> str | None:
    if not images_csv:
        return None
    first = images_csv.split(",")[0].strip()
    if not first:
        return None
    return f"{AMAZON_IMAGE_BASE_URL}{first}"


def is_expedited(product: KeepaProduct) -> bool:
    fba_count = product.stats.offer_count_fba
    return product.has_fba or product.fba_offers > 0 or (fba_count is not None and fba_count > 0)


def translate_product(product: KeepaProduct) -> SourceProductFact | None:
    """Build a fact from one product record, or ``None`` when it carries no usable ASIN."""

    identifier = canonical_identifier(product.asin)
    if identifier is None:
        return None
    expedited = is_expedited(product)
    return SourceProductFact(
        identifier=identifier,
        price=derive_price(product),
        seller_count=derive_seller_count(product),
        title=product.title or identifier,
        image_url=derive_image_url(product.images_csv),
        is_expedited=expedited,
        estimated_ship_days=EXPEDITED_SHIP_DAYS if expedited else STANDARD_SHIP_DAYS,
        source=FactSource.KEEPA,
    )
