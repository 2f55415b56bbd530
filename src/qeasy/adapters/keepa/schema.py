"""Pydantic models describing the Keepa product API payloads."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _first_scalar(value: object) -> object:
    # ``stats.current`` is an array indexed by price type in full responses.
    if isinstance(value, Sequence) and not isinstance(value, str):
        return value[0] if value else None
    return value


def _offer_count(value: object) -> object:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Sequence) and not isinstance(value, str):
        return len(value)
    return value


class KeepaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProductStats(KeepaBaseModel):
    buy_box_price: int | None = Field(default=None, alias="buyBoxPrice")
    current: int | None = None
    offer_count_fba: int | None = Field(default=None, alias="offerCountFBA")
    offer_count_new: int | None = Field(default=None, alias="offerCountNew")

    _normalize_current = field_validator("current", mode="before")(_first_scalar)


class KeepaProduct(KeepaBaseModel):
    asin: str | None = None
    title: str | None = None
    new_price: int | None = Field(default=None, alias="newPrice")
    images_csv: str | None = Field(default=None, alias="imagesCSV")
    has_fba: bool = Field(default=False, alias="hasFBA")
    fba_offers: int = Field(default=0, alias="fbaOffers")
    stats: ProductStats = Field(default_factory=ProductStats)

    _normalize_fba_offers = field_validator("fba_offers", mode="before")(_offer_count)

    @field_validator("stats", mode="before")
    @classmethod
    def _default_stats(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("has_fba", mode="before")
    @classmethod
    def _truthy(cls, value: object) -> bool:
        return bool(value)


class KeepaProductResponse(KeepaBaseModel):
    """Response envelope; product records are validated one by one by the fetcher."""

    products: list[object] = Field(default_factory=list[object])

    @field_validator("products", mode="before")
    @classmethod
    def _default_products(cls, value: object) -> object:
        return [] if value is None else value


class KeepaErrorDetail(KeepaBaseModel):
    type: str | None = None
    message: str | None = None


class KeepaErrorResponse(KeepaBaseModel):
    error: KeepaErrorDetail
