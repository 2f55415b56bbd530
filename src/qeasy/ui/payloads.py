"""JSON payloads read and written by the command line interface."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from qeasy.domain.types import (
    ListingRequest,
    PublishResult,
    RefreshResult,
    SourceProductFact,
)


def _optional_str(value: object) -> object:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ListingRequestPayload(BaseModel):
    """One entry of a publish request file (same keys as the web client sends)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    asin: str
    price: int
    title: str = ""
    image_url: str | None = Field(default=None, alias="imageUrl")
    category_no: str | None = Field(default=None, alias="categoryNo")
    shipping_code: str | None = Field(default=None, alias="shippingCode")
    stock: int | None = None
    jan: str | None = None

    _normalize_optional = field_validator(
        "image_url", "category_no", "shipping_code", "jan", mode="before"
    )(_optional_str)

    @field_validator("asin", mode="before")
    @classmethod
    def _asin_to_str(cls, value: object) -> object:
        return "" if value is None else str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _round_price(cls, value: object) -> object:
        if isinstance(value, float):
            return round(value)
        return value

    def to_request(self) -> ListingRequest:
        return ListingRequest(
            identifier=self.asin,
            price=self.price,
            title=self.title,
            image_url=self.image_url,
            category_code=self.category_no,
            shipping_code=self.shipping_code,
            stock_qty=self.stock,
            product_code=self.jan,
        )


LISTING_REQUESTS_ADAPTER = TypeAdapter(list[ListingRequestPayload])
FACTS_ADAPTER = TypeAdapter(list[SourceProductFact])
PUBLISH_RESULTS_ADAPTER = TypeAdapter(list[PublishResult])
REFRESH_ADAPTER = TypeAdapter(RefreshResult)
