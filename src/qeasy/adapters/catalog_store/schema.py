"""Pydantic models for the on-disk catalog and settings documents."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def _to_whole_number(value: object) -> object:
    if value is None or value == "":
        return None
    if isinstance(value, float):
        return round(value)
    return value


def _to_code(value: object) -> object:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class CatalogItemDocument(BaseModel):
    """One entry of ``items.json``; unknown keys are preserved on round-trip."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    asin: str = ""
    name: str | None = None
    amazon_price: int | None = Field(default=None, alias="amazonPrice")
    amazon_title: str | None = Field(default=None, alias="amazonTitle")
    main_image: str | None = Field(default=None, alias="mainImage")
    is_prime: bool | None = Field(default=None, alias="isPrime")
    ship_days: int | None = Field(default=None, alias="shipDays")
    qoo10_id: str | None = Field(default=None, alias="qoo10Id")
    qoo10_price: int | None = Field(default=None, alias="qoo10Price")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    _normalize_numbers = field_validator(
        "amazon_price", "ship_days", "qoo10_price", mode="before"
    )(_to_whole_number)
    _normalize_codes = field_validator("qoo10_id", mode="before")(_to_code)

    @field_validator("asin", mode="before")
    @classmethod
    def _asin_to_str(cls, value: object) -> object:
        return "" if value is None else str(value)


ITEMS_ADAPTER: TypeAdapter[list[CatalogItemDocument]] = TypeAdapter(list[CatalogItemDocument])
SETTINGS_ADAPTER: TypeAdapter[dict[str, object]] = TypeAdapter(dict[str, object])
