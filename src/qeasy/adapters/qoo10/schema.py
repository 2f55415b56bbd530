"""Pydantic models describing the Qoo10 QAPI payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_CODE = 0


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class Qoo10BaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Qoo10Envelope(Qoo10BaseModel):
    result_code: int | None = Field(default=None, alias="ResultCode")
    result_msg: str | None = Field(default=None, alias="ResultMsg")

    @property
    def is_success(self) -> bool:
        return self.result_code == SUCCESS_CODE


class CertificationResponse(Qoo10Envelope):
    result_object: str | None = Field(default=None, alias="ResultObject")

    @field_validator("result_object", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return _blank_to_none(value)
        return str(value)


class GoodsInfo(Qoo10BaseModel):
    seller_code: str | None = Field(default=None, alias="SellerCode")

    @field_validator("seller_code", mode="before")
    @classmethod
    def _code_to_str(cls, value: object) -> object:
        # Sellers may have set purely numeric codes on unrelated listings.
        return _blank_to_none(value if value is None else str(value))


class GoodsPage(Qoo10BaseModel):
    items: list[GoodsInfo] = Field(default_factory=list["GoodsInfo"], alias="Items")

    @field_validator("items", mode="before")
    @classmethod
    def _default_items(cls, value: object) -> object:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class GoodsLookupResponse(Qoo10Envelope):
    result_object: GoodsPage | None = Field(default=None, alias="ResultObject")

    @field_validator("result_object", mode="before")
    @classmethod
    def _only_mappings(cls, value: object) -> object:
        return value if isinstance(value, dict) else None

    @property
    def items(self) -> list[GoodsInfo]:
        return self.result_object.items if self.result_object is not None else []


class NewGoodsResponse(Qoo10Envelope):
    result_object: dict[str, object] = Field(default_factory=dict, alias="ResultObject")

    @field_validator("result_object", mode="before")
    @classmethod
    def _only_mappings(cls, value: object) -> object:
        return value if isinstance(value, dict) else {}
