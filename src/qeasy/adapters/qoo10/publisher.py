"""Create new Qoo10 listings keyed by the ``AMZ-<asin>`` seller code."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from qeasy.domain.errors import PublishFailedError
from qeasy.domain.identifiers import seller_code

if TYPE_CHECKING:
    from collections.abc import Mapping

    from qeasy.domain.types import ListingRequest

    from .client import Qoo10Client
    from .session import SessionManager

log = getLogger(__name__)

DEFAULT_STOCK_QTY: Final[int] = 1
DEFAULT_SHIPPING_CODE: Final[str] = "0"
EXPIRE_DATE: Final[str] = "2050-01-01"
LEAD_TIME_DAYS: Final[int] = 3

# SetNewGoods has answered with each of these names for the new item code.
LISTING_CODE_ALIASES: Final[tuple[str, ...]] = ("GdNo", "ItemCode", "item_code", "goodsNo")


def build_listing_form(request: ListingRequest) -> dict[str, str]:
    form: dict[str, str] = {}
    if request.category_code:
        form["SecondSubCat"] = str(request.category_code)
    form["ItemTitle"] = request.title
    form["SellerCode"] = seller_code(request.identifier.strip().upper())
    form["IndustrialCodeType"] = "J"
    form["IndustrialCode"] = request.product_code or ""
    if request.image_url:
        form["StandardImage"] = request.image_url
    form["ItemPrice"] = str(request.price)
    form["ItemQty"] = str(request.stock_qty or DEFAULT_STOCK_QTY)
    form["ShippingNo"] = str(request.shipping_code or DEFAULT_SHIPPING_CODE)
    form["TaxRate"] = "S"
    form["ExpireDate"] = EXPIRE_DATE
    form["AvailableDateType"] = "0"
    form["AvailableDateValue"] = str(LEAD_TIME_DAYS)
    form["AdultYN"] = "N"
    return form


def extract_listing_code(result_object: Mapping[str, object]) -> str:
    for alias in LISTING_CODE_ALIASES:
        value = result_object.get(alias)
        if value:
            return str(value)
    return ""


@dataclass(slots=True)
class Qoo10ListingPublisher:
    client: Qoo10Client
    sessions: SessionManager

    async def create_listing(self, request: ListingRequest) -> str:
        """Create one listing and return its code; ``""`` if upstream named none."""

        token = await self.sessions.get_session()
        response = await self.client.set_new_goods(token=token, form=build_listing_form(request))
        if not response.is_success:
            raise PublishFailedError(
                f"Qoo10 SetNewGoods error Code={response.result_code} Msg={response.result_msg}",
                code=response.result_code,
            )
        code = extract_listing_code(response.result_object)
        if not code:
            log.warning("SetNewGoods succeeded for %s without a listing code", request.identifier)
        return code
