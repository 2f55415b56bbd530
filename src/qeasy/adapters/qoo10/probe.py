"""Detect which ASINs are already listed on Qoo10 by scanning seller codes."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from qeasy.domain.errors import TransportFailureError
from qeasy.domain.identifiers import identifier_from_seller_code
from qeasy.domain.types import ExistenceCheckResult

if TYPE_CHECKING:
    from qeasy.domain.identifiers import Identifier

    from .client import Qoo10Client
    from .session import SessionManager

log = getLogger(__name__)

MAX_PAGES: Final[int] = 10


@dataclass(slots=True)
class Qoo10ExistenceProbe:
    client: Qoo10Client
    sessions: SessionManager
    max_pages: int = MAX_PAGES

    async def find_existing(self, identifiers: set[Identifier]) -> ExistenceCheckResult:
        """Page through the seller's goods until every target is found or the scan ends.

        Session errors propagate. A failed page ends the scan with whatever was
        found; so does the page cap, in which case ``complete`` is False.
        """

        if not identifiers:
            return ExistenceCheckResult(existing=frozenset())

        token = await self.sessions.get_session()
        found: set[Identifier] = set()
        exhausted = False
        page = 1

        async with self.client.open() as http:
            while page <= self.max_pages and len(found) < len(identifiers):
                try:
                    response = await self.client.get_goods_page(http, token=token, page=page)
                except TransportFailureError as exc:
                    log.warning("Qoo10 goods lookup stopped at page %d: %s", page, exc)
                    break

                goods = response.items
                if not goods:
                    exhausted = True
                    break

                for item in goods:
                    identifier = identifier_from_seller_code(item.seller_code)
                    if identifier is not None and identifier in identifiers:
                        found.add(identifier)
                page += 1

        complete = exhausted or len(found) == len(identifiers)
        if not complete:
            log.info(
                "Qoo10 scan ended after %d pages with %d/%d found",
                page - 1,
                len(found),
                len(identifiers),
            )
        return ExistenceCheckResult(existing=frozenset(found), complete=complete)
