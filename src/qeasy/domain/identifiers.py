"""ASIN canonicalisation and the seller-code convention joining both marketplaces."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

IDENTIFIER_PATTERN: Final = re.compile(r"^[A-Z0-9]{10}$")
SELLER_CODE_PREFIX: Final[str] = "AMZ-"

type Identifier = str


def canonical_identifier(raw: object) -> Identifier | None:
    """Return the uppercase identifier, or ``None`` when ``raw`` is not a valid ASIN."""

    if raw is None:
        return None
    candidate = str(raw).strip().upper()
    if not IDENTIFIER_PATTERN.fullmatch(candidate):
        return None
    return candidate


def normalize_identifiers(raw: Iterable[object] | None) -> set[Identifier]:
    """Canonicalise and deduplicate identifiers, silently dropping malformed entries."""

    if not raw:
        return set()
    normalized: set[Identifier] = set()
    for value in raw:
        identifier = canonical_identifier(value)
        if identifier is not None:
            normalized.add(identifier)
    return normalized


def seller_code(identifier: Identifier) -> str:
    return f"{SELLER_CODE_PREFIX}{identifier}"


def identifier_from_seller_code(code: object) -> Identifier | None:
    """Map a destination seller code back to an identifier.

    ``AMZ-<asin>`` is the current convention; bare ASINs are accepted for
    listings created before the prefix was introduced.
    """

    if code is None:
        return None
    value = str(code).strip().upper()
    if not value:
        return None
    if value.startswith(SELLER_CODE_PREFIX):
        value = value[len(SELLER_CODE_PREFIX) :]
    return value or None
