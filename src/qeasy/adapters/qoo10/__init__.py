"""Qoo10 adapter: seller authentication, existence checks and listing creation."""

from __future__ import annotations

from .client import Qoo10Client
from .probe import MAX_PAGES, Qoo10ExistenceProbe
from .publisher import (
    LISTING_CODE_ALIASES,
    Qoo10ListingPublisher,
    build_listing_form,
    extract_listing_code,
)
from .schema import CertificationResponse, GoodsInfo, GoodsLookupResponse, NewGoodsResponse
from .session import SessionCredential, SessionManager, SessionStore, epoch_millis

__all__ = [
    "LISTING_CODE_ALIASES",
    "MAX_PAGES",
    "CertificationResponse",
    "GoodsInfo",
    "GoodsLookupResponse",
    "NewGoodsResponse",
    "Qoo10Client",
    "Qoo10ExistenceProbe",
    "Qoo10ListingPublisher",
    "SessionCredential",
    "SessionManager",
    "SessionStore",
    "build_listing_form",
    "epoch_millis",
    "extract_listing_code",
]
