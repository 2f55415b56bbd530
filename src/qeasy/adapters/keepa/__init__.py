"""Keepa adapter: Amazon price and availability facts."""

from __future__ import annotations

from .client import MAX_ASINS_PER_REQUEST, KeepaAPIError, KeepaClient, should_cache_payload
from .fetcher import KeepaFactFetcher, iter_batches
from .schema import KeepaProduct, KeepaProductResponse, ProductStats
from .translator import derive_price, minor_to_whole, translate_product

__all__ = [
    "MAX_ASINS_PER_REQUEST",
    "KeepaAPIError",
    "KeepaClient",
    "KeepaFactFetcher",
    "KeepaProduct",
    "KeepaProductResponse",
    "ProductStats",
    "derive_price",
    "iter_batches",
    "minor_to_whole",
    "should_cache_payload",
    "translate_product",
]
