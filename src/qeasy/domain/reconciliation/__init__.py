"""Marketplace reconciliation: refresh, existence checks and publishing."""

from __future__ import annotations

from .fallback import catalog_existing, catalog_facts, local_listing_code
from .orchestrator import ReconciliationOrchestrator
from .publish import publish_listings, upsert_listing
from .refresh import apply_facts

__all__ = [
    "ReconciliationOrchestrator",
    "apply_facts",
    "catalog_existing",
    "catalog_facts",
    "local_listing_code",
    "publish_listings",
    "upsert_listing",
]
