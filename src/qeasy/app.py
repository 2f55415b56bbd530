"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from qeasy.adapters.catalog_store import JsonCatalogStore
from qeasy.adapters.keepa import KeepaClient, KeepaFactFetcher, should_cache_payload
from qeasy.adapters.qoo10 import (
    Qoo10Client,
    Qoo10ExistenceProbe,
    Qoo10ListingPublisher,
    SessionManager,
    SessionStore,
)
from qeasy.config import (
    MissingConfigurationError,
    get_keepa_config,
    get_qoo10_config,
    get_storage_config,
)
from qeasy.domain.reconciliation import ReconciliationOrchestrator

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from qeasy.adapters.http_resilience import ClientFactory
    from qeasy.config import KeepaConfig, Qoo10Config, StorageConfig
    from qeasy.domain.ports import CatalogStore
    from qeasy.domain.types import (
        CatalogItem,
        ExistenceCheckResult,
        FactFetchResult,
        ListingRequest,
        PublishResult,
        RefreshResult,
    )


log = getLogger(__name__)


def load_keepa_config(storage: StorageConfig | None = None) -> KeepaConfig | None:
    try:
        return get_keepa_config(storage=storage, cache_predicate=should_cache_payload)
    except MissingConfigurationError as exc:
        log.info("Keepa disabled, falling back to catalog data: %s", exc)
        return None


def load_qoo10_config() -> Qoo10Config | None:
    try:
        return get_qoo10_config()
    except MissingConfigurationError as exc:
        log.info("Qoo10 disabled, running in dry-run mode: %s", exc)
        return None


def build_orchestrator(
    *,
    keepa_config: KeepaConfig | None = None,
    qoo10_config: Qoo10Config | None = None,
    client_factory: ClientFactory | None = None,
    session_store: SessionStore | None = None,
) -> ReconciliationOrchestrator:
    """Wire live adapters for whichever providers are configured."""

    orchestrator = ReconciliationOrchestrator()
    if keepa_config is not None:
        keepa_client = KeepaClient(config=keepa_config, client_factory=client_factory)
        orchestrator.fact_source = KeepaFactFetcher(client=keepa_client)
    if qoo10_config is not None:
        qoo10_client = Qoo10Client(config=qoo10_config, client_factory=client_factory)
        sessions = SessionManager(client=qoo10_client, config=qoo10_config, store=session_store)
        orchestrator.existence_probe = Qoo10ExistenceProbe(client=qoo10_client, sessions=sessions)
        orchestrator.publisher = Qoo10ListingPublisher(client=qoo10_client, sessions=sessions)
    return orchestrator


def build_default_orchestrator(storage: StorageConfig | None = None) -> ReconciliationOrchestrator:
    return build_orchestrator(
        keepa_config=load_keepa_config(storage),
        qoo10_config=load_qoo10_config(),
    )


def build_default_store(storage: StorageConfig | None = None) -> JsonCatalogStore:
    return JsonCatalogStore(config=storage or get_storage_config())


def list_items(*, store: CatalogStore | None = None) -> list[CatalogItem]:
    return (store or build_default_store()).load_items()


def replace_items(items: list[CatalogItem], *, store: CatalogStore | None = None) -> int:
    (store or build_default_store()).save_items(items)
    return len(items)


def get_settings(*, store: CatalogStore | None = None) -> dict[str, object]:
    return (store or build_default_store()).load_settings()


def update_settings(
    values: Mapping[str, object],
    *,
    store: CatalogStore | None = None,
) -> dict[str, object]:
    active_store = store or build_default_store()
    settings = active_store.load_settings()
    settings.update(values)
    active_store.save_settings(settings)
    return settings


def refresh_items(
    asins: Iterable[str] | None = None,
    *,
    store: CatalogStore | None = None,
    orchestrator: ReconciliationOrchestrator | None = None,
) -> RefreshResult:
    """Refresh catalog entries with current Amazon data and persist the catalog."""

    active_store = store or build_default_store()
    active_orchestrator = orchestrator or build_default_orchestrator()
    items = active_store.load_items()
    requested = list(asins) if asins else None
    log.info("Starting refresh: catalog=%d, requested=%s", len(items), requested or "all")

    result = asyncio.run(active_orchestrator.refresh(items, requested))
    active_store.save_items(items)

    log.info(
        f"Finished refresh: updated={result.updated}, requested={result.requested}, "
        f"degraded={result.degraded}"
    )
    return result


def fetch_amazon_facts(
    asins: Iterable[str],
    *,
    store: CatalogStore | None = None,
    orchestrator: ReconciliationOrchestrator | None = None,
) -> FactFetchResult:
    active_store = store or build_default_store()
    active_orchestrator = orchestrator or build_default_orchestrator()
    catalog = active_store.load_items() if active_orchestrator.fact_source is None else []
    return asyncio.run(active_orchestrator.fetch_facts(asins, catalog))


def check_existing_listings(
    asins: Iterable[str],
    *,
    store: CatalogStore | None = None,
    orchestrator: ReconciliationOrchestrator | None = None,
) -> ExistenceCheckResult:
    active_store = store or build_default_store()
    active_orchestrator = orchestrator or build_default_orchestrator()
    catalog = active_store.load_items() if active_orchestrator.existence_probe is None else []
    return asyncio.run(active_orchestrator.find_existing(asins, catalog))


def create_listings(
    requests: Iterable[ListingRequest],
    *,
    store: CatalogStore | None = None,
    orchestrator: ReconciliationOrchestrator | None = None,
) -> list[PublishResult]:
    """Publish listings one by one and record every created listing in the catalog."""

    active_store = store or build_default_store()
    active_orchestrator = orchestrator or build_default_orchestrator()
    items = active_store.load_items()

    results = asyncio.run(active_orchestrator.publish(list(requests), items))
    if any(result.listing_code for result in results):
        active_store.save_items(items)

    failed = sum(1 for result in results if not result.ok)
    log.info("Finished publishing: total=%d, failed=%d", len(results), failed)
    return results
