from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from qeasy.adapters.http_resilience import ResilienceConfig, ResilientClient
from qeasy.config.keepa import KeepaConfig
from qeasy.config.qoo10 import Qoo10Config
from qeasy.domain.types import CatalogItem

if TYPE_CHECKING:
    from collections.abc import Callable

    from qeasy.adapters.http_resilience import ClientFactory

    Handler = Callable[[httpx.Request], httpx.Response]

_CREDENTIAL_VARS = (
    "KEEPA_API_KEY",
    "KEEPA_DOMAIN",
    "KEEPA_CACHE_TTL_SECONDS",
    "QOO10_API_KEY",
    "QOO10_USER_ID",
    "QOO10_USER_PW",
)

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path_factory: pytest.TempPathFactory,
) -> None:
    for name in _CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("QEASY_DATA_DIR", str(tmp_path_factory.mktemp("qeasy-data")))


def _make_client_factory(handler: Handler) -> ClientFactory:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        transport = httpx.MockTransport(async_handler)
        client._client = httpx.AsyncClient(transport=transport)  # noqa: SLF001
        return client

    return factory


@pytest.fixture
def make_client_factory() -> Callable[[Handler], ClientFactory]:
    return _make_client_factory


@pytest.fixture
def keepa_config() -> KeepaConfig:
    return KeepaConfig(
        api_key="keepa-key",
        resilience=ResilienceConfig(name="keepa", base_url="https://keepa.test/"),
    )


@pytest.fixture
def qoo10_config() -> Qoo10Config:
    return Qoo10Config(
        api_key="giosis-key",
        user_id="seller-id",
        password="seller-pw",
        resilience=ResilienceConfig(name="qoo10", base_url="https://qoo10.test/qapi/"),
    )


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def catalog() -> list[CatalogItem]:
    return [
        CatalogItem(
            identifier="B000000001",
            display_name="Green tea 500ml x 24",
            local_price=2480,
            source_title="Green Tea 500ml",
            image_url="https://img.test/tea.jpg",
            listing_code="1000001",
        ),
        CatalogItem(
            identifier="b000000002",
            display_name="Matcha whisk",
            local_price=1200,
            extra={"memo": "gift wrap"},
        ),
        CatalogItem(identifier="B000000003", display_name="Kettle"),
    ]
