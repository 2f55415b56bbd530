from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from qeasy.adapters.keepa import KeepaAPIError, KeepaClient, KeepaFactFetcher
from qeasy.adapters.keepa.client import should_cache_payload
from qeasy.adapters.keepa.fetcher import iter_batches
from qeasy.domain.types import Degraded, FactSource, Resolved

if TYPE_CHECKING:
    from collections.abc import Callable

    from qeasy.adapters.http_resilience import ClientFactory
    from qeasy.config.keepa import KeepaConfig

    MakeFactory = Callable[[Callable[[httpx.Request], httpx.Response]], ClientFactory]


def _identifiers(count: int) -> set[str]:
    return {f"B{index:09d}" for index in range(count)}


def _product_payload(asin: str, price: int = 1000) -> dict[str, object]:
    return {"asin": asin, "title": f"Item {asin}", "stats": {"buyBoxPrice": price}}


def _echo_products(request: httpx.Request) -> httpx.Response:
    asins = request.url.params["asin"].split(",")
    return httpx.Response(
        200,
        json={"products": [_product_payload(asin) for asin in asins], "tokensLeft": 100},
    )


def _fetcher(keepa_config: KeepaConfig, factory: ClientFactory) -> KeepaFactFetcher:
    return KeepaFactFetcher(client=KeepaClient(config=keepa_config, client_factory=factory))


def test_large_request_is_split_into_batches(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    batch_sizes: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        batch_sizes.append(len(request.url.params["asin"].split(",")))
        return _echo_products(request)

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(fetcher.fetch_facts(_identifiers(250)))

    assert batch_sizes == [100, 100, 50]
    assert len(result.outcomes) == 250
    assert result.degraded == []
    assert {fact.identifier for fact in result.facts} == _identifiers(250)


def test_request_carries_product_query(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _echo_products(request)

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    asyncio.run(fetcher.fetch_facts({"B000000002", "B000000001"}))

    (request,) = seen
    assert request.method == "GET"
    assert request.url.path == "/product"
    assert request.url.host == "keepa.test"
    params = request.url.params
    assert params["key"] == "keepa-key"
    assert params["domain"] == "5"
    assert params["asin"] == "B000000001,B000000002"
    assert params["stats"] == "180"
    assert params["buybox"] == "1"
    assert params["offers"] == "20"
    assert params["history"] == "0"


def test_failed_batch_degrades_only_its_identifiers(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 2:
            return httpx.Response(500, json={"error": "boom"})
        return _echo_products(request)

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(fetcher.fetch_facts(_identifiers(250)))

    assert calls == 3
    assert len(result.outcomes) == 250
    degraded = result.degraded
    assert len(degraded) == 100
    assert all(outcome.fact.source is FactSource.PLACEHOLDER for outcome in degraded)
    assert all(outcome.fact.price == 0 for outcome in degraded)
    assert sum(isinstance(outcome, Resolved) for outcome in result.outcomes) == 150


def test_connection_error_degrades_batch(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(fetcher.fetch_facts({"B000000001"}))

    (outcome,) = result.outcomes
    assert isinstance(outcome, Degraded)
    assert outcome.fact.title == "B000000001"
    assert outcome.fact.is_expedited is True
    assert outcome.fact.estimated_ship_days == 3
    assert "connection refused" in outcome.cause


def test_error_payload_degrades_batch(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"error": {"type": "invalidKey", "message": "Invalid API key"}},
        )

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(fetcher.fetch_facts({"B000000001", "B000000002"}))

    assert [outcome.cause for outcome in result.degraded] == ["Invalid API key"] * 2


def test_identifiers_missing_from_response_get_placeholders(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "products": [
                    _product_payload("B000000001", 5000),
                    _product_payload("B000000001", 9900),
                    _product_payload("B000000077"),
                    {"title": "no asin"},
                ]
            },
        )

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(fetcher.fetch_facts({"B000000001", "B000000002"}))

    by_id = result.by_identifier()
    assert set(by_id) == {"B000000001", "B000000002"}
    assert by_id["B000000001"].price == 50
    assert [outcome.fact.identifier for outcome in result.degraded] == ["B000000002"]
    assert result.degraded[0].cause == "missing from response"


def test_malformed_record_degrades_only_its_own_identifier(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "products": [
                    _product_payload("B000000001", 5000),
                    {"asin": "B000000002", "title": 123},
                    {"asin": "B000000003", "newPrice": "n/a"},
                    "not-a-product",
                    _product_payload("B000000004", 1200),
                ]
            },
        )

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    result = asyncio.run(
        fetcher.fetch_facts({"B000000001", "B000000002", "B000000003", "B000000004"})
    )

    resolved = {
        outcome.fact.identifier: outcome.fact.price
        for outcome in result.outcomes
        if isinstance(outcome, Resolved)
    }
    assert resolved == {"B000000001": 50, "B000000004": 12}
    assert [outcome.fact.identifier for outcome in result.degraded] == [
        "B000000002",
        "B000000003",
    ]
    assert {outcome.cause for outcome in result.degraded} == {"missing from response"}


def test_empty_identifiers_make_no_request(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("unexpected request")

    fetcher = _fetcher(keepa_config, make_client_factory(handler))

    assert asyncio.run(fetcher.fetch_facts(set())).outcomes == []


def test_client_rejects_oversized_batch(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    client = KeepaClient(config=keepa_config, client_factory=make_client_factory(_echo_products))

    async def call() -> None:
        async with client.open() as http:
            await client.fetch_products(http, sorted(_identifiers(101)))

    with pytest.raises(ValueError, match="At most 100"):
        asyncio.run(call())


def test_keepa_api_error_keeps_type(
    keepa_config: KeepaConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"type": "tokens", "message": "No tokens"}})

    client = KeepaClient(config=keepa_config, client_factory=make_client_factory(handler))

    async def call() -> None:
        async with client.open() as http:
            await client.fetch_products(http, ["B000000001"])

    with pytest.raises(KeepaAPIError) as excinfo:
        asyncio.run(call())
    assert excinfo.value.error_type == "tokens"


def test_iter_batches() -> None:
    assert [list(batch) for batch in iter_batches([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    with pytest.raises(ValueError, match="positive"):
        list(iter_batches([1], 0))


def test_should_cache_payload() -> None:
    assert should_cache_payload({"products": [{"asin": "B000000001"}]}) is True
    assert should_cache_payload({"products": []}) is False
    assert should_cache_payload({"error": {"type": "x"}, "products": [{}]}) is False
    assert should_cache_payload(["products"]) is False
