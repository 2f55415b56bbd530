from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx
import pytest

from qeasy.adapters.http_resilience import CacheConfig, ResilienceConfig, ResilientClient
from qeasy.config import configure_logging
from qeasy.config.http_resilience import RateLimit


def test_plain_client_has_no_cache_or_limiter() -> None:
    client = ResilientClient(ResilienceConfig(name="plain"))

    assert client.is_cached is False
    assert client._limiter is None
    asyncio.run(client.aclose())


def test_memory_cache_and_rate_limit() -> None:
    client = ResilientClient(
        ResilienceConfig(
            name="cached",
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            cache=CacheConfig(backend="memory", default_ttl_seconds=60.0),
        )
    )

    assert client.is_cached is True
    assert client._limiter is not None
    asyncio.run(client.aclose())


def test_sqlite_cache_requires_path() -> None:
    with pytest.raises(ValueError, match="sqlite_path"):
        ResilientClient(ResilienceConfig(name="bad", cache=CacheConfig(backend="sqlite")))


def test_disabled_cache_is_ignored(tmp_path: Path) -> None:
    config = CacheConfig(enabled=False, backend="sqlite", sqlite_path=str(tmp_path / "c.db"))

    client = ResilientClient(ResilienceConfig(name="off", cache=config))

    assert client.is_cached is False
    asyncio.run(client.aclose())


def test_requests_pass_through_limiter() -> None:
    seen: list[tuple[str, str | None]] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, request.headers.get("QAPIVersion")))
        return httpx.Response(204)

    async def scenario() -> list[int]:
        client = ResilientClient(
            ResilienceConfig(name="limited", ratelimit=RateLimit(max_calls=10, per_seconds=1.0))
        )
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with client:
            responses = [
                await client.get("https://example.test/a"),
                await client.post(
                    "https://example.test/b", data={"x": "1"}, headers={"QAPIVersion": "1.1"}
                ),
            ]
        return [response.status_code for response in responses]

    assert asyncio.run(scenario()) == [204, 204]
    assert seen == [("/a", None), ("/b", "1.1")]


def test_configure_logging_quiets_http_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QEASY_LOG_LEVEL", "debug")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
