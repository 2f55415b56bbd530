"""Keepa (Amazon pricing data) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_int_env, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook
from .storage import StorageConfig, get_storage_config

KEEPA_BASE_URL = "https://api.keepa.com/"
KEEPA_TIMEOUT_SECONDS = 30.0
KEEPA_DEFAULT_DOMAIN = 5  # amazon.co.jp


def default_keepa_resilience(cache: CacheConfig | None = None) -> ResilienceConfig:
    return ResilienceConfig(
        name="keepa",
        base_url=KEEPA_BASE_URL,
        timeout_seconds=KEEPA_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=cache,
    )


@dataclass(frozen=True)
class KeepaConfig:
    """Holds Keepa API configuration values."""

    api_key: str
    domain: int = KEEPA_DEFAULT_DOMAIN
    resilience: ResilienceConfig = field(default_factory=default_keepa_resilience)


def get_keepa_config(
    *,
    resilience: ResilienceConfig | None = None,
    storage: StorageConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> KeepaConfig:
    """Load Keepa settings from the environment.

    ``KEEPA_CACHE_TTL_SECONDS`` enables an on-disk response cache for product
    lookups; without it every fetch goes to the provider.
    """

    values = require_env_vars(("KEEPA_API_KEY",))
    domain = optional_int_env("KEEPA_DOMAIN", KEEPA_DEFAULT_DOMAIN)
    ttl = optional_int_env("KEEPA_CACHE_TTL_SECONDS")

    cache: CacheConfig | None = None
    if ttl is not None and ttl > 0:
        storage_config = storage or get_storage_config()
        cache = CacheConfig(
            backend="sqlite",
            sqlite_path=str(storage_config.http_cache_path()),
            default_ttl_seconds=float(ttl),
            should_cache=cache_predicate,
        )

    return KeepaConfig(
        api_key=values["KEEPA_API_KEY"],
        domain=domain if domain is not None else KEEPA_DEFAULT_DOMAIN,
        resilience=resilience or default_keepa_resilience(cache),
    )
