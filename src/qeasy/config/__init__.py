"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_int_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .keepa import KeepaConfig, get_keepa_config
from .logging import configure_logging
from .qoo10 import Qoo10Config, get_qoo10_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "NO_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "KeepaConfig",
    "MissingConfigurationError",
    "Qoo10Config",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_keepa_config",
    "get_qoo10_config",
    "get_storage_config",
    "optional_int_env",
    "require_env_vars",
]
