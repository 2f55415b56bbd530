"""Qoo10 QAPI configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

QOO10_BASE_URL = "https://api.qoo10.jp/GMKT.INC.Front.QAPIService/ebayjapan.qapi/"
QOO10_TIMEOUT_SECONDS = 30.0
# Certification keys live for about an hour upstream; refresh well before that.
QOO10_SESSION_TTL_SECONDS = 45 * 60


def default_qoo10_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="qoo10",
        base_url=QOO10_BASE_URL,
        timeout_seconds=QOO10_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )


@dataclass(frozen=True)
class Qoo10Config:
    """Holds Qoo10 seller account credentials and client settings."""

    api_key: str
    user_id: str
    password: str = field(repr=False)
    session_ttl_seconds: int = QOO10_SESSION_TTL_SECONDS
    resilience: ResilienceConfig = field(default_factory=default_qoo10_resilience)

    @property
    def has_credentials(self) -> bool:
        return all(value.strip() for value in (self.api_key, self.user_id, self.password))


def get_qoo10_config(*, resilience: ResilienceConfig | None = None) -> Qoo10Config:
    values = require_env_vars(("QOO10_API_KEY", "QOO10_USER_ID", "QOO10_USER_PW"))
    return Qoo10Config(
        api_key=values["QOO10_API_KEY"],
        user_id=values["QOO10_USER_ID"],
        password=values["QOO10_USER_PW"],
        resilience=resilience or default_qoo10_resilience(),
    )
