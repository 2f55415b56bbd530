"""HTTP client for the Keepa product API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from qeasy.adapters.http_resilience import ResilientClient
from qeasy.config.keepa import KEEPA_BASE_URL

from .schema import KeepaErrorResponse, KeepaProductResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from qeasy.adapters.http_resilience import ClientFactory
    from qeasy.config.keepa import KeepaConfig

log = getLogger(__name__)

# Keepa rejects product requests naming more than 100 ASINs.
MAX_ASINS_PER_REQUEST: Final[int] = 100
STATS_DAYS: Final[int] = 180
OFFERS_LIMIT: Final[int] = 20


class KeepaAPIError(RuntimeError):
    """Raised when Keepa answers with an application-level error."""

    def __init__(self, message: str, *, error_type: str | None = None) -> None:
        super().__init__(message)
        self.error_type = error_type


def should_cache_payload(payload: object) -> bool:
    if not isinstance(payload, dict) or "error" in payload:
        return False
    return bool(payload.get("products"))


class KeepaClient:
    """Low-level HTTP client for the Keepa ``/product`` endpoint."""

    def __init__(
        self,
        *,
        config: KeepaConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def open(self) -> ResilientClient:
        return self._client_factory(self._resilience)

    async def fetch_products(
        self,
        client: ResilientClient,
        asins: Sequence[str],
    ) -> KeepaProductResponse:
        if len(asins) > MAX_ASINS_PER_REQUEST:
            raise ValueError(f"At most {MAX_ASINS_PER_REQUEST} ASINs per Keepa request")
        params: dict[str, str | int] = {
            "key": self._config.api_key,
            "domain": self._config.domain,
            "asin": ",".join(asins),
            "stats": STATS_DAYS,
            "buybox": 1,
            "offers": OFFERS_LIMIT,
            "history": 0,
        }
        base_url = self._resilience.base_url or KEEPA_BASE_URL
        response = await client.get(f"{base_url.rstrip('/')}/product", params=params)
        response.raise_for_status()

        payload = response.json()
        if isinstance(payload, dict) and payload.get("error"):
            error_payload = KeepaErrorResponse.model_validate(payload)
            message = error_payload.error.message or "Keepa request failed"
            log.error(f"Keepa API error {error_payload.error.type}: {message}")
            raise KeepaAPIError(message, error_type=error_payload.error.type)

        if not isinstance(payload, dict):
            raise KeepaAPIError("Unexpected Keepa response payload")

        return KeepaProductResponse.model_validate(payload)
