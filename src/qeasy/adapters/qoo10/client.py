"""HTTP client for the Qoo10 QAPI endpoints used by qeasy."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import BaseModel, ValidationError

from qeasy.adapters.http_resilience import ResilientClient
from qeasy.config.qoo10 import QOO10_BASE_URL
from qeasy.domain.errors import TransportFailureError

from .schema import CertificationResponse, GoodsLookupResponse, NewGoodsResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from qeasy.adapters.http_resilience import ClientFactory
    from qeasy.config.qoo10 import Qoo10Config

log = getLogger(__name__)

RETURN_TYPE: Final[str] = "application/json"
CERTIFICATION_METHOD: Final[str] = "CertificationAPI.CreateCertificationKey"
GOODS_LOOKUP_METHOD: Final[str] = "ItemsLookup.GetAllGoodsInfo"
NEW_GOODS_METHOD: Final[str] = "ItemsBasic.SetNewGoods"


class Qoo10Client:
    """Low-level form-POST client; one method per QAPI call.

    Network, HTTP status and payload-shape problems all surface as
    ``TransportFailureError``. Interpreting ``ResultCode`` is left to callers.
    """

    def __init__(
        self,
        *,
        config: Qoo10Config,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def open(self) -> ResilientClient:
        return self._client_factory(self._resilience)

    async def create_certification_key(self) -> CertificationResponse:
        form = {
            "returnType": RETURN_TYPE,
            "user_id": self._config.user_id,
            "pwd": self._config.password,
        }
        async with self.open() as http:
            payload = await self._post(
                http,
                CERTIFICATION_METHOD,
                certification_key=self._config.api_key,
                api_version="1.0",
                form=form,
            )
        return _validate(CertificationResponse, payload, CERTIFICATION_METHOD)

    async def get_goods_page(
        self,
        http: ResilientClient,
        *,
        token: str,
        page: int,
    ) -> GoodsLookupResponse:
        form = {"returnType": RETURN_TYPE, "Page": str(page), "ItemStatus": ""}
        payload = await self._post(
            http,
            GOODS_LOOKUP_METHOD,
            certification_key=token,
            api_version="1.0",
            form=form,
        )
        return _validate(GoodsLookupResponse, payload, GOODS_LOOKUP_METHOD)

    async def set_new_goods(self, *, token: str, form: Mapping[str, str]) -> NewGoodsResponse:
        body = {"returnType": RETURN_TYPE, **form}
        async with self.open() as http:
            payload = await self._post(
                http,
                NEW_GOODS_METHOD,
                certification_key=token,
                api_version="1.1",
                form=body,
            )
        return _validate(NewGoodsResponse, payload, NEW_GOODS_METHOD)

    async def _post(
        self,
        http: ResilientClient,
        method: str,
        *,
        certification_key: str,
        api_version: str,
        form: Mapping[str, str],
    ) -> object:
        base_url = self._resilience.base_url or QOO10_BASE_URL
        headers = {
            "GiosisCertificationKey": certification_key,
            "QAPIVersion": api_version,
        }
        try:
            response = await http.post(
                f"{base_url.rstrip('/')}/{method}",
                data=dict(form),
                headers=headers,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportFailureError(f"Qoo10 {method} HTTP {status}", code=status) from exc
        except httpx.HTTPError as exc:
            raise TransportFailureError(f"Qoo10 {method} request failed: {exc}") from exc
        except ValueError as exc:
            raise TransportFailureError(f"Qoo10 {method} returned invalid JSON") from exc


def _validate[M: BaseModel](model: type[M], payload: object, method: str) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        log.error(f"Unexpected Qoo10 {method} payload: {exc}")
        raise TransportFailureError(f"Unexpected Qoo10 {method} response payload") from exc
