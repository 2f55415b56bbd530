"""Seller certification key cache for authenticated QAPI calls."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from qeasy.domain.errors import (
    AuthenticationFailedError,
    CredentialsMissingError,
    TransportFailureError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from qeasy.config.qoo10 import Qoo10Config

    from .client import Qoo10Client

log = getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True, frozen=True)
class SessionCredential:
    token: str
    expires_at: int  # epoch ms

    def is_valid(self, now_ms: int) -> bool:
        return bool(self.token) and now_ms < self.expires_at


class SessionStore:
    """Holds at most one credential; an expired credential is dropped on read."""

    def __init__(self) -> None:
        self._credential: SessionCredential | None = None

    @property
    def credential(self) -> SessionCredential | None:
        return self._credential

    def get(self, now_ms: int) -> SessionCredential | None:
        credential = self._credential
        if credential is None:
            return None
        if not credential.is_valid(now_ms):
            self._credential = None
            return None
        return credential

    def put(self, credential: SessionCredential) -> None:
        self._credential = credential

    def invalidate(self) -> None:
        self._credential = None


class SessionManager:
    """Hands out a valid certification key, authenticating only on a cache miss."""

    def __init__(
        self,
        *,
        client: Qoo10Client,
        config: Qoo10Config,
        store: SessionStore | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._client = client
        self._config = config
        self._store = store if store is not None else SessionStore()
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def store(self) -> SessionStore:
        return self._store

    async def get_session(self) -> str:
        cached = self._store.get(self._clock())
        if cached is not None:
            return cached.token

        async with self._lock:
            # Another task may have refreshed while we waited.
            cached = self._store.get(self._clock())
            if cached is not None:
                return cached.token
            credential = await self._authenticate()
            self._store.put(credential)
            return credential.token

    async def _authenticate(self) -> SessionCredential:
        if not self._config.has_credentials:
            raise CredentialsMissingError(
                "QOO10_API_KEY / QOO10_USER_ID / QOO10_USER_PW must all be configured"
            )

        started = self._clock()
        try:
            response = await self._client.create_certification_key()
        except TransportFailureError as exc:
            raise AuthenticationFailedError(
                f"Qoo10 auth failed: {exc.message}", code=exc.code
            ) from exc

        if not response.is_success or not response.result_object:
            raise AuthenticationFailedError(
                f"Qoo10 auth error Code={response.result_code} Msg={response.result_msg}",
                code=response.result_code,
            )

        log.info("Obtained new Qoo10 certification key")
        return SessionCredential(
            token=response.result_object,
            expires_at=started + self._config.session_ttl_seconds * 1000,
        )
