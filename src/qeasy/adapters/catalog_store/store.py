"""JSON document store for the local catalog and settings."""

from __future__ import annotations

import os
import tempfile
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import ITEMS_ADAPTER, SETTINGS_ADAPTER
from .translator import to_catalog_item, to_document

if TYPE_CHECKING:
    from pathlib import Path

    from qeasy.config.storage import StorageConfig
    from qeasy.domain.types import CatalogItem

log = getLogger(__name__)


class CatalogStoreError(RuntimeError):
    """Raised when a stored document exists but cannot be read."""


class JsonCatalogStore:
    """Whole-document load/save; each save atomically replaces the file."""

    def __init__(self, *, config: StorageConfig) -> None:
        self._config = config

    @property
    def items_path(self) -> Path:
        return self._config.items_path()

    @property
    def settings_path(self) -> Path:
        return self._config.settings_path()

    def load_items(self) -> list[CatalogItem]:
        raw = _read_bytes(self.items_path)
        if raw is None:
            return []
        try:
            documents = ITEMS_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise CatalogStoreError(f"Invalid catalog document {self.items_path}: {exc}") from exc
        return [to_catalog_item(document) for document in documents]

    def save_items(self, items: list[CatalogItem]) -> None:
        documents = [to_document(item) for item in items]
        payload = ITEMS_ADAPTER.dump_json(documents, by_alias=True, exclude_none=True, indent=2)
        _atomic_write(self.items_path, payload)
        log.info("Saved %d catalog items to %s", len(documents), self.items_path)

    def load_settings(self) -> dict[str, object]:
        raw = _read_bytes(self.settings_path)
        if raw is None:
            return {}
        try:
            return SETTINGS_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise CatalogStoreError(
                f"Invalid settings document {self.settings_path}: {exc}"
            ) from exc

    def save_settings(self, settings: dict[str, object]) -> None:
        _atomic_write(self.settings_path, SETTINGS_ADAPTER.dump_json(settings, indent=2))


def _read_bytes(path: Path) -> bytes | None:
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return None
    if not raw.strip():
        return None
    return raw


def _atomic_write(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise
