"""A durable key/value slot backed by a single JSON file."""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from ...config import STORAGE_DIR_NAME, STORAGE_ENV_VAR, STORAGE_FILE_NAME
from ...errors import SnapshotLoadError, SnapshotSaveError
from ...utils.jsonio import read_json, write_json

LOGGER = logging.getLogger(__name__)


def default_storage_path() -> Path:
    """Return the storage file location for the current platform.

    ``$PHOTOSHELF_STORAGE`` wins when set.
    """

    override = os.environ.get(STORAGE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / STORAGE_DIR_NAME / STORAGE_FILE_NAME
        return Path.home() / "AppData" / "Roaming" / STORAGE_DIR_NAME / STORAGE_FILE_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / STORAGE_DIR_NAME / STORAGE_FILE_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / STORAGE_DIR_NAME / STORAGE_FILE_NAME
    return Path.home() / ".config" / STORAGE_DIR_NAME / STORAGE_FILE_NAME


class JsonKeyValueStore:
    """Persist JSON values under string keys in one file.

    Every :meth:`set` rewrites the whole file atomically.  The file is read
    lazily on first access and cached afterwards; this process is assumed to
    be the only writer.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._data: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = default_storage_path()
        return self._path

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value stored under *key*.

        Raises:
            SnapshotLoadError: the storage file exists but cannot be parsed.
        """

        data = self._ensure_loaded()
        if key not in data:
            return default
        return deepcopy(data[key])

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and flush the file.

        Raises:
            SnapshotSaveError: the value is not JSON-serialisable or the file
                cannot be written.  The cached state is left as it was.
        """

        try:
            current = self._ensure_loaded()
        except SnapshotLoadError as exc:
            LOGGER.warning("Discarding unreadable storage file %s: %s", self.path, exc)
            current = {}
        updated = dict(current)
        updated[key] = value
        self._write(updated)
        self._data = updated

    def remove(self, key: str) -> None:
        current = self._ensure_loaded()
        if key not in current:
            return
        updated = dict(current)
        del updated[key]
        self._write(updated)
        self._data = updated

    def keys(self) -> list[str]:
        return list(self._ensure_loaded())

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        path = self.path
        if not path.exists():
            self._data = {}
            return self._data
        try:
            payload = read_json(path)
        except (OSError, ValueError) as exc:
            raise SnapshotLoadError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise SnapshotLoadError(f"{path} does not contain a JSON object")
        self._data = payload
        return self._data

    def _write(self, payload: dict[str, Any]) -> None:
        try:
            write_json(self.path, payload)
        except (OSError, TypeError, ValueError) as exc:
            raise SnapshotSaveError(f"Cannot write {self.path}: {exc}") from exc


__all__ = ["JsonKeyValueStore", "default_storage_path"]
