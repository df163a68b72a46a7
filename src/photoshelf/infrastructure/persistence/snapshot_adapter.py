"""Mirror the collection into durable storage and restore it at startup.

Snapshot layout::

    {
      "schema": "photoshelf/snapshot@1",
      "payload_mode": "base64",
      "assets": [
        {"id": "...", "name": "cat.png", "mime_type": "image/png",
         "size_bytes": 1234, "width": 64, "height": 32, "data": "<base64>"}
      ]
    }

With ``payload_mode="base64"`` (the default) image bytes round-trip exactly.
With ``payload_mode="metadata"`` the ``data`` field is omitted; such entries
come back as metadata-only assets that keep their position, name, type and
recorded size but carry no pixels.
"""

from __future__ import annotations

import base64
import binascii
import logging
import uuid
from typing import Any, Iterable, List, Literal, Optional, Sequence

from jsonschema import ValidationError

from ...config import SNAPSHOT_KEY, SNAPSHOT_SCHEMA_ID
from ...domain.models import ImageAsset
from ...domain.repositories import ISnapshotRepository
from ...errors import PersistenceError
from .kv_store import JsonKeyValueStore
from .schema import upgrade_legacy, validate_snapshot

PayloadMode = Literal["base64", "metadata"]

LOGGER = logging.getLogger(__name__)


def asset_to_descriptor(asset: ImageAsset, payload_mode: PayloadMode = "base64") -> dict[str, Any]:
    descriptor: dict[str, Any] = {
        "id": asset.id,
        "name": asset.name,
        "mime_type": asset.mime_type,
        "size_bytes": asset.size_bytes,
        "width": asset.width,
        "height": asset.height,
    }
    if payload_mode == "base64" and asset.has_payload:
        descriptor["data"] = base64.b64encode(asset.data).decode("ascii")
    return descriptor


def descriptor_to_asset(descriptor: dict[str, Any]) -> ImageAsset:
    """Build an asset from a validated descriptor.

    Raises:
        ValueError: the ``data`` field is not valid base64.
    """

    encoded = descriptor.get("data")
    data = b""
    if encoded:
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"invalid payload encoding: {exc}") from exc

    size = len(data) if data else int(descriptor.get("size_bytes") or 0)
    return ImageAsset(
        id=descriptor.get("id") or str(uuid.uuid4()),
        name=descriptor["name"],
        mime_type=descriptor["mime_type"],
        size_bytes=size,
        data=data,
        width=descriptor.get("width"),
        height=descriptor.get("height"),
    )


class SnapshotAdapter(ISnapshotRepository):
    """Read and write the gallery snapshot under a fixed storage key."""

    def __init__(
        self,
        store: JsonKeyValueStore,
        key: str = SNAPSHOT_KEY,
        payload_mode: PayloadMode = "base64",
    ) -> None:
        if payload_mode not in ("base64", "metadata"):
            raise ValueError(f"Unknown payload mode: {payload_mode!r}")
        self._store = store
        self._key = key
        self._payload_mode: PayloadMode = payload_mode
        self._last_error: Optional[str] = None

    @property
    def payload_mode(self) -> PayloadMode:
        return self._payload_mode

    @property
    def last_error(self) -> Optional[str]:
        """Description of the most recent load or save failure, if any."""
        return self._last_error

    def load(self) -> List[ImageAsset]:
        try:
            raw = self._store.get(self._key)
        except PersistenceError as exc:
            return self._load_failed(f"storage unreadable: {exc}")
        if raw is None:
            LOGGER.debug("No snapshot stored under %r", self._key)
            return []

        document = upgrade_legacy(raw)
        try:
            validate_snapshot(document)
        except ValidationError as exc:
            return self._load_failed(f"snapshot rejected by schema: {exc.message}")

        assets: list[ImageAsset] = []
        for position, descriptor in enumerate(document["assets"]):
            try:
                assets.append(descriptor_to_asset(descriptor))
            except ValueError as exc:
                LOGGER.warning("Skipping snapshot entry %d (%s): %s", position, descriptor.get("name"), exc)
        self._last_error = None
        return assets

    def save(self, assets: Sequence[ImageAsset]) -> bool:
        document = self.serialize(assets)
        try:
            self._store.set(self._key, document)
        except PersistenceError as exc:
            self._last_error = str(exc)
            LOGGER.warning("Snapshot save failed: %s", exc)
            return False
        self._last_error = None
        return True

    def serialize(self, assets: Iterable[ImageAsset]) -> dict[str, Any]:
        return {
            "schema": SNAPSHOT_SCHEMA_ID,
            "payload_mode": self._payload_mode,
            "assets": [asset_to_descriptor(asset, self._payload_mode) for asset in assets],
        }

    def _load_failed(self, reason: str) -> List[ImageAsset]:
        self._last_error = reason
        LOGGER.warning("Starting with an empty gallery: %s", reason)
        return []


__all__ = ["PayloadMode", "SnapshotAdapter", "asset_to_descriptor", "descriptor_to_asset"]
