"""Schema helpers for the persisted gallery snapshot."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

from ...config import ALLOWED_MIME_TYPES, SNAPSHOT_SCHEMA_ID

ASSET_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "mime_type"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "mime_type": {"type": "string", "enum": sorted(ALLOWED_MIME_TYPES)},
        "size_bytes": {"type": "integer", "minimum": 0},
        "width": {"type": ["integer", "null"], "minimum": 1},
        "height": {"type": ["integer", "null"], "minimum": 1},
        "data": {"type": "string"},
    },
    "additionalProperties": True,
}

SNAPSHOT_SCHEMA: dict[str, Any] = {
    "$id": "photoshelf/snapshot.schema.json",
    "type": "object",
    "required": ["schema", "assets"],
    "properties": {
        "schema": {"const": SNAPSHOT_SCHEMA_ID},
        "payload_mode": {"type": "string", "enum": ["base64", "metadata"]},
        "assets": {"type": "array", "items": ASSET_SCHEMA},
    },
    "additionalProperties": True,
}

_validator = Draft202012Validator(SNAPSHOT_SCHEMA)


def validate_snapshot(document: dict[str, Any]) -> None:
    """Validate *document* against the snapshot schema.

    Raises:
        jsonschema.ValidationError: on the first violation found.
    """

    _validator.validate(document)


def upgrade_legacy(document: Any) -> Any:
    """Wrap a bare list of descriptors in the current envelope.

    Older writers stored the list directly under the key.
    """

    if isinstance(document, list):
        return {"schema": SNAPSHOT_SCHEMA_ID, "assets": document}
    return document


__all__ = ["ASSET_SCHEMA", "SNAPSHOT_SCHEMA", "upgrade_legacy", "validate_snapshot"]
