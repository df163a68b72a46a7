"""Default configuration values for PhotoShelf."""

from __future__ import annotations

from typing import Final

# Admission rules.  Only the two raster formats the shelf can re-encode after a
# rotation are accepted; size is checked against the candidate's byte count,
# not its decoded dimensions.
MIME_PNG: Final[str] = "image/png"
MIME_JPEG: Final[str] = "image/jpeg"
ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset({MIME_PNG, MIME_JPEG})
MAX_ASSET_BYTES: Final[int] = 500 * 1024
MAX_COLLECTION_SIZE: Final[int] = 5

# Pillow format names used when re-encoding a rotated asset.
PIL_FORMATS: Final[dict[str, str]] = {MIME_PNG: "PNG", MIME_JPEG: "JPEG"}
JPEG_QUALITY: Final[int] = 92

# ---------------------------------------------------------------------------
# Durable storage
# ---------------------------------------------------------------------------

SNAPSHOT_KEY: Final[str] = "uploaded_images"
SNAPSHOT_SCHEMA_ID: Final[str] = "photoshelf/snapshot@1"
STORAGE_ENV_VAR: Final[str] = "PHOTOSHELF_STORAGE"
STORAGE_DIR_NAME: Final[str] = "PhotoShelf"
STORAGE_FILE_NAME: Final[str] = "storage.json"

# ---------------------------------------------------------------------------
# UI interaction constants
# ---------------------------------------------------------------------------

NOTIFICATION_TIMEOUT_MS: Final[int] = 3000

MSG_FORMAT_REJECTED: Final[str] = "Only JPG and PNG files under 500KB are allowed."
MSG_CAPACITY_EXCEEDED: Final[str] = (
    f"You can only upload up to {MAX_COLLECTION_SIZE} images."
)
MSG_UPLOADED: Final[str] = "{count} images uploaded successfully."
MSG_DELETED: Final[str] = "Image deleted successfully."
MSG_ROTATED: Final[str] = "Image rotated {direction}."
