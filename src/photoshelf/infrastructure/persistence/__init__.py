from .kv_store import JsonKeyValueStore, default_storage_path
from .snapshot_adapter import SnapshotAdapter

__all__ = ["JsonKeyValueStore", "SnapshotAdapter", "default_storage_path"]
