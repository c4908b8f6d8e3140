"""Key-value storage and snapshot persistence"""

from __future__ import annotations

from .kv_store import InMemoryKeyValueStore, KeyValueStore, PocketBaseKeyValueStore
from .snapshot_repository import GraphSnapshotRepository

__all__ = [
    "GraphSnapshotRepository",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PocketBaseKeyValueStore",
]
