"""Key-value storage collaborators.

The engine persists two values: the graph snapshot and the strategy cache
dictionary. Both go through a KeyValueStore holding JSON-safe values.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

if TYPE_CHECKING:
    from pocketbase import PocketBase

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal storage contract: JSON-safe values addressed by string keys"""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""
        pass


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; values are deep-copied in and out"""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        with self._lock:
            value = self._data.get(key)
            return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so only persistable values are accepted
        encoded = json.loads(json.dumps(value))
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)


class PocketBaseKeyValueStore(KeyValueStore):
    """Store backed by a PocketBase collection with "key" and JSON "value" fields"""

    def __init__(self, pb: PocketBase, collection: str = "kv_store"):
        self.pb = pb
        self.collection = collection

    def _find_record(self, key: str) -> Any | None:
        try:
            return self.pb.collection(self.collection).get_first_list_item(f'key = "{key}"')
        except ClientResponseError as e:
            if getattr(e, "status", None) == 404:
                return None
            logger.error(f"Failed to read key '{key}' from {self.collection}: {e}")
            raise

    def get(self, key: str) -> Any | None:
        record = self._find_record(key)
        if record is None:
            return None
        value = getattr(record, "value", None)
        # JSON fields normally arrive decoded; text fields need decoding here
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def set(self, key: str, value: Any) -> None:
        record = self._find_record(key)
        if record is None:
            self.pb.collection(self.collection).create({"key": key, "value": value})
        else:
            self.pb.collection(self.collection).update(record.id, {"value": value})
        logger.debug(f"Stored key '{key}' in {self.collection}")

    def delete(self, key: str) -> None:
        record = self._find_record(key)
        if record is not None:
            self.pb.collection(self.collection).delete(record.id)
