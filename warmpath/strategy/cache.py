"""Persistent strategy cache keyed by target actor id.

All entries live in one dictionary under a single storage key, so every
write is a read-modify-write of that dictionary. The lock keeps concurrent
writers from dropping each other's entries.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import ConfigLoader
from ..errors import InvalidCacheEntryError
from ..storage.kv_store import KeyValueStore
from .models import ConnectionStrategy, dump_strategy, parse_strategy

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheEntry(BaseModel):
    """A cached strategy and when it was computed (epoch milliseconds)"""

    model_config = ConfigDict(frozen=True)

    strategy: ConnectionStrategy
    timestamp: int = Field(ge=0)


class StrategyCache:
    """TTL cache of connection strategies backed by a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_hours: float | None = None,
        storage_key: str | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """Initialize the cache.

        Args:
            store: Backend holding the entry dictionary
            ttl_hours: Entry lifetime (default from cache.ttl_hours, 24h)
            storage_key: Key of the entry dictionary (default from cache.storage_key)
            clock: Callable returning the current epoch time in milliseconds
        """
        if ttl_hours is None or storage_key is None:
            config = ConfigLoader.get_instance()
            ttl_hours = ttl_hours if ttl_hours is not None else config.get_float("cache.ttl_hours")
            storage_key = storage_key or config.get_str("cache.storage_key")

        self._store = store
        self._ttl_ms = int(ttl_hours * MS_PER_HOUR)
        self.storage_key = storage_key
        self._clock = clock or _now_ms
        self._lock = threading.RLock()
        self._hit_count = 0
        self._miss_count = 0
        self._expired_count = 0
        self._invalid_count = 0

        logger.debug(f"StrategyCache initialized with TTL={ttl_hours}h, key='{storage_key}'")

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def _read_all(self) -> dict[str, Any]:
        entries = self._store.get(self.storage_key)
        if entries is None:
            return {}
        if not isinstance(entries, dict):
            logger.warning(f"Cache payload under '{self.storage_key}' is not an object, resetting")
            return {}
        return entries

    def _write_all(self, entries: dict[str, Any]) -> None:
        self._store.set(self.storage_key, entries)

    def _parse_entry(self, target_id: str, raw: Any) -> CacheEntry:
        """Validate one raw entry.

        Raises:
            InvalidCacheEntryError: If the entry is malformed or carries no strategy
        """
        if not isinstance(raw, dict):
            raise InvalidCacheEntryError(target_id, "entry is not an object")
        strategy = raw.get("strategy")
        if not isinstance(strategy, dict):
            raise InvalidCacheEntryError(target_id, "missing strategy")
        if strategy.get("type") == "none":
            raise InvalidCacheEntryError(target_id, "strategy type 'none'")
        try:
            return CacheEntry(strategy=parse_strategy(strategy), timestamp=raw.get("timestamp"))
        except ValidationError as e:
            raise InvalidCacheEntryError(target_id, f"{e.error_count()} validation errors") from e

    def _is_fresh(self, entry: CacheEntry, now: int) -> bool:
        return now - entry.timestamp < self._ttl_ms

    def get(self, target_id: str) -> ConnectionStrategy | None:
        """Cached strategy for the target, or None on a miss.

        Expired and invalid entries are removed as a side effect.
        """
        with self._lock:
            entries = self._read_all()
            raw = entries.get(target_id)
            if raw is None:
                self._miss_count += 1
                logger.debug(f"Cache miss for {target_id}")
                return None

            try:
                entry = self._parse_entry(target_id, raw)
            except InvalidCacheEntryError as e:
                logger.warning(f"Dropping cache entry: {e}")
                del entries[target_id]
                self._write_all(entries)
                self._invalid_count += 1
                self._miss_count += 1
                return None

            if not self._is_fresh(entry, self._clock()):
                logger.debug(f"Cache expired for {target_id}")
                del entries[target_id]
                self._write_all(entries)
                self._expired_count += 1
                self._miss_count += 1
                return None

            self._hit_count += 1
            logger.debug(f"Cache hit for {target_id} ({entry.strategy.type})")
            return entry.strategy

    def set(self, target_id: str, strategy: ConnectionStrategy) -> None:
        """Store a strategy for the target, overwriting any previous entry."""
        entry = {"strategy": dump_strategy(strategy), "timestamp": self._clock()}
        with self._lock:
            entries = self._read_all()
            entries[target_id] = entry
            self._write_all(entries)
        logger.debug(f"Cached {strategy.type} strategy for {target_id}")

    def invalidate(self, target_id: str) -> bool:
        """Remove the entry for one target.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            entries = self._read_all()
            if target_id not in entries:
                return False
            del entries[target_id]
            self._write_all(entries)
        logger.info(f"Invalidated cached strategy for {target_id}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._store.delete(self.storage_key)
        logger.info("Strategy cache cleared")

    def purge_expired(self) -> int:
        """Remove every expired or invalid entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            entries = self._read_all()
            now = self._clock()
            stale: list[str] = []
            for target_id, raw in entries.items():
                try:
                    entry = self._parse_entry(target_id, raw)
                except InvalidCacheEntryError as e:
                    logger.warning(f"Dropping cache entry: {e}")
                    self._invalid_count += 1
                    stale.append(target_id)
                    continue
                if not self._is_fresh(entry, now):
                    self._expired_count += 1
                    stale.append(target_id)

            for target_id in stale:
                del entries[target_id]
            if stale:
                self._write_all(entries)
                logger.info(f"Purged {len(stale)} stale cache entries")
            return len(stale)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            total_requests = self._hit_count + self._miss_count
            hit_rate = self._hit_count / total_requests if total_requests > 0 else 0
            return {
                "entries": len(self._read_all()),
                "ttl_hours": self._ttl_ms / MS_PER_HOUR,
                "hit_count": self._hit_count,
                "miss_count": self._miss_count,
                "expired_count": self._expired_count,
                "invalid_count": self._invalid_count,
                "hit_rate": hit_rate,
                "total_requests": total_requests,
            }
