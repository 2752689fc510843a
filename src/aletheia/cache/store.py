"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bounded, TTL-expiring LRU store with best-effort snapshot persistence.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ..errors import ConfigurationError
from ..utils import now_ms
from .base import CacheEntry, CacheStats, SnapshotStorage
from .codecs import JSONValueCodec, ValueCodec
from .storage import NullSnapshotStorage

logger = logging.getLogger("aletheia.cache.store")

T = TypeVar("T")


class CacheStore(Generic[T]):
    """
    LRU cache keyed by string with lazy TTL expiry.

    The first entry of the internal ordered map is the least recently used
    one; ``get`` hits and ``set`` calls move a key to the end. Every call
    holds one lock for its whole duration, snapshot write included.

    Args:
        max_size: Maximum number of entries kept after any ``set``.
        ttl_s: Entry lifetime in seconds, measured from insertion.
        storage: Durable snapshot slot. Defaults to no persistence.
        codec: Converts values to JSON for the snapshot and copies them
            on the way in and out.
        clock: Returns the current epoch time in seconds.
    """

    def __init__(
        self,
        *,
        max_size: int = 50,
        ttl_s: float = 3600.0,
        storage: SnapshotStorage | None = None,
        codec: ValueCodec[T] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_size < 1:
            raise ConfigurationError("max_size must be at least 1")
        if ttl_s <= 0:
            raise ConfigurationError("ttl_s must be positive")
        self._max_size = max_size
        self._ttl_s = float(ttl_s)
        self._storage = storage or NullSnapshotStorage()
        self._codec = codec or JSONValueCodec()
        self._clock = clock
        self._rows: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

        self._load()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_s(self) -> float:
        return self._ttl_s

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            row = self._rows.get(key)  # type: ignore[arg-type]
            return row is not None and not self._is_expired(row, self._clock())

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._rows.keys())

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the live value, or `default` on a miss or expiry."""
        with self._lock:
            row = self._rows.get(key)
            if row is None:
                self._misses += 1
                logger.debug("Cache miss: %s", key)
                return default
            if self._is_expired(row, self._clock()):
                del self._rows[key]
                self._expirations += 1
                self._misses += 1
                logger.debug("Cache entry expired: %s", key)
                self._persist()
                return default
            self._rows.move_to_end(key)
            self._hits += 1
            logger.debug("Cache hit: %s", key)
            return self._codec.copy(row.value)

    def set(self, key: str, value: T) -> None:
        with self._lock:
            if key in self._rows:
                del self._rows[key]
            elif len(self._rows) >= self._max_size:
                evicted, _ = self._rows.popitem(last=False)
                self._evictions += 1
                logger.debug("Cache evicted least recently used entry: %s", evicted)
            self._rows[key] = CacheEntry(
                value=self._codec.copy(value),
                inserted_at_s=self._clock(),
            )
            self._persist()

    def delete(self, key: str) -> bool:
        """Remove one key; returns whether it was present."""
        with self._lock:
            if self._rows.pop(key, None) is None:
                return False
            self._persist()
            return True

    def purge_expired(self) -> int:
        """Drop every expired entry now instead of waiting for a read."""
        with self._lock:
            now = self._clock()
            stale = [key for key, row in self._rows.items() if self._is_expired(row, now)]
            for key in stale:
                del self._rows[key]
            if stale:
                self._expirations += len(stale)
                self._persist()
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()
            try:
                self._storage.delete()
            except Exception:  # noqa: BLE001
                logger.warning(
                    "Failed to remove cache snapshot from %s storage",
                    self._storage.backend_id,
                    exc_info=True,
                )
            logger.info("Cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._rows),
                max_size=self._max_size,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def _is_expired(self, row: CacheEntry[T], now: float) -> bool:
        return now - row.inserted_at_s > self._ttl_s

    def _snapshot(self) -> list[list[Any]]:
        return [
            [
                key,
                {
                    "data": self._codec.encode(row.value),
                    "timestamp": now_ms(row.inserted_at_s),
                },
            ]
            for key, row in self._rows.items()
        ]

    def _persist(self) -> None:
        """Write the full snapshot; failures are logged and swallowed."""
        try:
            blob = json.dumps(self._snapshot(), ensure_ascii=False)
            self._storage.write(blob)
        except Exception:  # noqa: BLE001
            logger.warning(
                "Failed to persist cache snapshot to %s storage",
                self._storage.backend_id,
                exc_info=True,
            )

    def _load(self) -> None:
        try:
            blob = self._storage.read()
        except Exception:  # noqa: BLE001
            logger.warning(
                "Failed to read cache snapshot from %s storage",
                self._storage.backend_id,
                exc_info=True,
            )
            return
        if not blob:
            return

        try:
            pairs = json.loads(blob)
        except ValueError:
            logger.warning("Ignoring unparsable cache snapshot", exc_info=True)
            return
        if not isinstance(pairs, list):
            logger.warning("Ignoring cache snapshot with unexpected layout")
            return

        now = self._clock()
        kept = 0
        dropped = 0
        for pair in pairs:
            try:
                key, row = pair
                inserted_at_s = float(row["timestamp"]) / 1000.0
                entry = CacheEntry(
                    value=self._codec.decode(row["data"]),
                    inserted_at_s=inserted_at_s,
                )
            except Exception:  # noqa: BLE001
                dropped += 1
                continue
            if not isinstance(key, str) or self._is_expired(entry, now):
                dropped += 1
                continue
            self._rows.pop(key, None)
            self._rows[key] = entry
            kept += 1

        while len(self._rows) > self._max_size:
            self._rows.popitem(last=False)
            kept -= 1
            dropped += 1

        logger.info(
            "Loaded cache snapshot from %s storage: kept=%d dropped=%d",
            self._storage.backend_id,
            kept,
            dropped,
        )
