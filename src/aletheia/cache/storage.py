"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Snapshot storage backends: one named slot per cache.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import PersistenceError
from .base import SnapshotStorage


class NullSnapshotStorage(SnapshotStorage):
    """Storage that never remembers anything (persistence disabled)."""

    backend_id = "none"

    def read(self) -> str | None:
        return None

    def write(self, blob: str) -> None:
        _ = blob

    def delete(self) -> None:
        return None


class InMemorySnapshotStorage(SnapshotStorage):
    """Process-local slot; survives store re-creation, not process exit."""

    backend_id = "memory"

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob
        self.writes = 0

    def read(self) -> str | None:
        return self.blob

    def write(self, blob: str) -> None:
        self.blob = blob
        self.writes += 1

    def delete(self) -> None:
        self.blob = None


class FileSnapshotStorage(SnapshotStorage):
    """JSON file slot written with an atomic replace."""

    backend_id = "file"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read snapshot '{self._path}': {e}") from e

    def write(self, blob: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(blob)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write snapshot '{self._path}': {e}") from e

    def delete(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete snapshot '{self._path}': {e}") from e


class RedisSnapshotStorage(SnapshotStorage):
    """
    Snapshot slot stored under one Redis string key.

    Expects a synchronous ``redis.Redis`` client (``pip install redis``);
    the cache store never suspends, so the async client is not used here.
    """

    backend_id = "redis"

    def __init__(self, redis: Any, *, key: str = "aletheia_analysis_cache") -> None:
        self._redis = redis
        self._key = key

    def read(self) -> str | None:
        try:
            blob = self._redis.get(self._key)
        except Exception as e:  # noqa: BLE001
            raise PersistenceError(f"Failed to read snapshot key '{self._key}': {e}") from e
        if blob is None:
            return None
        if isinstance(blob, bytes):
            return blob.decode("utf-8")
        return str(blob)

    def write(self, blob: str) -> None:
        try:
            self._redis.set(self._key, blob)
        except Exception as e:  # noqa: BLE001
            raise PersistenceError(f"Failed to write snapshot key '{self._key}': {e}") from e

    def delete(self) -> None:
        try:
            self._redis.delete(self._key)
        except Exception as e:  # noqa: BLE001
            raise PersistenceError(f"Failed to delete snapshot key '{self._key}': {e}") from e
