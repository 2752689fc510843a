"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting snapshot storage from settings.
"""

from __future__ import annotations

from typing import Any

from ..errors import ConfigurationError
from ..settings import CacheSettings
from .base import SnapshotStorage
from .storage import FileSnapshotStorage, InMemorySnapshotStorage, NullSnapshotStorage


def create_snapshot_storage(
    settings: CacheSettings,
    *,
    redis_client: Any | None = None,
) -> SnapshotStorage:
    """
    Create the snapshot slot named by `settings.storage_backend`.

    Backends:
    - `none`: persistence disabled
    - `memory`: process-local slot
    - `file` (default): JSON file at `settings.storage_path`
    - `redis`: string key `settings.storage_key`

    Redis resolution uses the provided `redis_client` when supplied,
    otherwise builds a synchronous client from `settings.redis_url`.
    """
    backend = settings.storage_backend

    if backend == "none":
        return NullSnapshotStorage()

    if backend == "memory":
        return InMemorySnapshotStorage()

    if backend == "file":
        return FileSnapshotStorage(settings.storage_path)

    if backend == "redis":
        from .storage import RedisSnapshotStorage

        client = redis_client
        if client is None:
            if not settings.redis_url:
                raise ConfigurationError(
                    "Redis snapshot storage requires ALETHEIA_CACHE_REDIS_URL."
                )
            try:
                import redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise ConfigurationError(
                    "Redis snapshot storage requires `redis` to be installed."
                ) from exc
            client = redis.Redis.from_url(settings.redis_url)
        return RedisSnapshotStorage(client, key=settings.storage_key)

    raise ConfigurationError(f"Unknown snapshot storage backend '{backend}'")


def create_snapshot_storage_from_env(*, redis_client: Any | None = None) -> SnapshotStorage:
    """Create snapshot storage from `ALETHEIA_CACHE_*` environment variables."""
    return create_snapshot_storage(CacheSettings.from_env(), redis_client=redis_client)
