"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, CacheStats, SnapshotStorage
from .codecs import JSONValueCodec, PydanticValueCodec, ValueCodec
from .factory import create_snapshot_storage, create_snapshot_storage_from_env
from .keys import build_cache_key, normalize_query, serialize_sources
from .storage import (
    FileSnapshotStorage,
    InMemorySnapshotStorage,
    NullSnapshotStorage,
    RedisSnapshotStorage,
)
from .store import CacheStore

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "SnapshotStorage",
    "ValueCodec",
    "JSONValueCodec",
    "PydanticValueCodec",
    "NullSnapshotStorage",
    "InMemorySnapshotStorage",
    "FileSnapshotStorage",
    "RedisSnapshotStorage",
    "build_cache_key",
    "normalize_query",
    "serialize_sources",
    "create_snapshot_storage",
    "create_snapshot_storage_from_env",
]
