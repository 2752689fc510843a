"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """One cached value with the clock reading at which it was inserted."""

    value: T
    inserted_at_s: float


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Counters describing cache activity since construction."""

    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int
    expirations: int


class SnapshotStorage(Protocol):
    """Single durable slot holding the serialized cache snapshot."""

    backend_id: str

    def read(self) -> str | None: ...

    def write(self, blob: str) -> None: ...

    def delete(self) -> None: ...
