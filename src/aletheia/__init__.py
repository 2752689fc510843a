"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .cache import (
    CacheStore,
    FileSnapshotStorage,
    InMemorySnapshotStorage,
    JSONValueCodec,
    NullSnapshotStorage,
    PydanticValueCodec,
    RedisSnapshotStorage,
    build_cache_key,
    create_snapshot_storage,
)
from .errors import (
    AletheiaError,
    ConfigurationError,
    InvalidResponseError,
    PersistenceError,
    RetryableUpstreamError,
    UpstreamError,
)
from .runtime import (
    CoalescingPolicy,
    RequestOrchestrator,
    RetryPolicy,
    call_with_retry,
    is_retryable,
)
from .service import InvestigationService, create_investigation_service
from .settings import CacheSettings, GeminiSettings
from .types import AnalysisResult, DataSource, RequestConfig

__all__ = [
    "AletheiaError",
    "AnalysisResult",
    "CacheSettings",
    "CacheStore",
    "CoalescingPolicy",
    "ConfigurationError",
    "DataSource",
    "FileSnapshotStorage",
    "GeminiSettings",
    "InMemorySnapshotStorage",
    "InvalidResponseError",
    "InvestigationService",
    "JSONValueCodec",
    "NullSnapshotStorage",
    "PersistenceError",
    "PydanticValueCodec",
    "RedisSnapshotStorage",
    "RequestConfig",
    "RequestOrchestrator",
    "RetryPolicy",
    "RetryableUpstreamError",
    "UpstreamError",
    "build_cache_key",
    "call_with_retry",
    "create_investigation_service",
    "create_snapshot_storage",
    "is_retryable",
]
