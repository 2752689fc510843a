"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/orchestrator.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from ..cache.keys import build_cache_key
from ..cache.store import CacheStore
from ..types import RequestConfig
from ..utils import run_sync
from .coalescing import RequestCoalescer
from .contracts import CoalescingPolicy, RetryPolicy
from .retry import call_with_retry, is_retryable as default_is_retryable

T = TypeVar("T")

UpstreamCall = Callable[[str, RequestConfig], Awaitable[T]]

logger = logging.getLogger("aletheia.runtime.orchestrator")

_MISSING = object()


class RequestOrchestrator(Generic[T]):
    """
    Cache-first facade in front of the external generation call.

    A hit returns a copy of the cached value without touching the network.
    A miss calls `generate` through the retry policy and caches only
    successful results; failures propagate and leave the cache unchanged.
    """

    def __init__(
        self,
        store: CacheStore[T],
        generate: UpstreamCall[T],
        *,
        retry_policy: RetryPolicy | None = None,
        coalescing_policy: CoalescingPolicy | None = None,
        is_retryable: Callable[[BaseException], bool] = default_is_retryable,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._generate = generate
        self._retry_policy = retry_policy or RetryPolicy()
        self._coalescing_policy = coalescing_policy or CoalescingPolicy()
        self._is_retryable = is_retryable
        self._sleep = sleep
        self._coalescer = RequestCoalescer()

    @property
    def store(self) -> CacheStore[T]:
        return self._store

    @staticmethod
    def cache_key(query: str, config: RequestConfig) -> str:
        return build_cache_key(query, config.language, config.active_source_ids)

    async def fetch(self, query: str, config: RequestConfig) -> T:
        key = self.cache_key(query, config)

        cached = self._store.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug("Serving from cache: %s", key)
            return cached

        if self._coalescing_policy.enabled:
            return await self._coalescer.run(key, lambda: self._call_and_store(key, query, config))
        return await self._call_and_store(key, query, config)

    def fetch_sync(self, query: str, config: RequestConfig) -> T:
        """Synchronous wrapper around `fetch`."""
        return run_sync(self.fetch(query, config))

    def clear(self) -> None:
        self._store.clear()

    async def _call_and_store(self, key: str, query: str, config: RequestConfig) -> T:
        result = await call_with_retry(
            lambda: self._generate(query, config),
            policy=self._retry_policy,
            is_retryable=self._is_retryable,
            sleep=self._sleep,
        )
        self._store.set(key, result)
        return result
