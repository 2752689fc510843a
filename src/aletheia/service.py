"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Entry points used by the dashboard: cached analysis, document drafting and follow-up chat.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol

from .cache.codecs import PydanticValueCodec
from .cache.factory import create_snapshot_storage
from .cache.store import CacheStore
from .providers.gemini import GeminiGenerator
from .providers.open_data import OpenDataPortal
from .providers.prompts import build_analysis_prompt
from .runtime.contracts import CoalescingPolicy, RetryPolicy
from .runtime.orchestrator import RequestOrchestrator
from .runtime.retry import call_with_retry
from .settings import CacheSettings, GeminiSettings
from .types import AnalysisResult, DataSource, DocumentType, Language, RequestConfig

logger = logging.getLogger("aletheia.service")


class ReportGenerator(Protocol):
    """Upstream calls the service needs; `GeminiGenerator` implements it."""

    async def generate(self, prompt: str, *, response_schema: Any = None) -> AnalysisResult: ...

    async def draft(
        self,
        report: dict[str, Any],
        doc_type: DocumentType,
        language: Language = "sr",
    ) -> str: ...

    def create_chat(self, report: dict[str, Any], language: Language = "sr") -> Any: ...

    async def send_chat_message(self, chat: Any, message: str) -> str: ...


class InvestigationService:
    """Analyze a subject through the response cache and draft follow-up documents."""

    def __init__(
        self,
        store: CacheStore[AnalysisResult],
        generator: ReportGenerator,
        *,
        open_data: OpenDataPortal | None = None,
        retry_policy: RetryPolicy | None = None,
        coalescing_policy: CoalescingPolicy | None = None,
        response_schema: Any = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._generator = generator
        self._response_schema = response_schema
        self._open_data = open_data
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self.orchestrator: RequestOrchestrator[AnalysisResult] = RequestOrchestrator(
            store,
            self._generate,
            retry_policy=self._retry_policy,
            coalescing_policy=coalescing_policy,
            sleep=sleep,
        )

    async def analyze(
        self,
        query: str,
        sources: Iterable[DataSource] = (),
        language: Language = "sr",
    ) -> AnalysisResult:
        config = RequestConfig.from_sources(sources, language)
        return await self.orchestrator.fetch(query, config)

    async def draft(
        self,
        report: dict[str, Any],
        doc_type: DocumentType,
        language: Language = "sr",
    ) -> str:
        """Drafts go through the retry ladder but are never cached."""
        return await call_with_retry(
            lambda: self._generator.draft(report, doc_type, language),
            policy=self._retry_policy,
            sleep=self._sleep,
        )

    def create_chat(self, report: dict[str, Any], language: Language = "sr") -> Any:
        """Start a follow-up Q&A session about an analyzed report."""
        return self._generator.create_chat(report, language)

    async def ask(self, chat: Any, message: str) -> str:
        """Send one follow-up question; rate-limited turns are retried, replies are not cached."""
        return await call_with_retry(
            lambda: self._generator.send_chat_message(chat, message),
            policy=self._retry_policy,
            sleep=self._sleep,
        )

    async def _generate(self, query: str, config: RequestConfig) -> AnalysisResult:
        context = ""
        if self._open_data is not None:
            context = await self._open_data.search(query)
        prompt = build_analysis_prompt(query, config, context)
        logger.debug("Requesting analysis for %r (%s)", query, config.language)
        return await self._generator.generate(prompt, response_schema=self._response_schema)


def create_investigation_service(
    settings: CacheSettings | None = None,
    gemini_settings: GeminiSettings | None = None,
    *,
    generator: ReportGenerator | None = None,
    redis_client: Any | None = None,
) -> InvestigationService:
    """Wire store, generator and retry policy from environment settings."""
    settings = settings or CacheSettings.from_env()
    gemini_settings = gemini_settings or GeminiSettings.from_env()

    store: CacheStore[AnalysisResult] = CacheStore(
        max_size=settings.max_size,
        ttl_s=settings.ttl_s,
        storage=create_snapshot_storage(settings, redis_client=redis_client),
        codec=PydanticValueCodec(AnalysisResult),
    )
    return InvestigationService(
        store,
        generator or GeminiGenerator(gemini_settings),
        open_data=OpenDataPortal() if gemini_settings.open_data_enabled else None,
        retry_policy=RetryPolicy(
            max_attempts=settings.max_attempts,
            initial_delay_s=settings.initial_delay_s,
        ),
        coalescing_policy=CoalescingPolicy(enabled=settings.coalesce_inflight),
    )
