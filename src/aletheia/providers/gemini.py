"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/gemini.py.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ..errors import (
    ConfigurationError,
    InvalidResponseError,
    RetryableUpstreamError,
    UpstreamError,
)
from ..settings import GeminiSettings
from ..types import AnalysisResult, DocumentType, Language
from .prompts import (
    REQUIRED_REPORT_FIELDS,
    build_chat_instruction,
    build_draft_prompt,
    language_instruction,
)

logger = logging.getLogger("aletheia.providers.gemini")


def translate_api_error(error: genai_errors.APIError) -> UpstreamError:
    """Map a Google API error onto the package error taxonomy, keeping its code."""
    code = getattr(error, "code", None)
    status = str(getattr(error, "status", "") or "")
    message = str(error)
    if code == 429 or status.upper() == "RESOURCE_EXHAUSTED":
        return RetryableUpstreamError(message, status_code=429)
    return UpstreamError(message, status_code=code if isinstance(code, int) else None)


def _grounding_chunks(response: Any) -> list[dict[str, Any]]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    out: list[dict[str, Any]] = []
    for chunk in chunks:
        if hasattr(chunk, "model_dump"):
            out.append(chunk.model_dump(mode="json", exclude_none=True))
        elif isinstance(chunk, dict):
            out.append(chunk)
    return out


class GeminiGenerator:
    """
    Structured report generation and document drafting via Gemini.

    Args:
        settings: Model name, thinking budget and tool switches.
        client: A ``google.genai.Client``; built from ``settings.api_key``
            when omitted.
    """

    def __init__(self, settings: GeminiSettings | None = None, *, client: Any = None) -> None:
        self.settings = settings or GeminiSettings.from_env()
        if client is None:
            if not self.settings.api_key:
                raise ConfigurationError("GEMINI_API_KEY (or API_KEY) is not set")
            client = genai.Client(api_key=self.settings.api_key)
        self._client = client

    def default_tools(self) -> list[genai_types.Tool]:
        if not self.settings.use_search_tool:
            return []
        return [genai_types.Tool(google_search=genai_types.GoogleSearch())]

    async def _generate_content(self, contents: str, config: genai_types.GenerateContentConfig) -> Any:
        try:
            return await self._client.aio.models.generate_content(
                model=self.settings.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            raise translate_api_error(e) from e

    async def generate(
        self,
        prompt: str,
        *,
        tools: list[genai_types.Tool] | None = None,
        response_schema: Any = None,
        required_fields: tuple[str, ...] = REQUIRED_REPORT_FIELDS,
    ) -> AnalysisResult:
        """
        Request a JSON report for `prompt` and parse it with its grounding chunks.

        The report body is opaque apart from `required_fields`; a report
        missing any of them is an `InvalidResponseError`.
        """
        config = genai_types.GenerateContentConfig(
            tools=self.default_tools() if tools is None else tools,
            response_mime_type="application/json",
            response_schema=response_schema,
            thinking_config=genai_types.ThinkingConfig(
                thinking_budget=self.settings.thinking_budget
            ),
        )
        response = await self._generate_content(prompt, config)

        text = getattr(response, "text", None)
        if not text:
            raise InvalidResponseError("No response text received from Gemini.")
        try:
            report = json.loads(text)
        except ValueError as e:
            raise InvalidResponseError(f"Gemini returned invalid JSON: {e}") from e
        if not isinstance(report, dict):
            raise InvalidResponseError("Gemini report must be a JSON object")
        missing = [name for name in required_fields if not report.get(name)]
        if missing:
            raise InvalidResponseError(
                f"Gemini report is missing required fields: {', '.join(missing)}"
            )

        return AnalysisResult(report=report, grounding_chunks=_grounding_chunks(response))

    async def draft(
        self,
        report: dict[str, Any],
        doc_type: DocumentType,
        language: Language = "sr",
    ) -> str:
        """Draft a plain-text legal document from an existing report."""
        config = genai_types.GenerateContentConfig(
            system_instruction=(
                "You are an anticorruption legal assistant. Produce a complete, "
                "formal document ready to file. " + language_instruction(language)
            ),
        )
        response = await self._generate_content(
            build_draft_prompt(report, doc_type, language),
            config,
        )
        text = getattr(response, "text", None)
        if not text:
            raise InvalidResponseError("No document text received from Gemini.")
        logger.debug("Drafted %s document (%d chars)", doc_type, len(text))
        return text

    def create_chat(self, report: dict[str, Any], language: Language = "sr") -> Any:
        """Open a follow-up Q&A session seeded with `report` as system instruction."""
        return self._client.aio.chats.create(
            model=self.settings.model,
            config=genai_types.GenerateContentConfig(
                system_instruction=build_chat_instruction(report, language),
            ),
        )

    async def send_chat_message(self, chat: Any, message: str) -> str:
        """Send one user turn on a session from `create_chat` and return the reply text."""
        try:
            response = await chat.send_message(message)
        except genai_errors.APIError as e:
            raise translate_api_error(e) from e
        text = getattr(response, "text", None)
        if not text:
            raise InvalidResponseError("No chat reply received from Gemini.")
        return text
