from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from aletheia.errors import (
    ConfigurationError,
    InvalidResponseError,
    RetryableUpstreamError,
    UpstreamError,
)
from aletheia.providers import GeminiGenerator, translate_api_error
from aletheia.runtime import is_retryable
from aletheia.settings import GeminiSettings


def run_async(coro):
    return asyncio.run(coro)


class _FakeModels:
    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[dict] = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class _FakeChat:
    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.messages: list[str] = []

    async def send_message(self, message):
        self.messages.append(message)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class _FakeChats:
    def __init__(self, outcomes) -> None:
        self.outcomes = outcomes
        self.created: list[dict] = []

    def create(self, *, model, config):
        self.created.append({"model": model, "config": config})
        return _FakeChat(self.outcomes)


def _client(outcomes, chat_outcomes=()):
    models = _FakeModels(outcomes)
    chats = _FakeChats(chat_outcomes)
    client = SimpleNamespace(aio=SimpleNamespace(models=models, chats=chats))
    return client, models


def _response(text, chunks=()):
    return SimpleNamespace(
        text=text,
        candidates=[
            SimpleNamespace(
                grounding_metadata=SimpleNamespace(grounding_chunks=list(chunks))
            )
        ],
    )


def _settings(**overrides):
    return GeminiSettings(api_key="test-key", **overrides)


def test_generate_parses_report_and_grounding_chunks():
    chunk = genai_types.GroundingChunk(
        web=genai_types.GroundingChunkWeb(uri="https://istinomer.rs/a", title="Istinomer")
    )
    payload = '{"target": "Jane", "summary": "No red flags", "riskScore": 12}'
    client, models = _client([_response(payload, [chunk])])
    generator = GeminiGenerator(_settings(thinking_budget=128), client=client)

    result = run_async(generator.generate("analyze Jane"))

    assert result.report == {"target": "Jane", "summary": "No red flags", "riskScore": 12}
    assert result.grounding_chunks == [
        {"web": {"uri": "https://istinomer.rs/a", "title": "Istinomer"}}
    ]
    call = models.calls[0]
    assert call["model"] == "gemini-3-pro-preview"
    assert call["contents"] == "analyze Jane"
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].thinking_config.thinking_budget == 128
    assert call["config"].tools[0].google_search is not None


def test_generate_without_search_tool():
    client, models = _client([_response('{"target": "q", "summary": "s"}')])
    generator = GeminiGenerator(_settings(use_search_tool=False), client=client)
    result = run_async(generator.generate("q"))
    assert result.report == {"target": "q", "summary": "s"}
    assert not models.calls[0]["config"].tools


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]"])
def test_generate_rejects_empty_or_malformed_payload(text):
    client, _ = _client([_response(text)])
    generator = GeminiGenerator(_settings(), client=client)
    with pytest.raises(InvalidResponseError) as exc_info:
        run_async(generator.generate("q"))
    assert not is_retryable(exc_info.value)


def test_rate_limit_api_error_becomes_retryable():
    api_error = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Quota hit", "status": "RESOURCE_EXHAUSTED"}},
    )
    client, _ = _client([api_error])
    generator = GeminiGenerator(_settings(), client=client)

    with pytest.raises(RetryableUpstreamError) as exc_info:
        run_async(generator.generate("q"))

    assert exc_info.value.status_code == 429
    assert exc_info.value.__cause__ is api_error
    assert is_retryable(exc_info.value)


def test_other_api_errors_stay_terminal():
    api_error = genai_errors.ClientError(
        400,
        {"error": {"code": 400, "message": "Bad schema", "status": "INVALID_ARGUMENT"}},
    )
    translated = translate_api_error(api_error)
    assert type(translated) is UpstreamError
    assert translated.status_code == 400
    assert not is_retryable(translated)


def test_draft_returns_text_and_mentions_document_type():
    client, models = _client([_response("Dear Sir or Madam, ...")])
    generator = GeminiGenerator(_settings(), client=client)

    text = run_async(generator.draft({"target": "Jane"}, "foi", "en"))

    assert text.startswith("Dear")
    prompt = models.calls[0]["contents"]
    assert "Freedom of Information request" in prompt
    assert "Jane" in prompt
    assert "English" in models.calls[0]["config"].system_instruction


def test_draft_rejects_empty_text():
    client, _ = _client([_response("")])
    generator = GeminiGenerator(_settings(), client=client)
    with pytest.raises(InvalidResponseError):
        run_async(generator.draft({"target": "Jane"}, "complaint"))


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        GeminiGenerator(GeminiSettings(api_key=None))


@pytest.mark.parametrize(
    "text",
    ['{"riskScore": 3}', '{"target": "Jane"}', '{"target": "", "summary": "x"}'],
)
def test_generate_rejects_report_missing_required_fields(text):
    client, _ = _client([_response(text)])
    generator = GeminiGenerator(_settings(), client=client)
    with pytest.raises(InvalidResponseError, match="missing required fields"):
        run_async(generator.generate("q"))


def test_generate_passes_response_schema_and_prompt_contract():
    schema = {
        "type": "OBJECT",
        "properties": {"target": {"type": "STRING"}, "summary": {"type": "STRING"}},
        "required": ["target", "summary"],
    }
    client, models = _client([_response('{"target": "Jane", "summary": "ok"}')])
    generator = GeminiGenerator(_settings(), client=client)

    run_async(generator.generate("q", response_schema=schema))

    assert models.calls[0]["config"].response_schema is not None


def test_create_chat_seeds_report_as_system_instruction():
    client, _ = _client([], [_response("Two contracts were flagged.")])
    generator = GeminiGenerator(_settings(), client=client)
    report = {"target": "Jane Doe", "summary": "Procurement links", "riskScore": 71}

    chat = generator.create_chat(report, "en")
    reply = run_async(generator.send_chat_message(chat, "Which contracts?"))

    assert reply == "Two contracts were flagged."
    assert chat.messages == ["Which contracts?"]
    created = client.aio.chats.created[0]
    assert created["model"] == "gemini-3-pro-preview"
    instruction = created["config"].system_instruction
    assert "Jane Doe" in instruction
    assert '"riskScore": 71' in instruction
    assert "Reply in English." in instruction


def test_chat_defaults_to_serbian_latin():
    client, _ = _client([])
    generator = GeminiGenerator(_settings(), client=client)
    generator.create_chat({"target": "Jane", "summary": "s"})
    instruction = client.aio.chats.created[0]["config"].system_instruction
    assert "Serbian (Latin script)" in instruction


def test_chat_reply_errors_are_translated():
    api_error = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Quota hit", "status": "RESOURCE_EXHAUSTED"}},
    )
    client, _ = _client([], [api_error, _response("")])
    generator = GeminiGenerator(_settings(), client=client)
    chat = generator.create_chat({"target": "Jane", "summary": "s"}, "en")

    with pytest.raises(RetryableUpstreamError):
        run_async(generator.send_chat_message(chat, "first"))
    with pytest.raises(InvalidResponseError):
        run_async(generator.send_chat_message(chat, "second"))
