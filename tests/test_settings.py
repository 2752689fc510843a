from __future__ import annotations

import pytest

from aletheia.errors import ConfigurationError
from aletheia.settings import CacheSettings, GeminiSettings
from aletheia.utils import backoff_delay, now_ms


def test_cache_settings_from_env(monkeypatch):
    monkeypatch.setenv("ALETHEIA_CACHE_MAX_SIZE", "25")
    monkeypatch.setenv("ALETHEIA_CACHE_TTL_S", "86400")
    monkeypatch.setenv("ALETHEIA_CACHE_BACKEND", " Memory ")
    monkeypatch.setenv("ALETHEIA_RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("ALETHEIA_RETRY_INITIAL_DELAY_S", "0.5")
    monkeypatch.setenv("ALETHEIA_CACHE_COALESCE", "yes")

    settings = CacheSettings.from_env()

    assert settings.max_size == 25
    assert settings.ttl_s == 86400.0
    assert settings.storage_backend == "memory"
    assert settings.max_attempts == 5
    assert settings.initial_delay_s == 0.5
    assert settings.coalesce_inflight is True


def test_cache_settings_defaults(monkeypatch):
    for name in (
        "ALETHEIA_CACHE_MAX_SIZE",
        "ALETHEIA_CACHE_TTL_S",
        "ALETHEIA_CACHE_BACKEND",
        "ALETHEIA_CACHE_COALESCE",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = CacheSettings.from_env()
    assert settings.max_size == 50
    assert settings.ttl_s == 3600.0
    assert settings.storage_backend == "file"
    assert settings.coalesce_inflight is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_size": 0},
        {"ttl_s": 0},
        {"max_attempts": 0},
        {"initial_delay_s": -1},
        {"storage_backend": "localstorage"},
    ],
)
def test_invalid_cache_settings(kwargs):
    with pytest.raises(ConfigurationError):
        CacheSettings(**kwargs)


def test_gemini_settings_fall_back_to_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy")
    monkeypatch.setenv("GEMINI_USE_SEARCH_TOOL", "false")
    settings = GeminiSettings.from_env()
    assert settings.api_key == "legacy"
    assert settings.use_search_tool is False


def test_backoff_and_timestamp_helpers():
    assert [backoff_delay(i, 1.0) for i in range(3)] == [1.0, 2.0, 4.0]
    assert backoff_delay(1, 0.5, factor=3.0) == 1.5
    assert now_ms(1_700_000_000.123) == 1_700_000_000_123
