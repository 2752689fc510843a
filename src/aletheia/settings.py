"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache, retry and provider settings with explicit environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError

_STORAGE_BACKENDS = ("none", "memory", "file", "redis")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Settings for the response cache and the retry ladder in front of it."""

    max_size: int = 50
    ttl_s: float = 3600.0
    storage_backend: str = "file"
    storage_path: str = ".aletheia/analysis_cache.json"
    storage_key: str = "aletheia_analysis_cache"
    redis_url: str | None = None

    max_attempts: int = 3
    initial_delay_s: float = 1.0
    coalesce_inflight: bool = False

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise ConfigurationError("max_size must be at least 1")
        if self.ttl_s <= 0:
            raise ConfigurationError("ttl_s must be positive")
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.initial_delay_s < 0:
            raise ConfigurationError("initial_delay_s must not be negative")
        if self.storage_backend not in _STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend '{self.storage_backend}'"
            )

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from environment variables."""
        return CacheSettings(
            max_size=int(os.getenv("ALETHEIA_CACHE_MAX_SIZE", "50")),
            ttl_s=float(os.getenv("ALETHEIA_CACHE_TTL_S", "3600")),
            storage_backend=os.getenv("ALETHEIA_CACHE_BACKEND", "file").strip().lower(),
            storage_path=os.getenv(
                "ALETHEIA_CACHE_PATH", ".aletheia/analysis_cache.json"
            ),
            storage_key=os.getenv("ALETHEIA_CACHE_KEY", "aletheia_analysis_cache"),
            redis_url=os.getenv("ALETHEIA_CACHE_REDIS_URL") or os.getenv("REDIS_URL"),
            max_attempts=int(os.getenv("ALETHEIA_RETRY_MAX_ATTEMPTS", "3")),
            initial_delay_s=float(os.getenv("ALETHEIA_RETRY_INITIAL_DELAY_S", "1.0")),
            coalesce_inflight=_env_bool("ALETHEIA_CACHE_COALESCE", False),
        )


@dataclass(frozen=True, slots=True)
class GeminiSettings:
    """Settings for the Gemini generation client."""

    api_key: str | None = None
    model: str = "gemini-3-pro-preview"
    thinking_budget: int = 32768
    use_search_tool: bool = True
    open_data_enabled: bool = True

    @staticmethod
    def from_env() -> "GeminiSettings":
        """Load settings from environment variables."""
        return GeminiSettings(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            model=os.getenv("GEMINI_MODEL", "gemini-3-pro-preview"),
            thinking_budget=int(os.getenv("GEMINI_THINKING_BUDGET", "32768")),
            use_search_tool=_env_bool("GEMINI_USE_SEARCH_TOOL", True),
            open_data_enabled=_env_bool("ALETHEIA_OPEN_DATA_ENABLED", True),
        )
