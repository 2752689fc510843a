"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy shared by the cache, runtime and provider layers.
"""

from __future__ import annotations


class AletheiaError(RuntimeError):
    """Base class for all package errors."""


class ConfigurationError(AletheiaError):
    """Raised when settings or backend selection are invalid."""


class PersistenceError(AletheiaError):
    """Raised by snapshot storage backends on read/write failure."""


class UpstreamError(AletheiaError):
    """Failure reported by the external generation call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableUpstreamError(UpstreamError):
    """Upstream signalled rate limiting or resource exhaustion."""


class InvalidResponseError(UpstreamError):
    """Upstream answered, but the payload was empty or malformed."""
