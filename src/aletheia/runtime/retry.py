"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/retry.py.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..errors import RetryableUpstreamError
from ..utils import backoff_delay
from .contracts import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("aletheia.runtime.retry")

_RATE_LIMIT_STATUS = 429
_STATUS_429_RE = re.compile(r"\b429\b")
_RETRY_PHRASES = (
    "resource_exhausted",
    "resource exhausted",
    "too many requests",
    "rate limit",
)


def _is_rate_limit_status(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value == _RATE_LIMIT_STATUS
    if isinstance(value, str):
        token = value.strip().lower()
        return token == str(_RATE_LIMIT_STATUS) or token == "resource_exhausted"
    return False


def _explicit_status(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def is_retryable(error: BaseException) -> bool:
    """
    Return True when `error` signals transient overload (429 / resource exhaustion).

    An explicit numeric status other than 429 is terminal; the message is
    only consulted when the error carries no such status.
    """
    if isinstance(error, RetryableUpstreamError):
        return True
    for attr in ("status_code", "status", "code"):
        if _is_rate_limit_status(getattr(error, attr, None)):
            return True
    for attr in ("status_code", "code"):
        if _explicit_status(getattr(error, attr, None)) is not None:
            return False
    msg = str(error).lower()
    if _STATUS_429_RE.search(msg):
        return True
    return any(token in msg for token in _RETRY_PHRASES)


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    is_retryable: Callable[[BaseException], bool] = is_retryable,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """
    Execute `fn` under a bounded exponential-backoff retry policy.

    Only errors accepted by `is_retryable` are retried; anything else, and
    the last retryable error once attempts are exhausted, is re-raised as-is.
    """
    last_attempt = policy.max_attempts - 1
    for attempt in range(policy.max_attempts):
        try:
            return await fn()
        except Exception as error:
            if attempt >= last_attempt or not is_retryable(error):
                raise
            delay = backoff_delay(attempt, policy.initial_delay_s, policy.backoff_factor)
            logger.warning(
                "Upstream overloaded (attempt %d/%d), retrying in %.2fs: %s",
                attempt + 1,
                policy.max_attempts,
                delay,
                error,
            )
            await sleep(delay)
    raise AssertionError("unreachable: retry loop always returns or raises")
