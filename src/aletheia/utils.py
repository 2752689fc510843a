"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: utils.py.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def backoff_delay(attempt: int, initial_delay_s: float, factor: float = 2.0) -> float:
    """Delay before retry number `attempt` (0-based): initial * factor**attempt."""
    return max(0.0, initial_delay_s) * (factor ** max(0, attempt))


def now_ms(seconds: float | None = None) -> int:
    """Convert a clock reading in seconds to integer epoch milliseconds."""
    return int(round((time.time() if seconds is None else seconds) * 1000))


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine from synchronous code outside any running loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    coro.close()
    raise RuntimeError("run_sync() cannot be called from a running event loop")
