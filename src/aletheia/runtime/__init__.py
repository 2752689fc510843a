"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .coalescing import RequestCoalescer
from .contracts import CoalescingPolicy, RetryPolicy
from .orchestrator import RequestOrchestrator
from .retry import call_with_retry, is_retryable

__all__ = [
    "RequestOrchestrator",
    "RequestCoalescer",
    "RetryPolicy",
    "CoalescingPolicy",
    "call_with_retry",
    "is_retryable",
]
