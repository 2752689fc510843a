"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/__init__.py.
"""

from .gemini import GeminiGenerator, translate_api_error
from .open_data import OpenDataPortal, format_datasets
from .prompts import (
    REQUIRED_REPORT_FIELDS,
    build_analysis_prompt,
    build_chat_instruction,
    build_draft_prompt,
)

__all__ = [
    "REQUIRED_REPORT_FIELDS",
    "GeminiGenerator",
    "OpenDataPortal",
    "build_analysis_prompt",
    "build_chat_instruction",
    "build_draft_prompt",
    "format_datasets",
    "translate_api_error",
]
