"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Minimal prompt templates for analysis and document drafting.
"""

from __future__ import annotations

import json
from typing import Any

from ..types import DocumentType, Language, RequestConfig

REQUIRED_REPORT_FIELDS = ("target", "summary")

DOCUMENT_TITLES: dict[str, str] = {
    "foi": "Freedom of Information request",
    "complaint": "criminal complaint",
    "preservation": "evidence preservation letter",
}


def language_instruction(language: Language) -> str:
    if language == "sr":
        return (
            "Write all free text in Serbian (Latin script); keep enum values in English."
        )
    return "Write all content in English."


def build_analysis_prompt(query: str, config: RequestConfig, open_data_context: str = "") -> str:
    lines = [
        f'Perform a forensic investigative analysis of "{query}" '
        "in the context of Serbia and the Western Balkans.",
    ]
    if config.sources:
        lines.append("Prioritize and cross-reference these sources:")
        lines.extend(f"- {source.name} ({source.url})" for source in config.sources)
    if open_data_context:
        lines.append(open_data_context)
    lines.append(language_instruction(config.language))
    lines.append(
        "Respond with a single JSON object that includes at least the fields "
        + ", ".join(f"\"{name}\"" for name in REQUIRED_REPORT_FIELDS)
        + "."
    )
    return "\n".join(lines)


def build_draft_prompt(report: dict[str, Any], doc_type: DocumentType, language: Language) -> str:
    title = DOCUMENT_TITLES[doc_type]
    target = report.get("target", "the subject")
    return "\n".join(
        [
            f"Draft a formal {title} concerning {target}, "
            "based strictly on the investigation report below.",
            language_instruction(language),
            "REPORT:",
            json.dumps(report, ensure_ascii=False),
        ]
    )


def build_chat_instruction(report: dict[str, Any], language: Language) -> str:
    target = report.get("target", "the subject")
    reply_in = (
        "Reply in Serbian (Latin script)." if language == "sr" else "Reply in English."
    )
    return "\n".join(
        [
            "You are Aletheia AI, an anticorruption investigator assistant.",
            f'You have completed a forensic analysis of "{target}". The report:',
            json.dumps(report, ensure_ascii=False),
            "Answer follow-up questions strictly from the report and general "
            "knowledge of Serbian law. Draft documents (memos, subpoenas) on request.",
            reply_in,
        ]
    )
