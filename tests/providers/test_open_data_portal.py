from __future__ import annotations

import asyncio
import json
import logging
import urllib.parse

from aletheia.providers import OpenDataPortal, format_datasets


def run_async(coro):
    return asyncio.run(coro)


_PAYLOAD = {
    "success": True,
    "result": {
        "results": [
            {
                "title": "Javne nabavke 2023",
                "notes": "Line one\r\nline two " + "x" * 400,
                "resources": [
                    {"format": "CSV", "name": "Ugovori", "url": "https://data.gov.rs/u.csv"},
                    {"format": "PDF", "url": "https://data.gov.rs/r.pdf"},
                ],
            },
            {"title": "Registar", "notes": None, "resources": []},
        ]
    },
}


def test_search_formats_datasets():
    requested: list[str] = []

    def fetch(url: str) -> bytes:
        requested.append(url)
        return json.dumps(_PAYLOAD).encode("utf-8")

    portal = OpenDataPortal(fetch=fetch)
    context = run_async(portal.search("Jane Doe"))

    query = urllib.parse.parse_qs(urllib.parse.urlparse(requested[0]).query)
    assert query == {"q": ["Jane Doe"], "rows": ["5"]}
    assert "DATASET TITLE: Javne nabavke 2023" in context
    assert "DESCRIPTION: Line one line two xxx" in context
    assert "   - [CSV] Ugovori: https://data.gov.rs/u.csv" in context
    assert "   - [PDF] Resource: https://data.gov.rs/r.pdf" in context
    assert "No description available" in context
    assert "No resources listed" in context


def test_description_is_truncated():
    context = format_datasets(_PAYLOAD)
    description = next(
        line for line in context.splitlines() if line.startswith("DESCRIPTION: Line one")
    )
    assert len(description) == len("DESCRIPTION: ") + 300 + len("...")


def test_network_failure_degrades_to_empty_context(caplog):
    def fetch(url: str) -> bytes:
        raise OSError("connection refused")

    with caplog.at_level(logging.WARNING, logger="aletheia.providers.open_data"):
        context = run_async(OpenDataPortal(fetch=fetch).search("Jane"))

    assert context == ""
    assert any("lookup failed" in r.getMessage() for r in caplog.records)


def test_unsuccessful_or_empty_responses_yield_no_context():
    assert format_datasets({"success": False}) == ""
    assert format_datasets({"success": True, "result": {"results": []}}) == ""
    assert format_datasets([]) == ""
    assert run_async(OpenDataPortal(fetch=lambda url: b"<html>").search("x")) == ""
