"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Best-effort context lookup against the national open data portal (CKAN).
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.parse
import urllib.request
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("aletheia.providers.open_data")

DEFAULT_PORTAL_URL = "https://data.gov.rs/api/3/action/package_search"
_DESCRIPTION_LIMIT = 300


class OpenDataPortal:
    """CKAN `package_search` client; every failure degrades to empty context."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_PORTAL_URL,
        rows: int = 5,
        timeout_s: float = 10.0,
        fetch: Callable[[str], bytes] | None = None,
    ) -> None:
        self._base_url = base_url
        self._rows = rows
        self._timeout_s = timeout_s
        self._fetch = fetch or self.http_get

    def search_url(self, query: str) -> str:
        params = urllib.parse.urlencode({"q": query, "rows": self._rows})
        return f"{self._base_url}?{params}"

    async def search(self, query: str) -> str:
        """Return a formatted context block, or "" when nothing usable came back."""
        url = self.search_url(query)
        try:
            body = await asyncio.to_thread(self._fetch, url)
            decoded = json.loads(body.decode("utf-8"))
        except Exception as e:  # noqa: BLE001
            logger.warning("Open data portal lookup failed for %r: %s", query, e)
            return ""
        return format_datasets(decoded)

    def http_get(self, url: str) -> bytes:
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        with urllib.request.urlopen(req, timeout=self._timeout_s) as resp:  # noqa: S310
            return resp.read()


def _format_resource(resource: dict[str, Any]) -> str:
    fmt = resource.get("format") or "?"
    name = resource.get("name") or "Resource"
    return f"   - [{fmt}] {name}: {resource.get('url', '')}"


def format_datasets(decoded: Any) -> str:
    """Render a CKAN search response as a prompt context block."""
    if not isinstance(decoded, dict) or not decoded.get("success"):
        return ""
    result = decoded.get("result")
    datasets = result.get("results") if isinstance(result, dict) else None
    if not datasets:
        return ""

    blocks = []
    for dataset in datasets:
        if not isinstance(dataset, dict):
            continue
        resources = dataset.get("resources") or []
        resource_lines = (
            "\n".join(_format_resource(r) for r in resources if isinstance(r, dict))
            or "   No resources listed"
        )
        notes = dataset.get("notes")
        if notes:
            description = " ".join(str(notes).split())[:_DESCRIPTION_LIMIT] + "..."
        else:
            description = "No description available"
        blocks.append(
            f"DATASET TITLE: {dataset.get('title', '')}\n"
            f"DESCRIPTION: {description}\n"
            f"RESOURCES:\n{resource_lines}"
        )
    if not blocks:
        return ""

    body = "\n\n".join(blocks)
    return (
        "\n\n*** OFFICIAL OPEN DATA PORTAL (data.gov.rs) API RESULTS ***\n"
        "Structured datasets found via the government open data API. Use these "
        "resource URLs and descriptions to ground findings on public spending, "
        f"procurement, or entity registration:\n\n{body}\n"
    )
