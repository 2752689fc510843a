"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic cache keys for analysis requests.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

KEY_PREFIX = "analyze"


def normalize_query(query: str) -> str:
    """Trim surrounding whitespace and case-fold the query text."""
    return query.strip().casefold()


def serialize_sources(source_ids: Iterable[str]) -> list[str]:
    """Return de-duplicated source ids in lexicographic order."""
    return sorted({str(source_id) for source_id in source_ids})


def build_cache_key(query: str, language: str, active_source_ids: Iterable[str]) -> str:
    """
    Build a cache key from the normalized request dimensions.

    Components are JSON-encoded so no query text or source id can forge a
    delimiter, while the key stays human readable, e.g.
    ``analyze:["john doe","sr",["birodi","istinomer"]]``.
    """
    components = [
        normalize_query(query),
        language.strip().lower(),
        serialize_sources(active_source_ids),
    ]
    encoded = json.dumps(components, ensure_ascii=False, separators=(",", ":"))
    return f"{KEY_PREFIX}:{encoded}"
