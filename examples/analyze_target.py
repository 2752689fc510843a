"""
analyze_target.py — Cached analysis of one subject.

Runs the same analysis twice; the second call is served from the response
cache (and from the snapshot file on later runs).

Usage:
    export GEMINI_API_KEY=...
    python examples/analyze_target.py "Subject Name"
"""

import logging
import sys

from aletheia import DataSource, create_investigation_service

SOURCES = [
    DataSource("istinomer", "Istinomer", "https://www.istinomer.rs"),
    DataSource("birodi", "BIRODI", "https://birodi.rs"),
    DataSource("krik", "KRIK", "https://www.krik.rs", active=False),
]


async def main(query: str) -> None:
    service = create_investigation_service()

    result = await service.analyze(query, SOURCES, language="en")
    print(result.report.get("summary", result.report))

    again = await service.analyze(query.upper(), list(reversed(SOURCES)), language="en")
    print("cache hit:", again == result, service.orchestrator.store.stats())

    foi = await service.draft(result.report, "foi", language="en")
    print(foi)


if __name__ == "__main__":
    import asyncio

    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "Example Subject"))
