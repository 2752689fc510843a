"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request and result types exchanged with the dashboard layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

Language = Literal["en", "sr"]
DocumentType = Literal["foi", "complaint", "preservation"]


@dataclass(frozen=True, slots=True)
class DataSource:
    """One investigative database or outlet the user can toggle."""

    id: str
    name: str
    url: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class RequestConfig:
    """Dimensions of a request that change the generated answer."""

    language: Language = "sr"
    active_source_ids: frozenset[str] = field(default_factory=frozenset)
    sources: tuple[DataSource, ...] = ()

    @staticmethod
    def from_sources(
        sources: Iterable[DataSource],
        language: Language = "sr",
    ) -> "RequestConfig":
        """Build a config from the full source list, keeping active ones."""
        active = tuple(source for source in sources if source.active)
        return RequestConfig(
            language=language,
            active_source_ids=frozenset(source.id for source in active),
            sources=active,
        )


class AnalysisResult(BaseModel):
    """Structured report plus the grounding references returned with it."""

    model_config = ConfigDict(populate_by_name=True)

    report: dict[str, Any]
    grounding_chunks: list[dict[str, Any]] = Field(
        default_factory=list,
        alias="groundingChunks",
    )
