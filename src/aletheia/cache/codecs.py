"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Value codecs used to persist and copy cached payloads.
"""

from __future__ import annotations

import copy
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

from ..types import JSONValue

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class ValueCodec(Protocol[T]):
    """Convert cached values to and from JSON-compatible data."""

    def encode(self, value: T) -> JSONValue: ...

    def decode(self, raw: JSONValue) -> T: ...

    def copy(self, value: T) -> T: ...


class JSONValueCodec:
    """Codec for values that are already plain JSON structures."""

    def encode(self, value: Any) -> JSONValue:
        return copy.deepcopy(value)

    def decode(self, raw: JSONValue) -> Any:
        return raw

    def copy(self, value: Any) -> Any:
        return copy.deepcopy(value)


class PydanticValueCodec(Generic[M]):
    """Codec for pydantic models, persisted in their JSON dump form."""

    def __init__(self, model: type[M]) -> None:
        self._model = model

    def encode(self, value: M) -> JSONValue:
        return value.model_dump(mode="json", by_alias=True)

    def decode(self, raw: JSONValue) -> M:
        return self._model.model_validate(raw)

    def copy(self, value: M) -> M:
        return value.model_copy(deep=True)
