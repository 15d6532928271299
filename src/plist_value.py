"""
Tagged plist values.

Shortcut plists are authored by Apple's app and are only partially
documented, so every field may be missing or carry an unexpected type.
PlistValue wraps one decoded node and exposes accessors that return
None (or a null PlistValue) instead of raising, so extraction code can
walk arbitrary paths without type checks at every step.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Union


class Kind(Enum):
    STRING = "string"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    DATA = "data"
    DATE = "date"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    NULL = "null"


def _kind_of(raw: Any) -> Kind:
    # bool before int: bool is an int subclass
    if isinstance(raw, bool):
        return Kind.BOOLEAN
    if isinstance(raw, int):
        return Kind.INTEGER
    if isinstance(raw, float):
        return Kind.REAL
    if isinstance(raw, str):
        return Kind.STRING
    if isinstance(raw, (bytes, bytearray)):
        return Kind.DATA
    if isinstance(raw, datetime.datetime):
        return Kind.DATE
    if isinstance(raw, dict):
        return Kind.MAPPING
    if isinstance(raw, (list, tuple)):
        return Kind.SEQUENCE
    return Kind.NULL


@dataclass(frozen=True)
class PlistValue:
    """One node of a decoded plist (or JSON) document."""

    raw: Any = None

    @classmethod
    def wrap(cls, raw: Any) -> "PlistValue":
        if isinstance(raw, PlistValue):
            return raw
        return cls(raw)

    @property
    def kind(self) -> Kind:
        return _kind_of(self.raw)

    @property
    def is_null(self) -> bool:
        return self.kind is Kind.NULL

    # -- scalar accessors ------------------------------------------------

    def as_str(self) -> str | None:
        return self.raw if self.kind is Kind.STRING else None

    def as_int(self) -> int | None:
        """Integer value, or None. Booleans and reals are not integers."""
        return self.raw if self.kind is Kind.INTEGER else None

    def as_number(self) -> Union[int, float, None]:
        """Any numeric node, booleans included (as 0/1)."""
        if self.kind is Kind.BOOLEAN:
            return int(self.raw)
        if self.kind in (Kind.INTEGER, Kind.REAL):
            return self.raw
        return None

    def as_bool(self) -> bool | None:
        return self.raw if self.kind is Kind.BOOLEAN else None

    # -- collection accessors --------------------------------------------

    def as_mapping(self) -> dict[str, Any] | None:
        return self.raw if self.kind is Kind.MAPPING else None

    def as_list(self) -> list[Any] | None:
        if self.kind is Kind.SEQUENCE:
            return list(self.raw)
        return None

    def get(self, key: str) -> "PlistValue":
        mapping = self.as_mapping()
        if mapping is None or key not in mapping:
            return NULL
        return PlistValue.wrap(mapping[key])

    def path(self, *keys: str) -> "PlistValue":
        """Descend through nested mappings; null on any missing link."""
        node = self
        for key in keys:
            node = node.get(key)
            if node.is_null:
                return NULL
        return node

    def keys(self) -> list[str]:
        mapping = self.as_mapping()
        if mapping is None:
            return []
        return [k for k in mapping if isinstance(k, str)]

    def items(self) -> Iterator[tuple[str, "PlistValue"]]:
        for key in self.keys():
            yield key, self.get(key)

    def __contains__(self, key: object) -> bool:
        mapping = self.as_mapping()
        return mapping is not None and key in mapping

    def __repr__(self) -> str:
        return f"PlistValue({self.kind.value}: {self.raw!r})"


NULL = PlistValue(None)
