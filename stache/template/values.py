"""
Closed set of value shapes the renderer understands.

Host values are arbitrary Python objects; ``MustacheValue.of`` classifies
them once so the renderer can dispatch exhaustively on ``ValueKind``,
including an explicit ABSENT variant for names that are not bound.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class ValueKind(enum.Enum):
    ABSENT = "absent"
    MAPPING = "mapping"
    SEQUENCE = "sequence"    # sequence whose elements are all mappings
    LAMBDA = "lambda"        # fn(section_text, context) -> str
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OTHER = "other"          # anything else: printable, never iterated


@dataclass(frozen=True)
class MustacheValue:
    """A host value tagged with its shape."""
    kind: ValueKind
    raw: Any = None

    @classmethod
    def of(cls, raw: Any) -> MustacheValue:
        if isinstance(raw, MustacheValue):
            return raw
        if raw is None:
            return ABSENT
        # bool is an int subclass, classify it first
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, Mapping):
            return cls(ValueKind.MAPPING, raw)
        if isinstance(raw, (list, tuple)):
            if all(isinstance(item, Mapping) for item in raw):
                return cls(ValueKind.SEQUENCE, raw)
            return cls(ValueKind.OTHER, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, raw)
        if callable(raw):
            return cls(ValueKind.LAMBDA, raw)
        return cls(ValueKind.OTHER, raw)

    @property
    def is_absent(self) -> bool:
        return self.kind is ValueKind.ABSENT

    @property
    def is_empty(self) -> bool:
        """Empty mapping or empty sequence."""
        return self.kind in (ValueKind.MAPPING, ValueKind.SEQUENCE) and len(self.raw) == 0

    @property
    def is_truthy_scalar(self) -> bool:
        """Non-empty string, true, or a non-zero number."""
        if self.kind is ValueKind.STRING:
            return len(self.raw) > 0
        if self.kind is ValueKind.BOOLEAN:
            return self.raw is True
        if self.kind is ValueKind.NUMBER:
            return self.raw != 0
        return False

    @property
    def is_falsey(self) -> bool:
        """Values for which an inverted section renders its children."""
        if self.kind is ValueKind.ABSENT:
            return True
        if self.kind is ValueKind.BOOLEAN:
            return self.raw is False
        return self.is_empty

    def stringify(self) -> str:
        if self.kind is ValueKind.ABSENT:
            return ""
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        return str(self.raw)


ABSENT = MustacheValue(ValueKind.ABSENT)


__all__ = ["ValueKind", "MustacheValue", "ABSENT"]
