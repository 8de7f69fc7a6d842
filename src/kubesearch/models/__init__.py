"""Data models for KubeSearch."""

from __future__ import annotations

import enum
from typing import Any


class ValueKind(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"

    @classmethod
    def of(cls, value: Any) -> ValueKind:
        """Classify a parsed JSON value.

        JSON null is its own kind and is reported as ``"null"``, not folded
        into ``"object"``.
        """
        if value is None:
            return cls.NULL
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, dict):
            return cls.OBJECT
        if isinstance(value, (list, tuple)):
            return cls.ARRAY
        return cls.STRING
