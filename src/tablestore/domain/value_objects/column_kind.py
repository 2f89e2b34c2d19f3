"""Column kinds and the closed set of row value kinds.

Row values arrive as JSON-shaped Python objects. ``ValueKind.of``
classifies any such value into a closed tagged set so that schema
checks can match ``(ColumnKind, ValueKind)`` pairs exhaustively.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

# Integer columns accept signed 64-bit values only
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ColumnKind(str, Enum):
    """Declared kind of a column.

    The values are the tags used on the wire and in snapshots.
    """

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    OBJECT = "Object"

    def accepts(self, kind: ValueKind) -> bool:
        """Check whether a value of the given kind fits this column."""
        return kind in _COMPATIBLE[self]


class ValueKind(Enum):
    """Kind of a dynamically-typed row value."""

    STRING = "string"
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"
    UNSUPPORTED = "unsupported"

    @classmethod
    def of(cls, value: Any) -> ValueKind:
        """Classify a row value.

        ``bool`` is checked before ``int`` since it is an ``int`` subclass.
        Integers outside the signed 64-bit range are ``BIG_INTEGER``;
        non-finite floats are ``UNSUPPORTED``.
        """
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            if INT64_MIN <= value <= INT64_MAX:
                return cls.INTEGER
            return cls.BIG_INTEGER
        if isinstance(value, float):
            # NaN and infinities have no JSON form
            if not math.isfinite(value):
                return cls.UNSUPPORTED
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, Mapping):
            return cls.OBJECT
        if isinstance(value, (list, tuple)):
            return cls.ARRAY
        return cls.UNSUPPORTED


_COMPATIBLE: dict[ColumnKind, frozenset[ValueKind]] = {
    ColumnKind.STRING: frozenset({ValueKind.STRING}),
    ColumnKind.INTEGER: frozenset({ValueKind.INTEGER}),
    ColumnKind.FLOAT: frozenset({ValueKind.INTEGER, ValueKind.BIG_INTEGER, ValueKind.FLOAT}),
    ColumnKind.BOOLEAN: frozenset({ValueKind.BOOLEAN}),
    ColumnKind.OBJECT: frozenset({ValueKind.OBJECT}),
}
