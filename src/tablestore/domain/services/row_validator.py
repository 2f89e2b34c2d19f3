"""Row validation against a table schema.

A row is valid when every declared column is present and its value
kind is compatible with the column kind:

    String  <- str
    Integer <- int within the signed 64-bit range (never bool)
    Float   <- int or float (never bool)
    Boolean <- bool
    Object  <- mapping

Keys that are not declared in the schema are never inspected, so rows
may be a superset of the schema. There is no default-filling: every
declared column is required.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from tablestore.domain.entities.column import Column
from tablestore.domain.errors import MissingColumnError, TypeMismatchError
from tablestore.domain.value_objects import ValueKind


def validate_row(columns: Sequence[Column], row: Mapping[str, Any]) -> None:
    """Check a candidate row against a schema.

    Columns are checked in schema order and the first failure wins.

    Args:
        columns: The table's declared columns.
        row: The candidate row.

    Raises:
        MissingColumnError: If a declared column is absent.
        TypeMismatchError: If a declared column holds an incompatible value.
    """
    for column in columns:
        if column.name not in row:
            raise MissingColumnError(column.name)

        kind = ValueKind.of(row[column.name])
        if not column.kind.accepts(kind):
            raise TypeMismatchError(column.name, column.kind.value, kind.value)

