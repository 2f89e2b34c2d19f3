"""Snapshot document format.

A snapshot is one UTF-8 JSON document:

    {
      "format_version": 1,
      "tables": {
        "<name>": {
          "id": "<uuid>",
          "name": "<name>",
          "columns": [{"name": "n", "column_type": "Integer"}, ...],
          "rows": [{"n": 5, ...}, ...]
        }
      }
    }

JSON keeps integers and floats distinct (``5`` vs ``5.0``), nests row
values and carries column kinds as their enum tags.

Only documents that decode again are produced: values nested deeper than
the JSON reader accepts, and NaN or infinite floats, fail to encode
instead of producing a snapshot that cannot be loaded.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError

from tablestore.domain.entities import Column, Table
from tablestore.domain.errors import SnapshotSerializationError
from tablestore.domain.value_objects import ColumnKind, TableId

FORMAT_VERSION = 1


class ColumnRecord(BaseModel):
    """Serialized column."""

    name: str
    column_type: ColumnKind


class TableRecord(BaseModel):
    """Serialized table, rows included."""

    id: str
    name: str
    columns: list[ColumnRecord]
    rows: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_table(cls, table: Table) -> TableRecord:
        # Already-valid in-memory state: skip validation on the save path
        return cls.model_construct(
            id=table.id,
            name=table.name,
            columns=[
                ColumnRecord.model_construct(name=c.name, column_type=c.kind)
                for c in table.columns
            ],
            rows=table.rows,
        )

    def to_table(self) -> Table:
        return Table(
            id=TableId(self.id),
            name=self.name,
            columns=tuple(Column(c.name, c.column_type) for c in self.columns),
            rows=self.rows,
        )


class SnapshotDocument(BaseModel):
    """Top-level snapshot document."""

    format_version: int = FORMAT_VERSION
    tables: dict[str, TableRecord] = Field(default_factory=dict)


def _find_non_finite(rows: list[dict[str, Any]]) -> float | None:
    stack: list[Any] = list(rows)
    while stack:
        value = stack.pop()
        if isinstance(value, float) and not math.isfinite(value):
            return value
        if isinstance(value, Mapping):
            stack.extend(value.values())
        elif isinstance(value, (list, tuple)):
            stack.extend(value)
    return None


def encode_snapshot(tables: Mapping[str, Table]) -> bytes:
    """Serialize the full table registry into one buffer.

    The buffer is decoded again before it is returned, so a snapshot
    that could not be loaded back is never handed out for writing.

    Raises:
        SnapshotSerializationError: If a row holds a value JSON cannot
            carry, or the encoded document does not load back.
    """
    for name, table in tables.items():
        bad = _find_non_finite(table.rows)
        if bad is not None:
            raise SnapshotSerializationError(f"table '{name}' holds non-finite float {bad}")

    document = SnapshotDocument.model_construct(
        format_version=FORMAT_VERSION,
        tables={name: TableRecord.from_table(table) for name, table in tables.items()},
    )
    try:
        data = document.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise SnapshotSerializationError(str(e)) from e

    try:
        decode_snapshot(data)
    except ValueError as e:
        reason = str(e).splitlines()[0] if str(e) else type(e).__name__
        raise SnapshotSerializationError(f"encoded snapshot does not load back: {reason}") from e
    return data


def decode_snapshot(data: bytes) -> dict[str, Table]:
    """Parse a snapshot buffer back into tables.

    Raises:
        ValueError: If the buffer is not a valid snapshot document
            (pydantic's ValidationError is a ValueError).
    """
    document = SnapshotDocument.model_validate_json(data)
    if document.format_version != FORMAT_VERSION:
        raise ValueError(f"unsupported snapshot format version {document.format_version}")

    tables: dict[str, Table] = {}
    for name, record in document.tables.items():
        if record.name != name:
            raise ValueError(f"table key '{name}' does not match table name '{record.name}'")
        tables[name] = record.to_table()
    return tables
