"""Table entity for the table store."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable

from tablestore.domain.entities.column import Column
from tablestore.domain.value_objects import TableId, new_table_id

Row = dict[str, Any]
"""A row: column name -> JSON-shaped value. May carry undeclared keys."""


@dataclass(frozen=True, slots=True)
class TableDescriptor:
    """Read-only summary of a table."""

    id: TableId
    name: str
    columns: tuple[Column, ...]
    row_count: int


@dataclass
class Table:
    """A named, schema-bound, append-only collection of rows.

    ``id`` and ``columns`` are fixed at creation. Rows are only ever
    appended; the store exposes no update or delete of single rows.
    """

    id: TableId
    name: str
    columns: tuple[Column, ...]
    rows: list[Row] = field(default_factory=list)

    @classmethod
    def new(cls, name: str, columns: Iterable[Column]) -> Table:
        """Create an empty table with a fresh identifier."""
        return cls(id=new_table_id(), name=name, columns=tuple(columns))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def append_row(self, row: Row) -> int:
        """Append an already validated row and return the new row count.

        The row is stored as given; callers hand over a private copy.
        """
        self.rows.append(row)
        return len(self.rows)

    def truncate(self, row_count: int) -> None:
        """Drop rows past ``row_count``. Used to undo a failed append."""
        del self.rows[row_count:]

    def copy_rows(self) -> list[Row]:
        """Return a deep copy of the rows, safe to hand to callers."""
        return copy.deepcopy(self.rows)

    def describe(self) -> TableDescriptor:
        return TableDescriptor(
            id=self.id,
            name=self.name,
            columns=self.columns,
            row_count=len(self.rows),
        )
