"""Column entity: a named, kinded slot of a table schema."""

from __future__ import annotations

from dataclasses import dataclass

from tablestore.domain.value_objects import ColumnKind


@dataclass(frozen=True, slots=True)
class Column:
    """A declared column.

    Attributes:
        name: Column name, matched exactly against row keys
        kind: Declared value kind
    """

    name: str
    kind: ColumnKind

    def __post_init__(self) -> None:
        # Accept the wire tag ("Integer") as well as the enum member
        if not isinstance(self.kind, ColumnKind):
            object.__setattr__(self, "kind", ColumnKind(self.kind))
