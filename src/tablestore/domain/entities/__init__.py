"""Domain entities."""

from tablestore.domain.entities.column import Column
from tablestore.domain.entities.table import Row, Table, TableDescriptor

__all__ = [
    "Column",
    "Row",
    "Table",
    "TableDescriptor",
]
