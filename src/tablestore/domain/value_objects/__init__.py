"""Value objects for the table store domain.

Exports:
    Kinds:
        - ColumnKind: Declared kind of a column (String, Integer, ...)
        - ValueKind: Closed classification of row values
    Identifiers:
        - TableId: Type-safe table identifier
        - new_table_id: Generate a fresh TableId
    Results:
        - RowsResult: Rows of a table with their count
        - StoreStats: Table count and uptime
"""

from tablestore.domain.value_objects.column_kind import (
    INT64_MAX,
    INT64_MIN,
    ColumnKind,
    ValueKind,
)
from tablestore.domain.value_objects.identifiers import TableId, new_table_id
from tablestore.domain.value_objects.results import RowsResult, StoreStats

__all__ = [
    # Kinds
    "ColumnKind",
    "ValueKind",
    "INT64_MIN",
    "INT64_MAX",
    # Identifiers
    "TableId",
    "new_table_id",
    # Results
    "RowsResult",
    "StoreStats",
]
