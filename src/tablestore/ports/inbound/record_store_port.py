"""Inbound port for record store operations.

This protocol defines the interface that the application layer
exposes to inbound adapters (REST API, CLI, tests). Arguments and
results are plain values; no framework types cross this boundary.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from tablestore.domain.entities import Column, TableDescriptor
from tablestore.domain.value_objects import RowsResult, StoreStats


@runtime_checkable
class RecordStorePort(Protocol):
    """Protocol for record store operations.

    Failures are raised as TableStoreError subclasses.
    """

    def create_table(self, name: str, columns: Iterable[Column]) -> TableDescriptor:
        """Create an empty table.

        Raises:
            TableExistsError: If the name is taken.
            PersistenceError: If the snapshot write fails.
        """
        ...

    def list_tables(self) -> list[str]:
        """Names of all tables."""
        ...

    def get_table(self, name: str) -> TableDescriptor:
        """Describe a table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    def insert_row(self, table_name: str, row: Mapping[str, Any]) -> int:
        """Validate and append a row, returning the new row count.

        Raises:
            TableNotFoundError: If the table does not exist.
            MissingColumnError: If a declared column is absent.
            TypeMismatchError: If a value does not fit its column.
            PersistenceError: If the snapshot write fails.
        """
        ...

    def list_rows(self, table_name: str) -> RowsResult:
        """All rows of a table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    def delete_table(self, name: str) -> bool:
        """Remove a table.

        Raises:
            TableNotFoundError: If the table does not exist.
            PersistenceError: If the snapshot write fails.
        """
        ...

    def stats(self) -> StoreStats:
        """Table count and uptime."""
        ...
