"""Failure taxonomy for the table store.

Every store operation reports failure by raising one of these
exceptions. None of them is fatal to the process; the caller (usually
the REST adapter) decides how to present it. Each class carries a
stable ``code`` used for logs, metrics labels and outward mapping.

Hierarchy:
    TableStoreError
    ├── TableExistsError
    ├── TableNotFoundError
    ├── RowValidationError
    │   ├── MissingColumnError
    │   └── TypeMismatchError
    ├── PersistenceError
    │   ├── SnapshotSerializationError
    │   ├── SnapshotWriteError
    │   └── SnapshotCorruptError
    └── LockUnusableError
"""

from __future__ import annotations


class TableStoreError(Exception):
    """Base class for all table store failures."""

    code: str = "table_store_error"


class TableExistsError(TableStoreError):
    """Raised when creating a table whose name is already taken."""

    code = "table_exists"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Table '{name}' already exists")


class TableNotFoundError(TableStoreError):
    """Raised when a table name is not present in the store."""

    code = "table_not_found"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Table '{name}' not found")


class RowValidationError(TableStoreError):
    """A candidate row does not satisfy its table's schema."""

    code = "row_invalid"

    def __init__(self, column: str, message: str) -> None:
        self.column = column
        super().__init__(message)


class MissingColumnError(RowValidationError):
    """A declared column is absent from the row."""

    code = "missing_column"

    def __init__(self, column: str) -> None:
        super().__init__(column, f"Missing required column '{column}'")


class TypeMismatchError(RowValidationError):
    """A declared column's value has an incompatible kind."""

    code = "type_mismatch"

    def __init__(self, column: str, expected: str = "", actual: str = "") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(column, f"Column '{column}' type mismatch")


class PersistenceError(TableStoreError):
    """The snapshot could not be written or read."""

    code = "persistence_failed"


class SnapshotSerializationError(PersistenceError):
    """The store state could not be encoded."""

    code = "serialization_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Serialization error: {reason}")


class SnapshotWriteError(PersistenceError):
    """The encoded snapshot could not be written to disk."""

    code = "write_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Write error: {reason}")


class SnapshotCorruptError(PersistenceError):
    """An existing snapshot file could not be read or parsed."""

    code = "snapshot_corrupt"

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Snapshot '{path}' is unreadable: {reason}")


class LockUnusableError(TableStoreError):
    """The store lock was poisoned by a failed write critical section."""

    code = "lock_unusable"

    def __init__(self) -> None:
        super().__init__("database lock is poisoned")
