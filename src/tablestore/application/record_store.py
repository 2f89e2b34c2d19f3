"""RecordStore application service.

This is the engine behind every transport: a registry of named tables
guarded by one reader-writer lock, persisted as a full snapshot after
every mutation.

Usage:
    from tablestore.application import RecordStore
    from tablestore.adapters.outbound import FileSnapshotStore
    from tablestore.domain.entities import Column
    from tablestore.domain.value_objects import ColumnKind

    store = RecordStore(FileSnapshotStore("/var/lib/tablestore/db.json"))
    store.create_table("t", [Column("n", ColumnKind.INTEGER)])
    store.insert_row("t", {"n": 5})
    store.list_rows("t").rows   # [{"n": 5}]

Locking:
    Reads (list_tables, get_table, list_rows, stats) take the lock in
    shared mode. Mutations (create_table, insert_row, delete_table) take
    it exclusively, across every table, and keep it until the snapshot
    write has finished. Row validation and the append it gates happen
    under the same exclusive acquisition.

Persistence failures:
    A mutation is applied in memory, then the snapshot is written. If
    the write fails and rollback_on_persist_failure is set (default),
    the mutation is undone before the error is raised, so a reported
    failure never leaves its mutation behind. With rollback disabled
    the mutation stays in memory and is picked up by the next
    successful snapshot, although its caller was told it failed.
"""

from __future__ import annotations

import copy
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Mapping

from tablestore.domain.entities import Column, Table, TableDescriptor
from tablestore.domain.errors import (
    PersistenceError,
    TableExistsError,
    TableNotFoundError,
    TableStoreError,
)
from tablestore.domain.services import ReaderWriterLock, validate_row
from tablestore.domain.value_objects import RowsResult, StoreStats
from tablestore.infrastructure.logging import get_logger
from tablestore.infrastructure.metrics import MetricsRegistry, get_metrics
from tablestore.infrastructure.tracing import trace_span
from tablestore.ports.outbound import SnapshotStorePort

logger = get_logger(__name__)


class RecordStore:
    """Schema-validated tabular record store.

    Implements RecordStorePort. One instance per process; it is
    hydrated from the snapshot store on construction.

    Thread Safety:
        All public methods are safe to call from multiple threads.
    """

    def __init__(
        self,
        snapshot_store: SnapshotStorePort,
        rollback_on_persist_failure: bool = True,
        metrics: MetricsRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store and load the last snapshot.

        Args:
            snapshot_store: Where full snapshots are loaded from and saved to.
            rollback_on_persist_failure: Undo a mutation whose snapshot
                write fails.
            metrics: Metrics registry (global registry when omitted).
            clock: Monotonic clock used for uptime.

        Raises:
            SnapshotCorruptError: If the snapshot store refuses to start
                from an unreadable snapshot.
        """
        self._snapshots = snapshot_store
        self._rollback = rollback_on_persist_failure
        self._metrics = metrics or get_metrics()
        self._clock = clock
        self._started_at = clock()

        self._lock = ReaderWriterLock(on_wait=self._observe_lock_wait)
        self._tables: dict[str, Table] = {}

        self._load()

    @property
    def snapshot_store(self) -> SnapshotStorePort:
        return self._snapshots

    @property
    def lock(self) -> ReaderWriterLock:
        """The store-wide reader-writer lock."""
        return self._lock

    def _load(self) -> None:
        loaded = self._snapshots.load()
        with self._lock.write_locked():
            self._tables = dict(loaded) if loaded else {}
            self._metrics.tables.set(len(self._tables))
        logger.info(
            "store_loaded",
            tables=len(self._tables),
            rows=sum(t.row_count for t in self._tables.values()),
        )

    def _observe_lock_wait(self, mode: str, seconds: float) -> None:
        self._metrics.lock_wait_seconds.labels(mode=mode).observe(seconds)

    @contextmanager
    def _operation(self, operation: str, table: str | None = None) -> Iterator[None]:
        """Trace, time and count one store operation."""
        attributes = {"tablestore.table": table} if table is not None else None
        start = time.perf_counter()
        with trace_span(f"tablestore.{operation}", attributes):
            try:
                yield
            except TableStoreError as e:
                self._metrics.operations_total.labels(operation=operation, status=e.code).inc()
                raise
            except Exception as e:
                self._metrics.operations_total.labels(
                    operation=operation, status="internal_error"
                ).inc()
                if self._lock.is_poisoned:
                    logger.critical(
                        "store_lock_poisoned",
                        operation=operation,
                        table=table,
                        error=repr(e),
                    )
                raise
            else:
                self._metrics.operations_total.labels(operation=operation, status="ok").inc()
            finally:
                self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start
                )

    def _require(self, name: str) -> Table:
        table = self._tables.get(name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def _save(self) -> None:
        """Write the full snapshot. Caller holds the write lock."""
        start = time.perf_counter()
        try:
            written = self._snapshots.save(self._tables)
        except PersistenceError as e:
            self._metrics.snapshot_writes_total.labels(status=e.code).inc()
            raise
        self._metrics.snapshot_writes_total.labels(status="ok").inc()
        self._metrics.snapshot_write_latency_seconds.observe(time.perf_counter() - start)
        self._metrics.snapshot_bytes.set(written)

    def _persist(self, operation: str, table: str, undo: Callable[[], None]) -> None:
        """Snapshot after a mutation, undoing it on failure if configured."""
        try:
            self._save()
        except PersistenceError as e:
            if self._rollback:
                undo()
            logger.error(
                "snapshot_write_failed",
                operation=operation,
                table=table,
                error=str(e),
                code=e.code,
                rolled_back=self._rollback,
            )
            raise
        finally:
            self._metrics.tables.set(len(self._tables))

    # Mutations

    def create_table(self, name: str, columns: Iterable[Column]) -> TableDescriptor:
        """Create an empty table.

        Args:
            name: Table name, unique and case-sensitive.
            columns: Schema in declaration order.

        Returns:
            The new table's descriptor (row_count 0).

        Raises:
            TableExistsError: If the name is taken.
            PersistenceError: If the snapshot write fails.
            LockUnusableError: If the lock is poisoned.
        """
        schema = tuple(columns)
        for column in schema:
            if not isinstance(column, Column):
                raise TypeError(f"Expected Column, got {type(column).__name__}")

        with self._operation("create_table", name), self._lock.write_locked():
            if name in self._tables:
                raise TableExistsError(name)

            table = Table.new(name, schema)
            self._tables[name] = table
            self._persist("create_table", name, undo=lambda: self._tables.pop(name, None))
            descriptor = table.describe()

        logger.info(
            "table_created",
            table=name,
            table_id=descriptor.id,
            columns=table.column_names,
        )
        return descriptor

    def insert_row(self, table_name: str, row: Mapping[str, Any]) -> int:
        """Validate and append a row.

        Args:
            table_name: Target table.
            row: Column name -> value. Undeclared keys are kept as-is.

        Returns:
            The table's row count after the insert.

        Raises:
            TableNotFoundError: If the table does not exist.
            MissingColumnError: If a declared column is absent.
            TypeMismatchError: If a value does not fit its column.
            PersistenceError: If the snapshot write fails.
            LockUnusableError: If the lock is poisoned.
        """
        # Private copy, made before locking so a bad value cannot poison the lock
        candidate = copy.deepcopy(dict(row))

        with self._operation("insert_row", table_name), self._lock.write_locked():
            table = self._require(table_name)
            validate_row(table.columns, candidate)

            previous_count = table.row_count
            count = table.append_row(candidate)
            self._persist(
                "insert_row", table_name, undo=lambda: table.truncate(previous_count)
            )

        self._metrics.rows_inserted_total.inc()
        logger.debug("row_inserted", table=table_name, rows=count)
        return count

    def delete_table(self, name: str) -> bool:
        """Remove a table and all of its rows.

        Returns:
            True (a missing table raises instead).

        Raises:
            TableNotFoundError: If the table does not exist.
            PersistenceError: If the snapshot write fails.
            LockUnusableError: If the lock is poisoned.
        """
        with self._operation("delete_table", name), self._lock.write_locked():
            table = self._tables.pop(name, None)
            if table is None:
                raise TableNotFoundError(name)

            def undo() -> None:
                self._tables[name] = table

            self._persist("delete_table", name, undo=undo)

        logger.info("table_deleted", table=name, table_id=table.id, rows=table.row_count)
        return True

    # Reads

    def list_tables(self) -> list[str]:
        """Names of all tables, sorted."""
        with self._operation("list_tables"), self._lock.read_locked():
            return sorted(self._tables)

    def get_table(self, name: str) -> TableDescriptor:
        """Describe a table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        with self._operation("get_table", name), self._lock.read_locked():
            return self._require(name).describe()

    def list_rows(self, table_name: str) -> RowsResult:
        """All rows of a table, in insertion order.

        The rows are copies; mutating them does not affect the store.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        with self._operation("list_rows", table_name), self._lock.read_locked():
            table = self._require(table_name)
            return RowsResult(table=table_name, rows=table.copy_rows(), count=table.row_count)

    def stats(self) -> StoreStats:
        """Table count and time since the store was created."""
        with self._operation("stats"), self._lock.read_locked():
            return StoreStats(
                table_count=len(self._tables),
                uptime_seconds=self._clock() - self._started_at,
            )
