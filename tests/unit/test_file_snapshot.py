"""Unit tests for the file snapshot adapter."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tablestore.adapters.outbound import FileSnapshotStore, InMemorySnapshotStore
from tablestore.domain.entities import Column, Table
from tablestore.domain.errors import (
    SnapshotCorruptError,
    SnapshotSerializationError,
    SnapshotWriteError,
)
from tablestore.domain.value_objects import ColumnKind


def _tables() -> dict[str, Table]:
    table = Table.new("t", [Column("n", ColumnKind.INTEGER)])
    table.append_row({"n": 5})
    return {"t": table}


@pytest.mark.unit
class TestFileSnapshotStore:
    def test_missing_file_loads_none(self, snapshot_path: Path) -> None:
        assert FileSnapshotStore(snapshot_path).load() is None

    def test_save_then_load(self, snapshot_path: Path) -> None:
        store = FileSnapshotStore(snapshot_path, fsync=True)
        tables = _tables()

        written = store.save(tables)

        assert written == snapshot_path.stat().st_size
        assert FileSnapshotStore(snapshot_path).load() == tables

    def test_save_creates_parent_directories(self, temp_dir: Path) -> None:
        path = temp_dir / "deep" / "er" / "db.json"

        FileSnapshotStore(path, fsync=False).save({})

        assert path.exists()

    def test_save_replaces_whole_file(self, snapshot_path: Path) -> None:
        store = FileSnapshotStore(snapshot_path, fsync=False)
        store.save(_tables())

        store.save({})

        assert store.load() == {}
        assert not (snapshot_path.parent / f".{snapshot_path.name}.tmp").exists()

    def test_write_failure(self, temp_dir: Path) -> None:
        # The target is a directory, so the final replace cannot succeed
        target = temp_dir / "occupied"
        (target / "child").mkdir(parents=True)
        store = FileSnapshotStore(target, fsync=False)

        with pytest.raises(SnapshotWriteError):
            store.save(_tables())

        assert not (temp_dir / ".occupied.tmp").exists()

    def test_failed_write_keeps_previous_snapshot(self, snapshot_path: Path) -> None:
        store = FileSnapshotStore(snapshot_path, fsync=False)
        tables = _tables()
        store.save(tables)

        bad = Table.new("bad", [])
        bad.append_row({"x": object()})
        with pytest.raises(SnapshotSerializationError):
            store.save({**tables, "bad": bad})

        assert store.load() == tables

    def test_unknown_policy(self, snapshot_path: Path) -> None:
        with pytest.raises(ValueError):
            FileSnapshotStore(snapshot_path, on_corrupt="ignore")  # type: ignore[arg-type]


@pytest.mark.unit
class TestCorruptSnapshot:
    """Each policy for an unreadable snapshot file."""

    @pytest.fixture
    def corrupt_path(self, snapshot_path: Path) -> Path:
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        snapshot_path.write_bytes(b"{ this is not a snapshot")
        return snapshot_path

    def test_quarantine_moves_file_aside(self, corrupt_path: Path) -> None:
        store = FileSnapshotStore(corrupt_path, on_corrupt="quarantine")

        assert store.load() is None

        assert not corrupt_path.exists()
        quarantined = store.quarantined_files()
        assert len(quarantined) == 1
        assert quarantined[0].read_bytes() == b"{ this is not a snapshot"

    def test_empty_leaves_file_in_place(self, corrupt_path: Path) -> None:
        store = FileSnapshotStore(corrupt_path, on_corrupt="empty")

        assert store.load() is None

        assert corrupt_path.read_bytes() == b"{ this is not a snapshot"
        assert store.quarantined_files() == []

    def test_fail_raises(self, corrupt_path: Path) -> None:
        store = FileSnapshotStore(corrupt_path, on_corrupt="fail")

        with pytest.raises(SnapshotCorruptError) as exc_info:
            store.load()

        assert exc_info.value.path == str(corrupt_path)
        assert corrupt_path.exists()

    @pytest.mark.skipif(
        hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file permissions"
    )
    def test_unreadable_file_is_corrupt(self, snapshot_path: Path) -> None:
        store = FileSnapshotStore(snapshot_path, fsync=False, on_corrupt="fail")
        store.save(_tables())
        snapshot_path.chmod(0)
        try:
            with pytest.raises(SnapshotCorruptError):
                store.load()
        finally:
            snapshot_path.chmod(0o644)


@pytest.mark.unit
class TestInMemorySnapshotStore:
    def test_round_trip(self) -> None:
        store = InMemorySnapshotStore()
        assert store.load() is None

        tables = _tables()
        store.save(tables)

        assert store.saves == 1
        assert store.load() == tables
        assert InMemorySnapshotStore(store.data).load() == tables

    def test_clear(self) -> None:
        store = InMemorySnapshotStore()
        store.save(_tables())

        store.clear()

        assert store.load() is None
        assert store.saves == 0
