"""Pytest configuration and fixtures for tablestore tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator, Mapping

import pytest
from prometheus_client import CollectorRegistry

from tablestore.adapters.outbound import FileSnapshotStore, InMemorySnapshotStore
from tablestore.application import RecordStore
from tablestore.domain.entities import Table
from tablestore.domain.errors import SnapshotWriteError
from tablestore.infrastructure.config import Config, ObservabilityConfig, StorageConfig
from tablestore.infrastructure.container import Container
from tablestore.infrastructure.metrics import MetricsRegistry


class FlakySnapshotStore(InMemorySnapshotStore):
    """In-memory snapshot store whose saves can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_saves = False

    def save(self, tables: Mapping[str, Table]) -> int:
        if self.fail_saves:
            raise SnapshotWriteError("disk full")
        return super().save(tables)


@pytest.fixture(autouse=True)
def reset_container() -> Generator[None, None, None]:
    """Reset the DI container before and after each test."""
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def snapshot_path(temp_dir: Path) -> Path:
    return temp_dir / "data" / "tables.json"


@pytest.fixture
def test_config(snapshot_path: Path) -> Config:
    """Provide a test configuration writing into a temporary directory."""
    return Config(
        storage=StorageConfig(
            snapshot_path=snapshot_path,
            fsync=False,  # Faster for tests
        ),
        observability=ObservabilityConfig(log_level="WARNING", log_format="console"),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def memory_snapshots() -> FlakySnapshotStore:
    return FlakySnapshotStore()


@pytest.fixture
def store(memory_snapshots: FlakySnapshotStore, metrics_registry: MetricsRegistry) -> RecordStore:
    """A record store backed by in-memory snapshots."""
    return RecordStore(memory_snapshots, metrics=metrics_registry)


@pytest.fixture
def file_snapshots(snapshot_path: Path) -> FileSnapshotStore:
    return FileSnapshotStore(snapshot_path, fsync=False)


@pytest.fixture
def file_store(file_snapshots: FileSnapshotStore, metrics_registry: MetricsRegistry) -> RecordStore:
    """A record store persisting to a snapshot file in a temp directory."""
    return RecordStore(file_snapshots, metrics=metrics_registry)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
