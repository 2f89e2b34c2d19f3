"""Dependency injection container for the table store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from tablestore.adapters.outbound import FileSnapshotStore, InMemorySnapshotStore
from tablestore.application import RecordStore
from tablestore.infrastructure.config import Config, get_config
from tablestore.infrastructure.logging import setup_logging
from tablestore.infrastructure.metrics import MetricsRegistry, setup_metrics
from tablestore.infrastructure.tracing import setup_tracing
from tablestore.ports.outbound import SnapshotStorePort


def build_snapshot_store(config: Config) -> SnapshotStorePort:
    """Pick the snapshot adapter described by the storage config."""
    storage = config.storage
    if storage.ephemeral:
        return InMemorySnapshotStore()
    return FileSnapshotStore(
        storage.snapshot_path,
        fsync=storage.fsync,
        on_corrupt=storage.on_corrupt,
    )


@dataclass
class Container:
    """Dependency injection container for table store components."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    store: RecordStore

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(
        cls,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> Container:
        """Create and initialize the container with all dependencies.

        Args:
            config: Configuration (environment-derived when omitted).
            metrics: Metrics registry; when omitted the global one is set
                up and its exporter started if metrics are enabled.

        Raises:
            SnapshotCorruptError: If the snapshot is unreadable and the
                storage policy is "fail".
        """
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        config.ensure_directories()
        observability = config.observability

        logger = setup_logging(observability.log_level, observability.log_format)
        tracer = setup_tracing(
            service_name=observability.otel_service_name,
            otlp_endpoint=observability.otel_endpoint,
        )
        if metrics is None:
            metrics = setup_metrics(
                port=observability.metrics_port,
                start_server=observability.metrics_enabled,
            )

        store = RecordStore(
            build_snapshot_store(config),
            rollback_on_persist_failure=config.storage.rollback_on_persist_failure,
            metrics=metrics,
        )

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            store=store,
        )

        logger.info(
            "tablestore_container_initialized",
            snapshot_path=None if config.storage.ephemeral else str(config.storage.snapshot_path),
            on_corrupt=config.storage.on_corrupt,
            rollback_on_persist_failure=config.storage.rollback_on_persist_failure,
            metrics_enabled=observability.metrics_enabled,
        )

        return cls._instance

    @classmethod
    def get(cls) -> Container:
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None
