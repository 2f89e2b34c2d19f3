"""Prometheus metrics for the table store."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all table store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Store operation metrics
        self.operations_total = Counter(
            "tablestore_operations_total",
            "Total number of store operations",
            ["operation", "status"],  # status: ok or an error code
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "tablestore_operation_latency_seconds",
            "Store operation latency in seconds",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        self.tables = Gauge(
            "tablestore_tables",
            "Number of tables in the store",
            registry=self._registry,
        )

        self.rows_inserted_total = Counter(
            "tablestore_rows_inserted_total",
            "Total rows accepted into any table",
            registry=self._registry,
        )

        # Snapshot metrics
        self.snapshot_writes_total = Counter(
            "tablestore_snapshot_writes_total",
            "Total snapshot writes",
            ["status"],  # ok, serialization_failed, write_failed
            registry=self._registry,
        )

        self.snapshot_write_latency_seconds = Histogram(
            "tablestore_snapshot_write_latency_seconds",
            "Full snapshot write latency in seconds",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.snapshot_bytes = Gauge(
            "tablestore_snapshot_bytes",
            "Size of the last snapshot written in bytes",
            registry=self._registry,
        )

        # Lock metrics
        self.lock_wait_seconds = Histogram(
            "tablestore_lock_wait_seconds",
            "Time spent waiting for the store lock",
            ["mode"],  # read, write
            buckets=(0.0001, 0.001, 0.01, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "tablestore",
            "Table store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The Prometheus registry the metrics are registered with."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(
    port: int = 8001,
    registry: CollectorRegistry | None = None,
    start_server: bool = True,
) -> MetricsRegistry:
    """
    Set up Prometheus metrics.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry
        start_server: Whether to start the HTTP exporter

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from tablestore import __version__
    _metrics.info.info({
        "version": __version__,
    })

    if start_server:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
