"""Infrastructure layer - cross-cutting concerns."""

from tablestore.infrastructure.config import Config, get_config
from tablestore.infrastructure.logging import setup_logging, get_logger
from tablestore.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from tablestore.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
