"""Infrastructure layer - cross-cutting concerns."""

from memtable.infrastructure.config import Config, get_config
from memtable.infrastructure.logging import setup_logging, get_logger
from memtable.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from memtable.infrastructure.tracing import setup_tracing, get_tracer, trace_span
from memtable.infrastructure.bootstrap import Observability, configure

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
    "Observability",
    "configure",
]
