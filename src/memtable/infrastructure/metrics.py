"""Prometheus metrics for memtable."""

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

from memtable.infrastructure.config import Config, get_config


class MetricsRegistry:
    """Registry of all memtable metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Mutation metrics
        self.rows_mutated_total = Counter(
            "memtable_rows_mutated_total",
            "Total number of rows added, removed or edited",
            ["table", "operation"],  # operation: add, remove, edit
            registry=self._registry,
        )

        # Change broadcast metrics
        self.change_events_published_total = Counter(
            "memtable_change_events_published_total",
            "Total change events published to table channels",
            ["table"],
            registry=self._registry,
        )

        self.change_events_dropped_total = Counter(
            "memtable_change_events_dropped_total",
            "Total change events dropped by full subscriber buffers",
            ["table"],
            registry=self._registry,
        )

        # Observer metrics
        self.snapshots_published_total = Counter(
            "memtable_snapshots_published_total",
            "Total table snapshots published to observers",
            ["table"],
            registry=self._registry,
        )

        self.observers_active = Gauge(
            "memtable_observers_active",
            "Number of running table observers",
            registry=self._registry,
        )

        # Registry metrics
        self.tables = Gauge(
            "memtable_tables",
            "Number of tables registered across databases",
            registry=self._registry,
        )

        # Query metrics
        self.filter_latency_seconds = Histogram(
            "memtable_filter_latency_seconds",
            "Table filter latency in seconds",
            ["table"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        self.info = Info(
            "memtable",
            "memtable library information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(
    config: Config | None = None, registry: CollectorRegistry | None = None
) -> MetricsRegistry:
    """
    Set up the metrics registry and, optionally, the Prometheus HTTP exporter.

    The exporter is started only when ``config.observability.metrics_port``
    is set.

    Args:
        config: Configuration to apply (the global one if None)
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    config = config or get_config()
    _metrics = MetricsRegistry(registry)

    from memtable import __version__
    _metrics.info.info({
        "version": __version__,
    })

    port = config.observability.metrics_port
    if port is not None:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
