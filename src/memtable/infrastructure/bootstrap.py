"""One-call setup of memtable's logging, tracing and metrics."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from opentelemetry import trace
from prometheus_client import CollectorRegistry

from memtable.infrastructure.config import Config, get_config
from memtable.infrastructure.logging import setup_logging
from memtable.infrastructure.metrics import MetricsRegistry, setup_metrics
from memtable.infrastructure.tracing import setup_tracing


@dataclass
class Observability:
    """What ``configure`` installed."""

    config: Config
    logger: structlog.stdlib.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry


def configure(
    config: Config | None = None,
    registry: CollectorRegistry | None = None,
) -> Observability:
    """Apply ``config.observability`` to logging, tracing and metrics.

    Embedding applications call this once at startup. Databases and tables
    created afterwards without an explicit metrics registry report to the
    one set up here.

    Args:
        config: Configuration to apply (read from the environment if None)
        registry: Prometheus registry for memtable's metrics

    Returns:
        The configured logger, tracer and metrics registry
    """
    config = config or get_config()
    logger = setup_logging(config)
    tracer = setup_tracing(config)
    metrics = setup_metrics(config, registry)

    logger.info(
        "memtable_configured",
        log_format=config.observability.log_format,
        metrics_port=config.observability.metrics_port,
        otel_endpoint=config.observability.otel_endpoint,
    )
    return Observability(config=config, logger=logger, tracer=tracer, metrics=metrics)
