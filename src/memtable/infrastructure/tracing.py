"""OpenTelemetry tracing for memtable.

Spans are opened with ``trace_span``. Without ``setup_tracing`` they go to
whatever tracer provider the embedding application installed (a no-op one
by default).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from memtable.infrastructure.config import Config, get_config

TRACER_NAME = "memtable"

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: Config | None = None,
    exporter: SpanExporter | None = None,
) -> trace.Tracer:
    """Build a tracer provider from ``config.observability`` and use it.

    ``otel_endpoint`` adds a batched OTLP exporter and ``otel_console_export``
    a batched console exporter. ``exporter`` is attached synchronously, so
    its spans are visible as soon as they end.

    Args:
        config: Configuration to apply (the global one if None)
        exporter: Extra span exporter

    Returns:
        The tracer memtable's spans are recorded with from now on
    """
    global _tracer

    from memtable import __version__

    config = config or get_config()
    observability = config.observability

    resource = Resource.create(
        {
            "service.name": observability.otel_service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)

    if observability.otel_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=observability.otel_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    if observability.otel_console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    # The global provider can only be set once per process
    trace.set_tracer_provider(provider)

    _tracer = provider.get_tracer(TRACER_NAME, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the tracer memtable records spans with."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Open a span named ``name`` with optional attributes."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        yield span
