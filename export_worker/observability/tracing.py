"""OpenTelemetry tracing for batch export jobs.

Producers attach a W3C trace context (``traceparent``/``tracestate``) to
each queued job. The worker continues that trace: the job's consumer span
is parented on the extracted context.
"""

import os
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

TRACER_NAME = "export-worker"

_tracer: Tracer | None = None
_propagator = TraceContextTextMapPropagator()


def setup_tracing(
    service_name: str = TRACER_NAME,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> Tracer:
    """Install a global TracerProvider exporting finished spans.

    Args:
        service_name: service.name resource attribute
        otlp_endpoint: OTLP gRPC endpoint; OTEL_EXPORTER_OTLP_ENDPOINT if None
        console_export: Also print spans to stdout

    Returns:
        The tracer used for job spans
    """
    global _tracer

    exporters: list[SpanExporter] = []
    endpoint = otlp_endpoint or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        exporters.append(OTLPSpanExporter(endpoint=endpoint, insecure=True))
    if console_export:
        exporters.append(ConsoleSpanExporter())

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    for exporter in exporters:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer(service_name)
    return _tracer


def get_tracer() -> Tracer:
    """Tracer from setup_tracing(), else one from the global provider."""
    return _tracer or trace.get_tracer(TRACER_NAME)


def extract_context(carrier: Mapping[str, str] | None) -> Context | None:
    """Parent context from a job's trace context carrier, None if empty."""
    if not carrier:
        return None
    return _propagator.extract(carrier=dict(carrier))


def current_trace_ids() -> dict[str, str]:
    """Hex trace_id and span_id of the active span; empty outside a trace."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format(span_context.trace_id, "032x"),
        "span_id": format(span_context.span_id, "016x"),
    }


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
    context: Context | None = None,
    tracer: Tracer | None = None,
    record_exceptions: bool = True,
) -> Generator[Span, None, None]:
    """Start a span and make it current for the duration of the block.

    With record_exceptions=False an escaping exception leaves the span
    untouched, for callers that report errors with record_exception().
    """
    with (tracer or get_tracer()).start_as_current_span(
        name,
        kind=kind,
        attributes=attributes,
        context=context,
        record_exception=record_exceptions,
        set_status_on_exception=record_exceptions,
    ) as span:
        yield span


def record_exception(span: Span, exception: BaseException) -> None:
    """Attach the exception as a span event and set ERROR status."""
    span.record_exception(exception, escaped=True)
    span.set_status(Status(StatusCode.ERROR, str(exception)))
