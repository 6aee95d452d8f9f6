"""Observability for the export worker: structlog, OpenTelemetry, Prometheus."""

from export_worker.observability.logging import get_logger, setup_logging
from export_worker.observability.metrics import (
    BATCH_EXPORT_QUEUE_LENGTH,
    BATCH_EXPORT_QUEUE_PROCESSING_TIME,
    BATCH_EXPORT_QUEUE_REQUEST,
    BATCH_EXPORT_QUEUE_WAIT_TIME,
    MetricsSink,
    PrometheusMetricsSink,
    start_metrics_server,
)
from export_worker.observability.tracing import (
    create_span,
    current_trace_ids,
    extract_context,
    get_tracer,
    record_exception,
    setup_tracing,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Metrics
    "MetricsSink",
    "PrometheusMetricsSink",
    "start_metrics_server",
    "BATCH_EXPORT_QUEUE_REQUEST",
    "BATCH_EXPORT_QUEUE_WAIT_TIME",
    "BATCH_EXPORT_QUEUE_PROCESSING_TIME",
    "BATCH_EXPORT_QUEUE_LENGTH",
    # Tracing
    "setup_tracing",
    "get_tracer",
    "create_span",
    "extract_context",
    "current_trace_ids",
    "record_exception",
]
