"""Observability settings for the export worker process."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """structlog output written to stderr."""

    level: LogLevel = Field(
        default="INFO",
        description="DEBUG also shows swallowed queue length lookups",
    )
    format: LogFormat = Field(
        default="json",
        description="json for collectors, console for local runs",
    )
    redact_pii: bool = Field(
        default=True,
        description="Mask credentials and e-mail addresses in job and driver errors",
    )
    include_trace_ids: bool = Field(
        default=True,
        description="Add trace_id/span_id of the job span to each line",
    )


class TracingConfig(BaseModel):
    """Export of the per-job consumer spans."""

    enabled: bool = Field(default=True, description="Install a tracer provider at startup")
    service_name: str = Field(default="export-worker", description="service.name of job spans")
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC collector; OTEL_EXPORTER_OTLP_ENDPOINT when unset",
    )
    console_export: bool = Field(
        default=False,
        description="Also print finished job spans to stdout",
    )


class MetricsConfig(BaseModel):
    """Prometheus endpoint for the batch_export_queue_* metrics."""

    enabled: bool = Field(default=True, description="Serve /metrics from the worker")
    port: int = Field(default=9464, ge=1, le=65535, description="Scrape port")


class ObservabilityConfig(BaseModel):
    """Logging, tracing and metrics sections."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
