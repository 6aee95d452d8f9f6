"""Batch export queue processor.

Runs one batch export job through the external export handler and makes
its outcome observable:

- a CONSUMER span, parented on the trace context the producer attached
- queue wait time, request count, processing time and queue length metrics
- on failure, the export's status row is set to FAILED with a
  user-safe log message before the original error is re-raised

Retries and dead-lettering belong to the queue runtime. Completing the
export's status on success belongs to the handler.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol

from opentelemetry.trace import Span, SpanKind, Tracer
from structlog.contextvars import bound_contextvars

from export_worker.batch_exports.errors import classify_failure
from export_worker.batch_exports.models import (
    BatchExportJob,
    BatchExportPayload,
    BatchExportStatus,
    utc_now,
)
from export_worker.batch_exports.store import BatchExportStore
from export_worker.jobs.best_effort import best_effort
from export_worker.jobs.queue import QueueInspector
from export_worker.observability.logging import get_logger
from export_worker.observability.metrics import (
    BATCH_EXPORT_QUEUE_LENGTH,
    BATCH_EXPORT_QUEUE_PROCESSING_TIME,
    BATCH_EXPORT_QUEUE_REQUEST,
    BATCH_EXPORT_QUEUE_WAIT_TIME,
    MetricsSink,
)
from export_worker.observability.tracing import (
    create_span,
    extract_context,
    record_exception,
)

logger = get_logger(__name__)

DEFAULT_SPAN_NAME = "batchExportJobExecutor"


class ExportHandler(Protocol):
    """Executes the export described by a payload."""

    def __call__(self, payload: BatchExportPayload) -> Awaitable[None]: ...


def elapsed_ms(start: datetime, end: datetime) -> float:
    """Milliseconds from start to end, never negative."""
    return max(0.0, (end - start).total_seconds() * 1000)


class BatchExportQueueProcessor:
    """Executes batch export jobs with tracing, metrics and a failure trail.

    Holds no per-job state: one instance serves any number of concurrent
    jobs.
    """

    def __init__(
        self,
        handler: ExportHandler,
        status_store: BatchExportStore,
        metrics: MetricsSink,
        queue_inspector: QueueInspector | None = None,
        tracer: Tracer | None = None,
        span_name: str = DEFAULT_SPAN_NAME,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize processor.

        Args:
            handler: Export handler invoked with the job payload
            status_store: Store holding batch_exports status records
            metrics: Sink for queue metrics
            queue_inspector: Source of the queue length (skipped if None)
            tracer: Tracer for the consumer span (configured tracer if None)
            span_name: Name of the consumer span
            clock: Returns the current UTC time
        """
        self._handler = handler
        self._store = status_store
        self._metrics = metrics
        self._queue_inspector = queue_inspector
        self._tracer = tracer
        self._span_name = span_name
        self._clock = clock

    async def process(self, job: BatchExportJob) -> bool:
        """Run one job.

        Returns:
            True once the handler has succeeded

        Raises:
            Whatever the handler raised, after the failure has been recorded
        """
        payload = job.payload
        with create_span(
            self._span_name,
            kind=SpanKind.CONSUMER,
            context=extract_context(job.trace_context),
            tracer=self._tracer,
            record_exceptions=False,
            attributes={
                "messaging.operation": "process",
                "batch_export.id": payload.batch_export_id,
                "batch_export.project_id": payload.project_id,
            },
        ) as span:
            with bound_contextvars(
                batch_export_id=payload.batch_export_id,
                project_id=payload.project_id,
            ):
                try:
                    return await self._execute(job, span)
                except Exception as e:
                    await self._record_failure(job, span, e)
                    raise

    async def _execute(self, job: BatchExportJob, span: Span) -> bool:
        start = self._clock()
        wait_time_ms = elapsed_ms(job.enqueued_at, start)

        logger.info("batch_export_job_started", job_id=job.job_id, wait_time_ms=wait_time_ms)
        span.set_attribute("batch_export.wait_time_ms", wait_time_ms)

        self._metrics.increment(BATCH_EXPORT_QUEUE_REQUEST)
        self._metrics.observe(BATCH_EXPORT_QUEUE_WAIT_TIME, wait_time_ms, "milliseconds")

        await self._handler(job.payload)

        logger.info("batch_export_job_finished", job_id=job.job_id)

        await self._record_queue_length()
        self._metrics.observe(
            BATCH_EXPORT_QUEUE_PROCESSING_TIME,
            elapsed_ms(start, self._clock()),
            "milliseconds",
        )
        return True

    async def _record_queue_length(self) -> None:
        if self._queue_inspector is None:
            return

        length = await best_effort(
            "batch_export_queue_length",
            self._queue_inspector.current_depth,
            log_level="debug",
        )
        if length is None:
            return

        logger.debug("batch_export_queue_length", length=length)
        self._metrics.gauge(BATCH_EXPORT_QUEUE_LENGTH, length, "records")

    async def _record_failure(self, job: BatchExportJob, span: Span, error: Exception) -> None:
        """Mark the export FAILED, log the error and record it on the span.

        Only the status write is best-effort: a store failure is logged and
        swallowed. Errors from logging or the span propagate.
        """
        payload = job.payload
        failure = classify_failure(error)

        # A failed status write is logged by best_effort; the handler error
        # is what gets reported and re-raised.
        await best_effort(
            "batch_export_status_update",
            lambda: self._store.update_status(
                payload.batch_export_id,
                payload.project_id,
                BatchExportStatus.FAILED,
                self._clock(),
                failure.display_message,
            ),
            log_level="error",
        )

        logger.error(
            "batch_export_job_failed",
            job_id=job.job_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        record_exception(span, error)
