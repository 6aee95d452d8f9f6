"""Hatchet worker entrypoint for batch export jobs.

Usage:
    # CLI command (defined in pyproject.toml), handler from configuration
    export-worker

    # Programmatic usage
    from export_worker.jobs.worker import run_worker
    await run_worker(handle_batch_export_job)
"""

import asyncio
import pkgutil
import signal
import sys
from contextlib import suppress
from typing import Any

from redis.asyncio import Redis

from export_worker.batch_exports.store import BatchExportStore
from export_worker.batch_exports.stores.inmemory import InMemoryBatchExportStore
from export_worker.batch_exports.stores.postgres import PostgresBatchExportStore
from export_worker.config import get_settings
from export_worker.config.settings import Settings
from export_worker.db.pool import PostgresPool
from export_worker.jobs.client import HatchetClient
from export_worker.jobs.processor import BatchExportQueueProcessor, ExportHandler
from export_worker.jobs.queue import RedisQueueInspector
from export_worker.jobs.workflows.batch_export import register_workflow
from export_worker.observability.logging import get_logger, setup_logging
from export_worker.observability.metrics import PrometheusMetricsSink, start_metrics_server
from export_worker.observability.tracing import get_tracer, setup_tracing

logger = get_logger(__name__)


def resolve_handler(path: str) -> ExportHandler:
    """Import the export handler named by a 'module:attribute' path."""
    handler = pkgutil.resolve_name(path)
    if not callable(handler):
        raise TypeError(f"Export handler {path!r} is not callable")
    return handler


def configure_observability(settings: Settings) -> None:
    """Set up logging, tracing and the metrics endpoint from settings."""
    observability = settings.observability

    setup_logging(
        level=observability.logging.level,
        format=observability.logging.format,
        redact_pii=observability.logging.redact_pii,
        include_trace_ids=observability.logging.include_trace_ids,
    )

    if observability.tracing.enabled:
        setup_tracing(
            service_name=observability.tracing.service_name,
            otlp_endpoint=observability.tracing.otlp_endpoint,
            console_export=observability.tracing.console_export,
        )

    if observability.metrics.enabled:
        start_metrics_server(observability.metrics.port)


def create_status_store(settings: Settings) -> tuple[BatchExportStore, PostgresPool | None]:
    """Create the batch export status store from configuration.

    Returns:
        Tuple of (store, pool); pool is None for the in-memory backend
    """
    postgres = settings.storage.postgres
    if postgres.backend == "inmemory":
        logger.warning("status_store_created", backend="inmemory")
        return InMemoryBatchExportStore(), None

    pool = PostgresPool(
        dsn=postgres.dsn,
        min_size=postgres.min_pool_size,
        max_size=postgres.max_pool_size,
        max_inactive_connection_lifetime=postgres.max_inactive_connection_lifetime,
        command_timeout=postgres.command_timeout,
    )
    logger.info("status_store_created", backend="postgres")
    return PostgresBatchExportStore(pool), pool


def create_queue_inspector(settings: Settings) -> RedisQueueInspector | None:
    """Create the queue inspector, or None when queue length reporting is off."""
    redis_config = settings.storage.redis
    if not redis_config.enabled:
        return None

    redis = Redis.from_url(redis_config.url)
    logger.info(
        "queue_inspector_created",
        url=redis_config.url.split("@")[-1],
        keys=settings.jobs.batch_export.queue_keys,
    )
    return RedisQueueInspector(redis, settings.jobs.batch_export.queue_keys)


def create_processor(
    settings: Settings,
    handler: ExportHandler,
    status_store: BatchExportStore,
    queue_inspector: RedisQueueInspector | None,
) -> BatchExportQueueProcessor:
    """Wire the processor with the process-wide metrics sink and tracer."""
    return BatchExportQueueProcessor(
        handler=handler,
        status_store=status_store,
        metrics=PrometheusMetricsSink(),
        queue_inspector=queue_inspector,
        tracer=get_tracer(),
        span_name=settings.jobs.batch_export.span_name,
    )


def create_worker(hatchet: Any, processor: BatchExportQueueProcessor, settings: Settings) -> Any:
    """Create a Hatchet worker with the batch export workflow registered."""
    hatchet_config = settings.jobs.hatchet
    workflow_class = register_workflow(
        hatchet,
        processor,
        job_config=settings.jobs.batch_export,
        hatchet_config=hatchet_config,
    )

    worker = hatchet.worker(
        hatchet_config.worker_name,
        max_runs=hatchet_config.worker_concurrency,
    )
    worker.register_workflow(workflow_class())

    logger.info(
        "workflow_registered",
        workflow_name=settings.jobs.batch_export.workflow_name,
        registered_class=workflow_class.__name__,
        concurrency=hatchet_config.worker_concurrency,
    )
    return worker


async def run_worker(handler: ExportHandler, settings: Settings | None = None) -> None:
    """Run the batch export worker until SIGINT/SIGTERM.

    This function:
    1. Configures logging, tracing and metrics
    2. Creates the status store and queue inspector
    3. Registers the batch export workflow with Hatchet
    4. Starts the worker and blocks until shutdown
    """
    settings = settings or get_settings()
    configure_observability(settings)

    hatchet_config = settings.jobs.hatchet
    logger.info(
        "export_worker_starting",
        server_url=hatchet_config.server_url,
        concurrency=hatchet_config.worker_concurrency,
    )

    hatchet = HatchetClient(hatchet_config).get_client()
    if hatchet is None:
        raise RuntimeError("Hatchet client unavailable - is it enabled and hatchet-sdk installed?")

    status_store, pool = create_status_store(settings)
    queue_inspector = create_queue_inspector(settings)

    try:
        if pool is not None:
            await pool.connect()

        processor = create_processor(settings, handler, status_store, queue_inspector)
        worker = create_worker(hatchet, processor, settings)

        shutdown_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown_event.set)

        worker_task = asyncio.create_task(worker.async_start())
        logger.info("export_worker_ready")

        await shutdown_event.wait()
        logger.info("shutting_down_worker")

        worker_task.cancel()
        with suppress(asyncio.CancelledError):
            await worker_task
    finally:
        if queue_inspector is not None:
            await queue_inspector.close()
        if pool is not None:
            await pool.close()
        logger.info("export_worker_stopped")


def main() -> None:
    """CLI entrypoint for the batch export worker.

    This is registered as a console script in pyproject.toml:
        [project.scripts]
        export-worker = "export_worker.jobs.worker:main"
    """
    settings = get_settings()
    handler_path = settings.jobs.batch_export.handler
    if not handler_path:
        logger.error(
            "worker_startup_failed",
            error="jobs.batch_export.handler is not configured",
        )
        sys.exit(1)

    try:
        asyncio.run(run_worker(resolve_handler(handler_path), settings))
    except KeyboardInterrupt:
        logger.info("worker_interrupted")
        sys.exit(0)
    except Exception as e:
        logger.error(
            "worker_startup_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
