"""Background job infrastructure.

Consumes batch export jobs delivered by Hatchet:
- BatchExportQueueProcessor: runs one job with tracing, metrics and a failure trail
- register_workflow: binds the processor to the batch export workflow

Usage:
    from export_worker.jobs import BatchExportQueueProcessor
    from export_worker.jobs.workflows import register_workflow

    processor = BatchExportQueueProcessor(handler, store, metrics)
    register_workflow(hatchet, processor)
"""

from export_worker.jobs.best_effort import best_effort
from export_worker.jobs.client import HatchetClient
from export_worker.jobs.processor import BatchExportQueueProcessor, ExportHandler
from export_worker.jobs.queue import QueueInspector, RedisQueueInspector

__all__ = [
    "BatchExportQueueProcessor",
    "ExportHandler",
    "HatchetClient",
    "QueueInspector",
    "RedisQueueInspector",
    "best_effort",
]
