"""BatchExportStore implementations."""

from export_worker.batch_exports.stores.inmemory import InMemoryBatchExportStore
from export_worker.batch_exports.stores.postgres import PostgresBatchExportStore

__all__ = ["InMemoryBatchExportStore", "PostgresBatchExportStore"]
