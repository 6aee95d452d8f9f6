"""Batch export domain: job payloads, statuses, errors and the status store."""

from export_worker.batch_exports.errors import (
    GENERIC_ERROR_MESSAGE,
    BatchExportError,
    DomainFailure,
    ExportLimitExceededError,
    ExportNotFoundError,
    InvalidRequestError,
    JobFailure,
    OpaqueFailure,
    classify_failure,
)
from export_worker.batch_exports.models import (
    BatchExportJob,
    BatchExportPayload,
    BatchExportRecord,
    BatchExportStatus,
)
from export_worker.batch_exports.store import BatchExportStore

__all__ = [
    "BatchExportJob",
    "BatchExportPayload",
    "BatchExportRecord",
    "BatchExportStatus",
    "BatchExportStore",
    "BatchExportError",
    "InvalidRequestError",
    "ExportNotFoundError",
    "ExportLimitExceededError",
    "GENERIC_ERROR_MESSAGE",
    "DomainFailure",
    "OpaqueFailure",
    "JobFailure",
    "classify_failure",
]
