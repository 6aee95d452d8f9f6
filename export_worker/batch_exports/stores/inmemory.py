"""In-memory implementation of BatchExportStore."""

from datetime import datetime

from export_worker.batch_exports.models import BatchExportRecord, BatchExportStatus
from export_worker.batch_exports.store import BatchExportStore
from export_worker.observability.logging import get_logger

logger = get_logger(__name__)


class InMemoryBatchExportStore(BatchExportStore):
    """In-memory implementation of BatchExportStore for testing and development.

    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: dict[tuple[str, str], BatchExportRecord] = {}

    def add(self, record: BatchExportRecord) -> None:
        """Seed a record, as the export API would on request."""
        self._records[(record.id, record.project_id)] = record

    def get(self, batch_export_id: str, project_id: str) -> BatchExportRecord | None:
        """Get a record by its key."""
        return self._records.get((batch_export_id, project_id))

    async def update_status(
        self,
        batch_export_id: str,
        project_id: str,
        status: BatchExportStatus,
        finished_at: datetime,
        log: str | None,
    ) -> None:
        """Update the record in place; unknown keys are a no-op like an UPDATE matching no row."""
        key = (batch_export_id, project_id)
        record = self._records.get(key)
        if record is None:
            logger.warning(
                "batch_export_not_found",
                batch_export_id=batch_export_id,
                project_id=project_id,
            )
            return

        self._records[key] = record.model_copy(
            update={
                "status": status,
                "finished_at": finished_at,
                "log": log,
                "updated_at": finished_at,
            }
        )
