"""BatchExportStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from export_worker.batch_exports.models import BatchExportStatus


class BatchExportStore(ABC):
    """Abstract interface to the batch_exports records.

    The worker only ever updates the status of an existing export;
    rows are created by the API that accepts export requests.
    """

    @abstractmethod
    async def update_status(
        self,
        batch_export_id: str,
        project_id: str,
        status: BatchExportStatus,
        finished_at: datetime,
        log: str | None,
    ) -> None:
        """Set status, finished_at and log on the export keyed by (id, project).

        Repeated calls overwrite each other (last write wins).
        """
        pass
