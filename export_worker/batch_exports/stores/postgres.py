"""PostgreSQL implementation of BatchExportStore.

Uses asyncpg for async database access.
"""

from datetime import datetime

from export_worker.batch_exports.models import BatchExportStatus
from export_worker.batch_exports.store import BatchExportStore
from export_worker.db.errors import ConnectionError, StoreError
from export_worker.db.pool import PostgresPool
from export_worker.observability.logging import get_logger

logger = get_logger(__name__)

UPDATE_STATUS_SQL = """
    UPDATE batch_exports
    SET status = $3, finished_at = $4, log = $5, updated_at = $4
    WHERE id = $1 AND project_id = $2
"""


class PostgresBatchExportStore(BatchExportStore):
    """PostgreSQL implementation of BatchExportStore.

    Each status update is a single-row UPDATE keyed by (id, project_id),
    so it is atomic without an explicit transaction.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def update_status(
        self,
        batch_export_id: str,
        project_id: str,
        status: BatchExportStatus,
        finished_at: datetime,
        log: str | None,
    ) -> None:
        """Update status, finished_at and log of one export."""
        try:
            async with self._pool.acquire() as conn:
                result = await conn.execute(
                    UPDATE_STATUS_SQL,
                    batch_export_id,
                    project_id,
                    status.value,
                    finished_at,
                    log,
                )
        except StoreError:
            # Already wrapped and logged by the pool
            raise
        except Exception as e:
            logger.error(
                "postgres_update_batch_export_status_error",
                batch_export_id=batch_export_id,
                project_id=project_id,
                error=str(e),
            )
            raise ConnectionError(
                f"Failed to update batch export status: {e}", cause=e
            ) from e

        # asyncpg returns the command tag, e.g. "UPDATE 1"
        if result.endswith(" 0"):
            logger.warning(
                "batch_export_not_found",
                batch_export_id=batch_export_id,
                project_id=project_id,
            )
            return

        logger.debug(
            "batch_export_status_updated",
            batch_export_id=batch_export_id,
            project_id=project_id,
            status=status.value,
        )
