"""asyncpg pool backing the batch export status store."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from export_worker.db.errors import ConnectionError
from export_worker.observability.logging import get_logger

logger = get_logger(__name__)

# Checked in order when no DSN is configured
DSN_ENV_VARS = ("EXPORT_WORKER_DATABASE_URL", "DATABASE_URL")

# Driver failures surfaced to the store as ConnectionError
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def resolve_dsn(dsn: str | None = None) -> str:
    """Return dsn, else the first DSN_ENV_VARS entry set, else one built from POSTGRES_*."""
    if dsn:
        return dsn
    for name in DSN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value

    env = os.environ.get
    return (
        f"postgresql://{env('POSTGRES_USER', 'postgres')}:{env('POSTGRES_PASSWORD', 'postgres')}"
        f"@{env('POSTGRES_HOST', 'localhost')}:{env('POSTGRES_PORT', '5432')}"
        f"/{env('POSTGRES_DB', 'postgres')}"
    )


class PostgresPool:
    """Lazily created asyncpg pool.

    run_worker connects it at startup so an unreachable database stops the
    worker before it takes a job; acquire() connects on first use otherwise.
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 1,
        max_size: int = 10,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float = 60.0,
    ) -> None:
        self.dsn = resolve_dsn(dsn)
        self._options: dict[str, Any] = {
            "min_size": min_size,
            "max_size": max_size,
            "max_inactive_connection_lifetime": max_inactive_connection_lifetime,
            "command_timeout": command_timeout,
        }
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Create the pool; a no-op once connected."""
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(dsn=self.dsn, **self._options)
        except Exception as e:
            logger.error("status_store_pool_connect_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e
        logger.info("status_store_pool_connected", **self._options)

    async def close(self) -> None:
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()
            logger.info("status_store_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection; driver errors inside the block raise ConnectionError."""
        await self.connect()
        try:
            async with self._pool.acquire() as connection:
                yield connection
        except DRIVER_ERRORS as e:
            logger.error("status_store_query_failed", error=str(e), error_type=type(e).__name__)
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e
