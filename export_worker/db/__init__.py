"""PostgreSQL access shared by the stores."""

from export_worker.db.errors import ConnectionError, StoreError
from export_worker.db.pool import PostgresPool

__all__ = ["PostgresPool", "StoreError", "ConnectionError"]
