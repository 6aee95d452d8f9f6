"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

StatusStoreBackend = Literal["inmemory", "postgres"]


class PostgresConfig(BaseModel):
    """PostgreSQL connection pool configuration.

    The DSN should come from EXPORT_WORKER_STORAGE__POSTGRES__DSN or
    DATABASE_URL, not from config files.
    """

    backend: StatusStoreBackend = Field(
        default="postgres",
        description="Backend for batch export status records",
    )
    dsn: str | None = Field(
        default=None,
        description="Connection string (falls back to environment variables)",
    )
    min_pool_size: int = Field(
        default=1,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    command_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class RedisConfig(BaseModel):
    """Redis connection used for queue introspection.

    Only meaningful when jobs are queued in Redis lists, sets or sorted
    sets under queue_keys. Jobs delivered by Hatchet never appear there,
    so queue length reporting is off unless enabled explicitly.
    """

    enabled: bool = Field(
        default=False,
        description="Report queue length after successful jobs",
    )
    url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="Batch export status store",
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig,
        description="Queue introspection backend",
    )
