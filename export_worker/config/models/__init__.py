"""Configuration models for the export worker."""

from export_worker.config.models.jobs import (
    BatchExportJobConfig,
    HatchetConfig,
    JobsConfig,
)
from export_worker.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from export_worker.config.models.storage import (
    PostgresConfig,
    RedisConfig,
    StorageConfig,
)

__all__ = [
    "BatchExportJobConfig",
    "HatchetConfig",
    "JobsConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "TracingConfig",
    "PostgresConfig",
    "RedisConfig",
    "StorageConfig",
]
