"""Job configuration models.

Configuration for background job infrastructure.
"""

from pydantic import BaseModel, Field, SecretStr


class HatchetConfig(BaseModel):
    """Hatchet background job orchestration configuration.

    Hatchet owns delivery, retries and dead-lettering of batch export jobs.
    """

    enabled: bool = Field(default=True, description="Enable Hatchet integration")
    server_url: str = Field(
        default="http://localhost:7077",
        description="Hatchet engine server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Hatchet API token (set via EXPORT_WORKER_JOBS__HATCHET__API_KEY)",
    )
    worker_name: str = Field(
        default="export-worker",
        description="Name the worker registers under",
    )
    worker_concurrency: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of concurrent job runs",
    )
    retry_max_attempts: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries Hatchet applies to a failed export step",
    )
    step_timeout: str = Field(
        default="1h",
        description="Hatchet timeout for one export run",
    )


class BatchExportJobConfig(BaseModel):
    """Batch export consumer configuration."""

    workflow_name: str = Field(
        default="batch-export",
        description="Job type the consumer is registered for",
    )
    span_name: str = Field(
        default="batchExportJobExecutor",
        description="Name of the consumer span opened per job",
    )
    handler: str | None = Field(
        default=None,
        description="Export handler as 'module:attribute'",
    )
    queue_keys: list[str] = Field(
        default_factory=lambda: [
            "batch-export:wait",
            "batch-export:delayed",
        ],
        description="Redis keys summed into the queue length (storage.redis.enabled only)",
    )


class JobsConfig(BaseModel):
    """Top-level jobs configuration."""

    hatchet: HatchetConfig = Field(
        default_factory=HatchetConfig,
        description="Hatchet configuration",
    )
    batch_export: BatchExportJobConfig = Field(
        default_factory=BatchExportJobConfig,
        description="Batch export consumer configuration",
    )
