"""Batch export domain models.

A BatchExportJob is the unit the queue delivers: the export request
(payload), when it was enqueued, and the trace context of the operation
that enqueued it.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class BatchExportStatus(str, Enum):
    """Lifecycle status stored on a batch_exports row."""

    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class BatchExportPayload(BaseModel):
    """Export request carried by a queued job.

    Accepts the camelCase names producers put on the wire as well as the
    field names. Export parameters other than the identifiers are kept
    as extra fields and handed to the export handler untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    batch_export_id: str = Field(
        ...,
        alias="batchExportId",
        min_length=1,
        description="Identifier of the batch_exports row",
    )
    project_id: str = Field(
        ...,
        alias="projectId",
        min_length=1,
        description="Project owning the export",
    )

    @property
    def parameters(self) -> dict[str, Any]:
        """Export parameters besides the identifiers."""
        return dict(self.model_extra or {})


class BatchExportJob(BaseModel):
    """A batch export job as delivered by the queue runtime."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    payload: BatchExportPayload = Field(..., description="Export request")
    enqueued_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("enqueued_at", "enqueueTimestamp", "timestamp"),
        description="When the queue accepted the job",
    )
    trace_context: dict[str, str] | None = Field(
        default=None,
        validation_alias=AliasChoices("trace_context", "_tracecontext", "traceContext"),
        description="W3C trace context carrier injected by the producer",
    )
    job_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("job_id", "jobId", "id"),
        description="Queue-assigned job identifier, if any",
    )

    @field_validator("enqueued_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class BatchExportRecord(BaseModel):
    """The slice of a batch_exports row the worker reads and writes."""

    id: str = Field(..., description="Batch export identifier")
    project_id: str = Field(..., description="Owning project")
    status: BatchExportStatus = Field(
        default=BatchExportStatus.QUEUED, description="Lifecycle status"
    )
    finished_at: datetime | None = Field(default=None, description="Terminal time")
    log: str | None = Field(default=None, description="User-facing outcome summary")
    updated_at: datetime = Field(default_factory=utc_now, description="Last write")
