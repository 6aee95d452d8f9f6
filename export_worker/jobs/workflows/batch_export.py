"""Batch export workflow.

Registers the batch export consumer with Hatchet. Each workflow run
carries one job:

    {
        "payload": {"batchExportId": "...", "projectId": "...", ...},
        "enqueued_at": "2024-05-01T12:00:00Z",
        "_tracecontext": {"traceparent": "00-..."}
    }

A step that raises is retried by Hatchet up to the configured number of
attempts; each attempt is a fresh run of the processor.
"""

from typing import Any

from export_worker.batch_exports.models import BatchExportJob
from export_worker.config.models.jobs import BatchExportJobConfig, HatchetConfig
from export_worker.jobs.processor import BatchExportQueueProcessor


def build_job(workflow_input: dict[str, Any], run_id: str | None = None) -> BatchExportJob:
    """Build a BatchExportJob from a workflow input dict.

    Args:
        workflow_input: Input the producer triggered the workflow with
        run_id: Hatchet run id, used when the input carries no job id

    Returns:
        Validated job
    """
    data = dict(workflow_input)
    if run_id and not any(key in data for key in ("job_id", "jobId", "id")):
        data["job_id"] = run_id
    return BatchExportJob.model_validate(data)


def register_workflow(
    hatchet: Any,
    processor: BatchExportQueueProcessor,
    job_config: BatchExportJobConfig | None = None,
    hatchet_config: HatchetConfig | None = None,
) -> Any:
    """Register the batch export workflow with Hatchet.

    Args:
        hatchet: Hatchet SDK instance
        processor: Processor executing each job
        job_config: Batch export consumer configuration
        hatchet_config: Retry and timeout settings

    Returns:
        Registered Hatchet workflow class
    """
    job_config = job_config or BatchExportJobConfig()
    hatchet_config = hatchet_config or HatchetConfig()

    @hatchet.workflow(name=job_config.workflow_name, on_events=[job_config.workflow_name])
    class HatchetBatchExportWorkflow:
        """Hatchet workflow wrapper for batch export jobs."""

        @hatchet.step(
            timeout=hatchet_config.step_timeout,
            retries=hatchet_config.retry_max_attempts,
        )
        async def export(self, context: Any) -> dict:
            """Execute the batch export step."""
            run_id = getattr(context, "workflow_run_id", None)
            job = build_job(
                context.workflow_input() or {},
                run_id() if callable(run_id) else run_id,
            )
            success = await processor.process(job)
            return {
                "batch_export_id": job.payload.batch_export_id,
                "project_id": job.payload.project_id,
                "success": success,
            }

    return HatchetBatchExportWorkflow
