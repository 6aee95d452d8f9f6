"""Hatchet workflow definitions.

- batch export: runs one batch export job per workflow run
"""

from export_worker.jobs.workflows.batch_export import build_job, register_workflow

__all__ = ["build_job", "register_workflow"]
