"""Batch export worker: consumes batch export jobs from the job queue."""

__version__ = "0.1.0"
