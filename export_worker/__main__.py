"""Run the batch export worker with ``python -m export_worker``."""

from export_worker.jobs.worker import main

main()
