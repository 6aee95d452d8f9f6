"""Best-effort side operations.

Some steps around a job (reporting queue length, recording a failure)
must never change the job's outcome. best_effort runs such a step and
turns its failure into a log line and a None result.
"""

from collections.abc import Awaitable, Callable
from typing import Literal, TypeVar

from export_worker.observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

LogLevel = Literal["debug", "info", "warning", "error"]


async def best_effort(
    operation: str,
    call: Callable[[], Awaitable[T]],
    *,
    log_level: LogLevel = "warning",
) -> T | None:
    """Run call() and return its result, or None if it raised.

    Only Exception subclasses are absorbed; cancellation still propagates.

    Args:
        operation: Name used in the failure log
        call: Zero-argument callable returning the awaitable to run
        log_level: Level of the failure log

    Returns:
        The awaited result, or None on failure
    """
    try:
        return await call()
    except Exception as e:
        getattr(logger, log_level)(
            "best_effort_operation_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None
