"""Batch export errors and failure classification.

BatchExportError and its subclasses carry messages that are safe to show
to the user who requested the export. Anything else a handler raises is
internal, and its text must not reach the persisted export log.
"""

from dataclasses import dataclass

GENERIC_ERROR_MESSAGE = "An internal error occurred"


class BatchExportError(Exception):
    """Base class for user-facing batch export errors.

    The message is written verbatim to the export's log.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidRequestError(BatchExportError):
    """Raised when the export request cannot be executed as given.

    Examples:
        - Unknown export format
        - Filter references a column that does not exist
    """

    pass


class ExportNotFoundError(BatchExportError):
    """Raised when the export or the data it references no longer exists."""

    pass


class ExportLimitExceededError(BatchExportError):
    """Raised when the export would exceed a size or rate limit."""

    pass


@dataclass(frozen=True)
class DomainFailure:
    """Failure caused by a user-facing batch export error."""

    error: BatchExportError

    @property
    def display_message(self) -> str:
        return self.error.message


@dataclass(frozen=True)
class OpaqueFailure:
    """Failure caused by anything else; its details stay internal."""

    cause: BaseException

    @property
    def display_message(self) -> str:
        return GENERIC_ERROR_MESSAGE


JobFailure = DomainFailure | OpaqueFailure


def classify_failure(error: BaseException) -> JobFailure:
    """Sort a handler error into the domain or opaque case."""
    if isinstance(error, BatchExportError):
        return DomainFailure(error)
    return OpaqueFailure(error)
