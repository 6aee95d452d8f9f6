"""Store error hierarchy for production backends.

Store implementations wrap backend-specific errors in these classes.
"""


class StoreError(Exception):
    """Base exception for all store errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the store cannot be reached or a statement fails.

    Examples:
        - Database connection timeout
        - Pool exhausted
        - Network errors
    """

    pass
