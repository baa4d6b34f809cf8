"""Custom exception classes for the finance tracker.

Each exception carries an error code that maps to the catalog in
errors.py. Migration failures are split by the step that failed so the
orchestrator can report which phase aborted.
"""

from typing import Any


class FinanceTrackerError(Exception):
    """Base exception for all finance tracker errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "SYNC_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class PersistenceError(FinanceTrackerError):
    """Raised by a persistence gateway when a remote operation fails."""

    pass


class SnapshotError(FinanceTrackerError):
    """Raised when the local snapshot cannot be decoded or validated (SNAP_001)."""

    pass


class MigrationError(FinanceTrackerError):
    """Base class for fatal migration failures."""

    pass


class FetchError(MigrationError):
    """Remote categories or transactions could not be retrieved (SYNC_001)."""

    pass


class CategoryCreateError(MigrationError):
    """Bulk category insert failed (SYNC_002).

    Nothing has been committed when this is raised.
    """

    pass


class TransactionCreateError(MigrationError):
    """Bulk transaction insert failed (SYNC_003).

    Categories created earlier in the same migration stay committed.
    """

    pass


class NotFoundError(FinanceTrackerError):
    """Requested category or transaction does not exist."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=404)


class CategoryConflictError(FinanceTrackerError):
    """Category change rejected: duplicate key or protected default."""

    pass
