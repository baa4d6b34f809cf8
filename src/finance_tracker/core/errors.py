"""Error codes and user-friendly messages.

This module defines the error catalog for the finance tracker.
Each error has:
- error_code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

# Error catalog for migration, sync and CRUD operations
ERROR_CATALOG: dict[str, dict] = {
    "SYNC_001": {
        "code": "SYNC_001",
        "message": "Failed to fetch remote categories or transactions",
        "user_message": "We couldn't load your data from the cloud.",
        "suggestion": "Check your connection and try the migration again.",
        "retry_allowed": True,
    },
    "SYNC_002": {
        "code": "SYNC_002",
        "message": "Bulk category insert failed during migration",
        "user_message": "We couldn't upload your custom categories.",
        "suggestion": "No data was migrated. Please try again.",
        "retry_allowed": True,
    },
    "SYNC_003": {
        "code": "SYNC_003",
        "message": "Bulk transaction insert failed during migration",
        "user_message": "We couldn't upload your transactions.",
        "suggestion": "Your categories were uploaded. Run the migration again to upload the transactions.",
        "retry_allowed": True,
    },
    "SNAP_001": {
        "code": "SNAP_001",
        "message": "Local snapshot could not be decoded or validated",
        "user_message": "Your local data appears to be damaged.",
        "suggestion": "Export a backup of your local data and contact support.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
    # API-specific errors
    "API_001": {
        "code": "API_001",
        "message": "Category not found",
        "user_message": "We couldn't find this category.",
        "suggestion": "Please refresh and choose an existing category.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "API_003": {
        "code": "API_003",
        "message": "Default categories cannot be modified or deleted",
        "user_message": "Built-in categories can't be changed.",
        "suggestion": "Create a custom category instead.",
        "retry_allowed": False,
    },
    "API_004": {
        "code": "API_004",
        "message": "Category with this type and name already exists",
        "user_message": "A category with this name already exists.",
        "suggestion": "Choose a different name for the category.",
        "retry_allowed": False,
    },
    "API_005": {
        "code": "API_005",
        "message": "Transaction type does not match category type",
        "user_message": "This category can't be used for this kind of transaction.",
        "suggestion": "Pick an income category for income and an expense category for expenses.",
        "retry_allowed": False,
    },
    "API_006": {
        "code": "API_006",
        "message": "Category is still referenced by transactions",
        "user_message": "This category is used by existing transactions.",
        "suggestion": "Move or delete those transactions first.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
