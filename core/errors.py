"""
Error Code Definitions and Classification.

Centralized error code management with retry logic and consistent
error responses for everything the workflow surfaces to the user.

Key Features:
    - Explicit error codes for all failure modes
    - Retry classification (PERMANENT, TRANSIENT)
    - Helper function to determine if error should retry

Exports:
    ErrorCode: Standardized error codes enum
    ErrorClassification: Error category enum
    is_retryable: Helper to check if error should be retried
    get_error_classification: Classification lookup
    create_error_response: User-visible error dictionary
    error_response_for: Error dictionary built from a caught workflow error
"""

from enum import Enum
from typing import Dict, Any, Tuple


class ErrorCode(str, Enum):
    """
    Standardized error codes for workflow errors.

    Returned in error responses so the surrounding application can
    decide between "fix input" and "try again" messaging.
    """

    # ========================================================================
    # INPUT ERRORS - user must change something (NOT RETRYABLE as-is)
    # ========================================================================

    MISSING_ROOM_TYPE = "MISSING_ROOM_TYPE"  # Lock blocked by unassigned stacks
    INVALID_ROOM_TYPE = "INVALID_ROOM_TYPE"  # Room type outside the enumeration
    UNSUPPORTED_ASSET = "UNSUPPORTED_ASSET"  # File type not accepted for upload
    BATCH_TOO_LARGE = "BATCH_TOO_LARGE"  # More files than one upload accepts
    UNKNOWN_STACK = "UNKNOWN_STACK"  # Stack id not in current collection
    UNKNOWN_PANORAMA = "UNKNOWN_PANORAMA"  # Panorama id not in graph
    INVALID_CONNECTION = "INVALID_CONNECTION"  # Self-loop in panorama graph
    INVALID_VALUE = "INVALID_VALUE"  # Value outside a closed vocabulary
    JOB_NOT_FOUND = "JOB_NOT_FOUND"  # Backend does not know the job

    # ========================================================================
    # TRANSPORT ERRORS - retry the same operation (RETRYABLE)
    # ========================================================================

    UPLOAD_FAILED = "UPLOAD_FAILED"  # Upload request failed
    FETCH_FAILED = "FETCH_FAILED"  # Job or stacks fetch failed
    COMMIT_FAILED = "COMMIT_FAILED"  # Commit request failed on the wire
    COMMIT_REJECTED = "COMMIT_REJECTED"  # Backend refused the commit
    TIMEOUT = "TIMEOUT"  # Transport timeout

    # ========================================================================
    # GENERIC ERRORS
    # ========================================================================

    CONFIG_ERROR = "CONFIG_ERROR"  # Misconfiguration
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"  # Unexpected exception


class ErrorClassification(str, Enum):
    """
    Error classification for retry logic.

    Determines whether an error should be offered as "retry" or needs
    the user to change input first.
    """

    PERMANENT = "PERMANENT"  # Never retry as-is
    TRANSIENT = "TRANSIENT"  # Retry the same operation


_ERROR_CLASSIFICATION: Dict[ErrorCode, ErrorClassification] = {
    ErrorCode.MISSING_ROOM_TYPE: ErrorClassification.PERMANENT,
    ErrorCode.INVALID_ROOM_TYPE: ErrorClassification.PERMANENT,
    ErrorCode.UNSUPPORTED_ASSET: ErrorClassification.PERMANENT,
    ErrorCode.BATCH_TOO_LARGE: ErrorClassification.PERMANENT,
    ErrorCode.UNKNOWN_STACK: ErrorClassification.PERMANENT,
    ErrorCode.UNKNOWN_PANORAMA: ErrorClassification.PERMANENT,
    ErrorCode.INVALID_CONNECTION: ErrorClassification.PERMANENT,
    ErrorCode.INVALID_VALUE: ErrorClassification.PERMANENT,
    ErrorCode.JOB_NOT_FOUND: ErrorClassification.PERMANENT,
    ErrorCode.CONFIG_ERROR: ErrorClassification.PERMANENT,

    ErrorCode.UPLOAD_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.FETCH_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.COMMIT_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.COMMIT_REJECTED: ErrorClassification.TRANSIENT,  # Retry after fixing cause
    ErrorCode.TIMEOUT: ErrorClassification.TRANSIENT,
    ErrorCode.UNEXPECTED_ERROR: ErrorClassification.TRANSIENT,
}


def get_error_classification(error_code: ErrorCode) -> ErrorClassification:
    """
    Get the classification for an error code.

    Args:
        error_code: ErrorCode enum value

    Returns:
        ErrorClassification enum value (TRANSIENT when unmapped)
    """
    return _ERROR_CLASSIFICATION.get(error_code, ErrorClassification.TRANSIENT)


def is_retryable(error_code: ErrorCode) -> bool:
    """
    Determine if an error code should be offered as retryable.

    Example:
        >>> is_retryable(ErrorCode.MISSING_ROOM_TYPE)
        False
        >>> is_retryable(ErrorCode.UPLOAD_FAILED)
        True
    """
    return get_error_classification(error_code) != ErrorClassification.PERMANENT


def create_error_response(
    error_code: ErrorCode,
    message: str,
    **kwargs: Any
) -> Dict[str, Any]:
    """
    Create a standardized, user-visible error dictionary.

    Args:
        error_code: ErrorCode enum value
        message: Human-readable error message
        **kwargs: Additional fields to include in response

    Example:
        >>> create_error_response(
        ...     ErrorCode.MISSING_ROOM_TYPE,
        ...     "2 stacks have no room type",
        ...     offending_stack_ids=["stk-a", "stk-b"]
        ... )
        {
            "success": False,
            "error": "MISSING_ROOM_TYPE",
            "error_type": "ValidationError",
            "message": "2 stacks have no room type",
            "retryable": False,
            "offending_stack_ids": ["stk-a", "stk-b"]
        }
    """
    return {
        "success": False,
        "error": error_code.value,
        "error_type": kwargs.pop("error_type", "ValidationError"),
        "message": message,
        "retryable": is_retryable(error_code),
        **kwargs
    }


# Exception attributes copied into the response when present
_RESPONSE_ATTRIBUTES: Tuple[str, ...] = (
    "offending_stack_ids",
    "rejected_files",
    "file_count",
    "limit",
    "operation",
    "status_code",
)


def error_response_for(exc: Exception) -> Dict[str, Any]:
    """
    Build the user-visible error dictionary for a caught workflow error.

    The code comes from the exception's ``error_code`` attribute, falling
    back to UNEXPECTED_ERROR for exceptions that carry none.
    """
    error_code = getattr(exc, "error_code", None) or ErrorCode.UNEXPECTED_ERROR
    extras = {
        name: getattr(exc, name)
        for name in _RESPONSE_ATTRIBUTES
        if getattr(exc, name, None) is not None
    }
    return create_error_response(
        error_code,
        str(exc),
        error_type=type(exc).__name__,
        **extras
    )
