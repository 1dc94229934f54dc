# ============================================================================
# EXCEPTIONS
# ============================================================================
# STATUS: Shared - used by every layer
# PURPOSE: Exception hierarchy separating contract violations from expected workflow failures
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ContractViolationError, BusinessLogicError, TransportError, CommitRejectedError,
#          ValidationError, UnsupportedAssetError, BatchTooLargeError, InvalidAnnotationError,
#          ResourceNotFoundError, ConfigurationError
# DEPENDENCIES: core.errors (ErrorCode)
# ============================================================================

"""
Custom Exception Hierarchy

Distinguishes between:
1. Contract Violations (programming bugs that need fixing)
2. Business Logic Failures (expected runtime issues the user can recover from)

Lock conflicts (mutating a locked job) are NOT exceptions. Every mutator
treats them as a silent guard and returns without changing state.
"""

from typing import List, Optional

from core.errors import ErrorCode


class ContractViolationError(TypeError):
    """
    Raised when component contracts are violated (programming bugs).

    These indicate:
    - Wrong types passed across a component boundary
    - Grouping engine producing an inconsistent partition
    - Backend returning a payload that cannot be parsed into models

    These should NEVER be caught and handled - they indicate bugs
    that need to be fixed in the code.
    """
    pass


class BusinessLogicError(Exception):
    """
    Base class for expected runtime business logic failures.

    These are normal failures that occur during a workflow session
    and should be surfaced to the user as actionable messages.
    Every subclass carries the ErrorCode that decides between
    "fix input" and "try again" messaging.
    """

    default_error_code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code


class TransportError(BusinessLogicError):
    """
    Upload, fetch or commit request failed on the wire.

    Local state is never changed when this is raised, so the same
    operation can simply be retried.

    Examples:
        - Storage collaborator unreachable during upload
        - Stacks-fetch timed out after a successful upload
        - Backend returned 5xx on commit
    """

    default_error_code = ErrorCode.FETCH_FAILED

    def __init__(self, message: str, operation: Optional[str] = None,
                 error_code: Optional[ErrorCode] = None, status_code: Optional[int] = None):
        super().__init__(message, error_code)
        self.operation = operation
        self.status_code = status_code


class CommitRejectedError(TransportError):
    """
    Backend answered the lock commit with a rejection (4xx).

    The job stays unlocked; the commit is safe to retry after the
    cause has been resolved.
    """

    default_error_code = ErrorCode.COMMIT_REJECTED


class ValidationError(BusinessLogicError):
    """
    Lock attempted while one or more stacks have no room type.

    Carries the offending stack ids so the caller can show an
    actionable count and highlight the stacks on step 2.
    """

    default_error_code = ErrorCode.MISSING_ROOM_TYPE

    def __init__(self, message: str, offending_stack_ids: Optional[List[str]] = None):
        super().__init__(message)
        self.offending_stack_ids = list(offending_stack_ids or [])

    @property
    def count(self) -> int:
        """Number of stacks that blocked the lock."""
        return len(self.offending_stack_ids)


class UnsupportedAssetError(BusinessLogicError):
    """
    Every file in an upload batch had an unrecognized type.

    The batch is never submitted to the storage collaborator.
    """

    default_error_code = ErrorCode.UNSUPPORTED_ASSET

    def __init__(self, message: str, rejected_files: Optional[List[str]] = None):
        super().__init__(message)
        self.rejected_files = list(rejected_files or [])


class BatchTooLargeError(BusinessLogicError):
    """
    Upload batch exceeds the configured file limit.

    The batch is never submitted; the user splits it and retries.
    """

    default_error_code = ErrorCode.BATCH_TOO_LARGE

    def __init__(self, message: str, file_count: int = 0, limit: int = 0):
        super().__init__(message)
        self.file_count = file_count
        self.limit = limit


class InvalidAnnotationError(BusinessLogicError):
    """
    Annotation input rejected.

    Examples:
        - Room type not in the closed enumeration (INVALID_ROOM_TYPE)
        - Stack id not present in the current collection (UNKNOWN_STACK)
        - Panorama connection to itself (INVALID_CONNECTION)
        - Start panorama that does not exist (UNKNOWN_PANORAMA)
    """

    default_error_code = ErrorCode.INVALID_VALUE


class ResourceNotFoundError(BusinessLogicError):
    """
    Requested resource does not exist.

    Examples:
        - Job id unknown to the backend
    """

    default_error_code = ErrorCode.JOB_NOT_FOUND


class ConfigurationError(Exception):
    """
    System configuration error.

    Typically fatal; indicates misconfiguration that prevents the
    workflow engine from reaching its backend.

    Examples:
        - HTTP backend selected without WORKFLOW_API_BASE_URL
        - Unknown WORKFLOW_BACKEND value
    """

    error_code = ErrorCode.CONFIG_ERROR
