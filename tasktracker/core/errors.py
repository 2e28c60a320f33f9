"""Exception taxonomy and error classification for repository operations."""

from enum import Enum

from pydantic import BaseModel


class TaskTrackerError(Exception):
    """Base class for all errors raised by tasktracker."""


class ValidationError(TaskTrackerError, ValueError):
    """Caller-supplied data violates a field constraint.

    Always raised before any mutation, so the caller can simply prompt again.
    """


class NotFoundError(TaskTrackerError, KeyError):
    """An operation referenced an id that is not in the collection."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument
        return str(self.args[0]) if self.args else ""


class StorageError(TaskTrackerError, RuntimeError):
    """The backing file could not be read or written, or its content is corrupt."""


DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Caller errors
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_DUPLICATE_EMAIL = "ERR_DUPLICATE_EMAIL"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"

    # Durability errors
    ERR_STORAGE = "ERR_STORAGE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised by a repository operation

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, ValidationError):
        if DUPLICATE_EMAIL_MESSAGE.lower() in str(exception).lower():
            return ErrorResponse(
                code=ErrorCode.ERR_DUPLICATE_EMAIL,
                message=str(exception),
                suggestion="Use a different email address or update the existing user.",
                severity=ErrorSeverity.LOW,
            )
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=str(exception),
            suggestion="Correct the highlighted field and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception),
            suggestion="List the collection to find a valid id.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StorageError):
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE,
            message="Changes could not be saved to disk.",
            suggestion="Check that the data directory is writable, then retry the operation.",
            severity=ErrorSeverity.CRITICAL,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again. If the problem persists, check the logs.",
        severity=ErrorSeverity.MEDIUM,
    )
