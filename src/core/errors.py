"""Error taxonomy and client-facing error classification."""

from enum import Enum

from pydantic import BaseModel

from src.core.config import Constants


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Request errors
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_CONFLICT = "ERR_CONFLICT"

    # Auth errors
    ERR_UNAUTHENTICATED = "ERR_UNAUTHENTICATED"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"

    # Task errors
    ERR_CLAIM_CONFLICT = "ERR_CLAIM_CONFLICT"

    # Storage errors
    ERR_DATABASE = "ERR_DATABASE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class DevBoardError(Exception):
    """Base class for errors surfaced to API callers."""

    code: str = ErrorCode.ERR_UNKNOWN
    status_code: int = Constants.HTTP_SERVER_ERROR
    severity: ErrorSeverity = ErrorSeverity.MEDIUM

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DevBoardError):
    """Malformed or missing required input."""

    code = ErrorCode.ERR_VALIDATION
    status_code = Constants.HTTP_BAD_REQUEST
    severity = ErrorSeverity.LOW


class NotFoundError(DevBoardError):
    """Target entity does not exist."""

    code = ErrorCode.ERR_NOT_FOUND
    status_code = Constants.HTTP_NOT_FOUND
    severity = ErrorSeverity.LOW


class ConflictError(DevBoardError):
    """Unique constraint collision (duplicate username or email)."""

    code = ErrorCode.ERR_CONFLICT
    status_code = Constants.HTTP_BAD_REQUEST
    severity = ErrorSeverity.LOW


class UnauthenticatedError(DevBoardError):
    """No authenticated caller, or credentials did not match."""

    code = ErrorCode.ERR_UNAUTHENTICATED
    status_code = Constants.HTTP_UNAUTHORIZED
    severity = ErrorSeverity.LOW


class ForbiddenError(DevBoardError):
    """Caller's role or relationship to the task does not allow the action."""

    code = ErrorCode.ERR_FORBIDDEN
    status_code = Constants.HTTP_FORBIDDEN
    severity = ErrorSeverity.LOW


class ClaimConflictError(DevBoardError):
    """Task could not be claimed: missing, not claimable, or already assigned."""

    code = ErrorCode.ERR_CLAIM_CONFLICT
    status_code = Constants.HTTP_BAD_REQUEST
    severity = ErrorSeverity.LOW


class DatabaseError(DevBoardError):
    """Storage-layer fault (connectivity, corruption, missing schema)."""

    code = ErrorCode.ERR_DATABASE
    status_code = Constants.HTTP_SERVER_ERROR
    severity = ErrorSeverity.CRITICAL


class ErrorResponse(BaseModel):
    """Structured error response returned to API callers."""

    code: str
    message: str
    status_code: int
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response.

    Known ``DevBoardError`` subclasses keep their own message. Storage faults and
    anything unexpected collapse into a generic server error so internal details
    never reach the client.

    Args:
        exception: The exception raised while handling a request

    Returns:
        ErrorResponse with code, message, HTTP status and severity
    """
    if isinstance(exception, DatabaseError):
        return ErrorResponse(
            code=exception.code,
            message="A storage error occurred. Please try again later.",
            status_code=exception.status_code,
            severity=exception.severity,
        )

    if isinstance(exception, DevBoardError):
        return ErrorResponse(
            code=exception.code,
            message=exception.message,
            status_code=exception.status_code,
            severity=exception.severity,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        status_code=Constants.HTTP_SERVER_ERROR,
        severity=ErrorSeverity.HIGH,
    )
