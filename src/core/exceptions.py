"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class TodoNotFoundError(AppException):
    """Todo not found, or not owned by the caller."""

    def __init__(self, todo_id: int | str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {todo_id}",
            status_code=404,
            details={"todo_id": str(todo_id)},
        )


class TodoValidationError(AppException):
    """Malformed input rejected before touching storage."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=reason,
            status_code=400,
            details={"reason": reason},
        )
        self.reason = reason


class StorageFailure(AppException):
    """The transaction could not commit (contention, connectivity).

    Nothing was written. Callers may retry; every operation recomputes
    from a fresh snapshot.
    """

    def __init__(self, message: str = "Storage transaction failed") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=503,
            details={"retryable": True},
        )
