"""Application error taxonomy. Every error maps to a stable ``code`` in the response envelope."""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    VALIDATION_FAILED = "VALIDATION_FAILED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    VERSION_CONFLICT = "VERSION_CONFLICT"

    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_FAILED = "AUTH_FAILED"
    FORBIDDEN = "FORBIDDEN"

    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    DB_ERROR = "DB_ERROR"


class AppException(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.validation_errors = validation_errors
        super().__init__(self.message)


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.RESOURCE_NOT_FOUND
    default_message = "The requested resource was not found"


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.FORBIDDEN
    default_message = "You do not have permission to perform this action"


class UnauthorizedError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.AUTH_REQUIRED
    default_message = "Unauthorized"


class ValidationFailedError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.VALIDATION_FAILED
    default_message = "Validation failed"


class ConflictError(AppException):
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Resource already exists with this unique constraint"


class VersionConflictError(ConflictError):
    code = ErrorCode.VERSION_CONFLICT
    default_message = "The note was modified concurrently; reload it and retry"
