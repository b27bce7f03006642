"""Maps every failure onto the ``{success: false, error: {...}}`` envelope."""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from memshelf.config import settings
from memshelf.errors import AppException, ErrorCode
from memshelf.schemas.errors import ErrorBody, ErrorResponse, ValidationErrorDetail

logger = logging.getLogger(__name__)

HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_FAILED,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.AUTH_REQUIRED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.RESOURCE_NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.DUPLICATE_RESOURCE,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorCode.RATE_LIMIT_EXCEEDED,
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    validation_errors: list[dict[str, Any]] | None = None,
    exc: BaseException | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    stack = None
    if exc is not None and settings.expose_error_details:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = ErrorResponse(
        error=ErrorBody(
            code=code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            validation_errors=[ValidationErrorDetail(**e) for e in validation_errors] if validation_errors else None,
            stack=stack,
        )
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


def _validation_path(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts) or "root"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "%s: %s",
        exc.code.value,
        exc.message,
        extra={"request_id": _request_id(request), "path": request.url.path},
    )
    return _error_response(exc.status_code, exc.code, exc.message, exc.validation_errors, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"path": _validation_path(error["loc"]), "message": error["msg"], "code": error["type"]}
        for error in exc.errors()
    ]
    logger.info(
        "Validation failed with %d errors",
        len(details),
        extra={"request_id": _request_id(request), "path": request.url.path},
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.VALIDATION_FAILED,
        "Validation failed",
        validation_errors=details,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error: %s", exc.orig, extra={"request_id": _request_id(request)})
    return _error_response(
        status.HTTP_409_CONFLICT,
        ErrorCode.DUPLICATE_RESOURCE,
        "Resource already exists with this unique constraint",
        exc=exc,
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, extra={"request_id": _request_id(request)}, exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.DB_ERROR,
        "Database error",
        exc=exc,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.UNKNOWN_ERROR)
    return _error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded", extra={"request_id": _request_id(request), "limit": str(exc.detail)})
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorCode.RATE_LIMIT_EXCEEDED,
        f"Rate limit exceeded: {exc.detail}",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"request_id": _request_id(request), "path": request.url.path, "method": request.method},
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_SERVER_ERROR,
        "Internal server error",
        exc=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
