# session_attendance/api/errors.py
"""
Maps domain error codes to HTTP responses.

STATUS_BY_CODE must cover every ErrorCode; the module refuses to import
otherwise, so a new error kind cannot silently fall through to a 500.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from session_attendance.core.errors import DomainError, ErrorCode
from session_attendance.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1

STATUS_BY_CODE: dict[ErrorCode, int] = {
    # Not-found class
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ATTENDANCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # Precondition-violation class
    ErrorCode.SESSION_PAST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SESSION_FULL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_JOINED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_ATTENDING: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_ON_WAITLIST: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_ON_WAITLIST: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_SESSION_HOST: status.HTTP_403_FORBIDDEN,
    ErrorCode.SESSION_NOT_STARTED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ATTENDANCE_ALREADY_MARKED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_PARTICIPANT: status.HTTP_400_BAD_REQUEST,
    # Concurrency class
    ErrorCode.TRANSACTION_TIMEOUT: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_unmapped = set(ErrorCode) - set(STATUS_BY_CODE)
if _unmapped:
    raise RuntimeError(f"ErrorCode values without an HTTP status: {sorted(c.value for c in _unmapped)}")


def domain_error_response(error: DomainError) -> JSONResponse:
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if error.retryable else None
    return JSONResponse(
        status_code=STATUS_BY_CODE[error.code],
        content=ErrorResponse(detail=error.message, code=error.code.value).model_dump(),
        headers=headers,
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.retryable:
        logger.warning(f"{request.method} {request.url.path} -> retryable {exc}")
    return domain_error_response(exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(detail="Internal server error", code="INTERNAL_ERROR").model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
