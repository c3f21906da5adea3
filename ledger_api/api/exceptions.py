"""
Maps ledger errors to HTTP responses.

Client errors carry their message and code. Storage failures and anything
unexpected return a generic message; details only go to the server log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ledger_api.core.errors import (
    FieldError,
    InsufficientFunds,
    InvalidArgument,
    LedgerError,
    LockTimeout,
    NotFound,
    StorageFailure,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

# Checked in order; the first matching base class wins
_STATUS_CODES = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InsufficientFunds, status.HTTP_409_CONFLICT),
    (LockTimeout, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: LedgerError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_body(exc: LedgerError) -> dict:
    body = {"detail": exc.message, "error": exc.code}
    if exc.errors:
        body["errors"] = [error.as_dict() for error in exc.errors]
    return body


def _location(loc) -> str:
    # Drop the leading "body"/"path"/"query" segment FastAPI adds
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        if isinstance(exc, StorageFailure):
            logger.error(
                "request.failed",
                extra={"path": request.url.path, "error": exc.code},
                exc_info=exc,
            )
            return JSONResponse(
                status_code=status_for(exc),
                content={"detail": GENERIC_ERROR_MESSAGE, "error": exc.code},
            )
        return JSONResponse(status_code=status_for(exc), content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = InvalidArgument(
            "Invalid request",
            [FieldError(_location(item["loc"]), item["msg"]) for item in exc.errors()],
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(error))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("request.crashed", extra={"path": request.url.path}, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_ERROR_MESSAGE, "error": "InternalError"},
        )
