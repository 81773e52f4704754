"""Error Handlers — map exceptions escaping the routes onto JSON error envelopes.

Invariants:
    - LogbookError → its own to_response() envelope and http_status
    - Log level follows exc.severity: store failures CRITICAL, 4xx WARNING
    - ErrorContext (user_name, category, page) logged as observability extras
    - RequestValidationError → 400 with field-level details
    - Anything else → 500 without internal details

Design Decisions:
    - Handlers are plain module functions registered with add_exception_handler,
      so tests can call them without building an app
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import ErrorCategory, ErrorSeverity, LogbookError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def _log_extras(request: Request, exc: LogbookError) -> dict:
    return {
        "error_code": exc.code,
        "path": request.url.path,
        "user_name": exc.context.user_name,
        "category": exc.context.category,
        "page": exc.context.page,
    }


async def handle_logbook_error(request: Request, exc: LogbookError) -> JSONResponse:
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra=_log_extras(request, exc),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected input on {request.url.path}: "
        + ", ".join(d["field"] for d in details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(LogbookError, handle_logbook_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
