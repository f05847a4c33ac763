"""Error Handlers - map exceptions raised under /users to status codes and the JSON error envelope.

Invariants:
    - MinistryError carries its own http_status and envelope (core/errors.py)
    - Request validation failures (bad JSON, wrong types, bad path ids) -> 400, same
      details shape as domain validation errors: field, rule, message
    - Anything else -> 500 with a fixed message; internals only reach the log
    - 4xx logged at WARNING, 5xx at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ministry.core.errors import ErrorCategory, ErrorSeverity, MinistryError

logger = logging.getLogger(__name__)


async def handle_ministry_error(request: Request, exc: MinistryError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "operation": exc.context.operation,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            # drop the leading "body"/"path"/"query" location segment
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "rule": err["type"],
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request to {request.url.path}: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "invalid request",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "details": details,
            },
        },
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}",
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
    """Install the domain, request-validation and catch-all handlers on app."""
    app.add_exception_handler(MinistryError, handle_ministry_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
