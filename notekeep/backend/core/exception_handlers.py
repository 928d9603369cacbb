"""
Exception Handlers.

Turns application exceptions, request validation failures and anything
unexpected into the ErrorResponse envelope.

Request validation failures (bad JSON, bad path parameters, schema
violations) are reported as 400, the same status the service layer
uses for its own ValidationError.

Usage:
    from notekeep.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notekeep.backend.core.logging import get_logger
from notekeep.backend.schemas.base import ErrorResponse, ValidationIssue

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    ConflictError: 409,
    ExternalServiceError: 502,
    StorageError: 500,
    DatabaseError: 500,
}

REQUEST_VALIDATION_STATUS = 400

# Sent with every 401 so clients know to retry with a bearer token
CHALLENGE_HEADERS = {"WWW-Authenticate": "Bearer"}


def _status_for(exc: ApplicationError) -> int:
    """Resolve the status code, walking the MRO so subclasses inherit their parent's status."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


def _get_request_id(request: Request) -> str | None:
    """Request ID set by RequestContextMiddleware, else the raw header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _respond(
    status_code: int,
    body: ErrorResponse,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle every ApplicationError subclass.

    Only ValidationError exposes its details; other errors carry just the
    code and message so ownership and storage internals stay server side.
    """
    status_code = _status_for(exc)
    request_id = _get_request_id(request)

    log_extra: dict[str, Any] = {
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if request_id:
        log_extra["request_id"] = request_id

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    details = exc.details if isinstance(exc, ValidationError) else None
    body = ErrorResponse.build(exc.code, exc.message, request_id, details)
    headers = CHALLENGE_HEADERS if isinstance(exc, AuthenticationError) else None

    return _respond(status_code, body, headers)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report every rejected field of the request under details.validation_errors."""
    request_id = _get_request_id(request)

    issues = [
        ValidationIssue(
            field=".".join(str(loc) for loc in err.get("loc", [])),
            message=err.get("msg", "Validation error"),
            type=err.get("type", "unknown"),
        )
        for err in exc.errors()
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "fields": [issue.field for issue in issues],
            "request_id": request_id,
        },
    )

    body = ErrorResponse.build(
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        request_id,
        {"validation_errors": [issue.model_dump() for issue in issues]},
    )
    return _respond(REQUEST_VALIDATION_STATUS, body)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Exception details are only included when api_detailed_errors is
    enabled in features.yaml.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    details = None
    if get_app_config().features.api_detailed_errors:
        details = {"exception_type": type(exc).__name__, "exception": str(exc)}

    body = ErrorResponse.build(
        "SYS_INTERNAL_ERROR",
        "An unexpected error occurred",
        request_id,
        details,
    )
    return _respond(500, body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
