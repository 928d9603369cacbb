"""
Request context: id, caller source and timing for every request.

Headers read:
    X-Request-ID    reused when well formed, otherwise a UUID4 is issued
    X-Frontend-ID   web / mobile / cli / api / internal, anything else is "unknown"

Headers written: X-Request-ID, X-Response-Time.

request_id, source, method and path are bound to structlog for the length of
the request and mirrored on request.state for the exception handlers.
"""

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.logging import VALID_SOURCES, get_logger

logger = get_logger(__name__)

# Client-supplied sources accepted in X-Frontend-ID
KNOWN_SOURCES = VALID_SOURCES - {"unknown"}

# Ids echoed into logs and headers; anything else is replaced
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def resolve_request_id(header: str | None) -> str:
    if header and REQUEST_ID_PATTERN.fullmatch(header):
        return header
    return str(uuid.uuid4())


def resolve_source(header: str | None) -> str:
    source = (header or "").strip().lower()
    return source if source in KNOWN_SOURCES else "unknown"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        source = resolve_source(request.headers.get("X-Frontend-ID"))
        request.state.request_id = request_id
        request.state.source = source

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            source=source,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        logger.debug(
            "Request started",
            extra={
                "client_host": request.client.host if request.client else None,
                "user_agent": request.headers.get("User-Agent"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            # INFO only when api_request_logging is on
            log = logger.info if get_app_config().features.api_request_logging else logger.debug
            log("Request completed", extra={"status_code": response.status_code, "duration_ms": duration_ms})
            return response
        finally:
            # The worker's next request must not inherit this one's ids
            structlog.contextvars.clear_contextvars()
