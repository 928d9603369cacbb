"""
Health endpoints, mounted outside the API prefix and without authentication.

    GET /health            liveness: the process answers
    GET /health/ready      readiness: the database answers a SELECT 1 (503 if not)
    GET /health/detailed   every dependency, app identity and I/O pool usage
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text

from notekeep.backend.core.concurrency import get_pool_status
from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


async def check_database() -> dict[str, Any]:
    """SELECT 1 on a fresh session. Failures are reported, never raised."""
    from notekeep.backend.core.database import get_session_factory

    start = time.perf_counter()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": UNHEALTHY, "error": str(e)}
    return {"status": HEALTHY, "latency_ms": int((time.perf_counter() - start) * 1000)}


async def _database_within_timeout() -> dict[str, Any]:
    timeout = get_app_config().application.timeouts.database
    try:
        async with asyncio.timeout(timeout):
            return await check_database()
    except TimeoutError:
        return {"status": UNHEALTHY, "error": f"timed out after {timeout}s"}


def check_storage(request: Request) -> dict[str, Any]:
    store = getattr(request.app.state, "blob_store", None)
    if store is None:
        return {"status": "not_configured"}
    return {"status": HEALTHY, "backend": store.backend_name}


def _overall(checks: dict[str, dict[str, Any]]) -> str:
    return UNHEALTHY if any(check.get("status") == UNHEALTHY for check in checks.values()) else HEALTHY


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": HEALTHY}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    checks = {"database": await _database_within_timeout()}
    body = {"status": _overall(checks), "checks": checks, "timestamp": utc_now().isoformat()}

    if body["status"] == UNHEALTHY:
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(status_code=503, detail=body)
    return body


@router.get("/health/detailed")
async def detailed_health_check(request: Request) -> dict[str, Any]:
    checks = {
        "database": await _database_within_timeout(),
        "storage": check_storage(request),
    }
    app = get_app_config().application

    return {
        "status": _overall(checks),
        "application": {
            "name": app.name,
            "env": app.environment,
            "debug": app.debug,
            "version": app.version,
            "auth_strategy": request.app.state.token_verifier.strategy,
        },
        "checks": checks,
        "pools": {"thread_pool": get_pool_status()},
        "timestamp": utc_now().isoformat(),
    }
