"""
Notekeep API application.

    uvicorn notekeep.backend.main:app

`app` is built on first attribute access so importing this module never
reads config. Tests call create_app() for a fresh instance each time.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from notekeep.backend.api import health
from notekeep.backend.api.v1 import build_router
from notekeep.backend.core.concurrency import shutdown_pools
from notekeep.backend.core.config import AppConfig, find_project_root, get_app_config
from notekeep.backend.core.database import dispose_engine
from notekeep.backend.core.exception_handlers import register_exception_handlers
from notekeep.backend.core.identity import build_token_verifier
from notekeep.backend.core.logging import get_logger, setup_logging
from notekeep.backend.core.middleware import RequestContextMiddleware
from notekeep.backend.storage import build_blob_store
from notekeep.backend.storage.base import BlobStore

logger = get_logger(__name__)

_app: FastAPI | None = None


async def _open_blob_store(app_config: AppConfig) -> BlobStore | None:
    if not app_config.features.files_enabled:
        return None
    store = build_blob_store()
    await store.ensure_ready()
    return store


async def _drain_pools(drain_seconds: int) -> None:
    try:
        await asyncio.wait_for(shutdown_pools(), timeout=drain_seconds)
    except TimeoutError:
        logger.warning("Thread pool did not drain in time", extra={"drain_seconds": drain_seconds})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.features.security_startup_checks_enabled:
        from notekeep.backend.core.startup_checks import run_startup_checks
        run_startup_checks()

    app.state.blob_store = store = await _open_blob_store(app_config)
    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "auth_strategy": app.state.token_verifier.strategy,
            "storage_backend": store.backend_name if store else None,
        },
    )

    yield

    logger.info("Application shutting down")
    if store is not None:
        await store.aclose()
    await app.state.token_verifier.aclose()
    await _drain_pools(app_config.concurrency.shutdown.drain_seconds)
    await dispose_engine()


def _add_middleware(app: FastAPI, app_config: AppConfig) -> None:
    app.add_middleware(RequestContextMiddleware)

    origins = app_config.application.cors.origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=app_config.security.cors.allow_methods,
            allow_headers=app_config.security.cors.allow_headers,
        )


def _mount_local_files(app: FastAPI, app_config: AppConfig) -> None:
    """Serve local-backend blobs at the URLs LocalBlobStore hands out."""
    local = app_config.storage.local
    app.mount(
        urlparse(local.base_url).path or "/files",
        StaticFiles(directory=find_project_root() / local.path, check_dir=False),
        name="local-files",
    )


def create_app() -> FastAPI:
    app_config = get_app_config()
    settings = app_config.application

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        lifespan=lifespan,
    )
    _add_middleware(app, app_config)
    register_exception_handlers(app)

    # Built here, not in lifespan, so transports that skip lifespan can still authenticate
    app.state.token_verifier = build_token_verifier()
    app.state.blob_store = None

    files_enabled = app_config.features.files_enabled
    app.include_router(health.router, tags=["health"])
    app.include_router(
        build_router(auth_strategy=app.state.token_verifier.strategy, files_enabled=files_enabled),
        prefix=settings.api_prefix,
    )
    if files_enabled and app_config.storage.backend == "local":
        _mount_local_files(app, app_config)

    return app


def get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
