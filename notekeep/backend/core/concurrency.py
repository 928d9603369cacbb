"""
Thread pool for blocking I/O.

The Azure Blob SDK and the local filesystem backend are synchronous; the
storage layer pushes those calls through run_in_io_pool so they never stall
the event loop. The pool is sized by concurrency.yaml, created on first use
and drained by the application lifespan.
"""

import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

from notekeep.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

THREAD_NAME_PREFIX = "notekeep-io"

_io_pool: ThreadPoolExecutor | None = None


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """Runs each task inside a copy of the submitter's contextvars, so request_id follows it."""

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def _configured_workers() -> int:
    from notekeep.backend.core.config import get_app_config
    return get_app_config().concurrency.thread_pool.max_workers


def get_io_pool() -> TracedThreadPoolExecutor:
    global _io_pool
    if _io_pool is None:
        max_workers = _configured_workers()
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=THREAD_NAME_PREFIX)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def run_in_io_pool(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_io_pool(), partial(fn, *args, **kwargs))


def get_pool_status() -> dict[str, int]:
    """Reported by /health/detailed. Empty until a storage call has created the pool."""
    if _io_pool is None:
        return {}
    return {"max_workers": _io_pool._max_workers, "threads": len(_io_pool._threads)}


async def shutdown_pools() -> None:
    """Wait for running storage calls, then drop the pool."""
    global _io_pool
    if _io_pool is None:
        return
    pool, _io_pool = _io_pool, None
    # shutdown(wait=True) blocks until workers finish
    await asyncio.to_thread(pool.shutdown, wait=True)
    logger.info("Thread pool shut down")
