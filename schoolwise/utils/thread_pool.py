"""
Thread Pool Manager - Centralized worker pool for blocking calls.

The UI runs on a single asyncio event loop. Blocking work (HTTP requests,
file writes) is handed to one shared ThreadPoolExecutor and awaited, so the
loop keeps servicing events and every state change still happens on the
loop thread once the await resumes.
"""
import asyncio
import functools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MAX_WORKERS = 4

# Shared thread pool for all blocking calls
_thread_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


def get_thread_pool() -> ThreadPoolExecutor:
    """Get or create the shared thread pool."""
    global _thread_pool

    if _thread_pool is None:
        with _pool_lock:
            if _thread_pool is None:
                _thread_pool = ThreadPoolExecutor(
                    max_workers=MAX_WORKERS,
                    thread_name_prefix="schoolwise_worker"
                )
                logger.info("Initialized thread pool with %d workers", MAX_WORKERS)

    return _thread_pool


def shutdown_thread_pool(wait: bool = True) -> None:
    """Shutdown the thread pool gracefully.

    Args:
        wait: If True, wait for all tasks to complete
    """
    global _thread_pool

    if _thread_pool is not None:
        with _pool_lock:
            if _thread_pool is not None:
                logger.info("Shutting down thread pool...")
                _thread_pool.shutdown(wait=wait)
                _thread_pool = None
                logger.info("Thread pool shutdown complete")


async def run_blocking(func: Callable[..., Any], *args, **kwargs) -> Any:
    """Run ``func(*args, **kwargs)`` on the shared pool and await its result.

    Exceptions raised by ``func`` propagate to the awaiting coroutine.

    Example:
        response = await run_blocking(session.get, url, timeout=30)
    """
    loop = asyncio.get_running_loop()
    call = functools.partial(func, *args, **kwargs)
    try:
        return await loop.run_in_executor(get_thread_pool(), call)
    except Exception as e:
        logger.debug("Blocking call %s raised %s: %s",
                     getattr(func, "__name__", repr(func)), type(e).__name__, e)
        raise
