"""
Error Boundary - Graceful error handling for GUI event handlers.

This module keeps a failing handler from leaving the page frozen:
- Decorator for sync and async UI handlers that logs and reports errors
- Safe UI update wrapper for Flet session shutdown

Prevents silent failures that leave UI frozen or unresponsive.
"""
import asyncio
import logging
from functools import wraps
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def _report_to_status(args, message: str) -> None:
    """Show ``message`` through the first argument that has a status_manager."""
    for arg in args:
        status_manager = getattr(arg, 'status_manager', None)
        if status_manager is not None:
            try:
                status_manager.update_status(f"⚠️ {message}", "orange")
            except Exception as e:
                logger.debug(f"Could not show error message: {e}")
            return


def with_error_boundary(
    fallback_value: Any = None,
    fallback_ui_message: Optional[str] = None,
    log_level: str = "error"
) -> Callable:
    """Decorator to add error boundary to UI methods.

    Works for plain functions and coroutine functions. Exceptions are logged
    and replaced by ``fallback_value``; if one of the arguments (usually
    ``self``) has a ``status_manager`` the user sees ``fallback_ui_message``.

    Args:
        fallback_value: Value to return on error
        fallback_ui_message: Message to show user on error
        log_level: Logging level ('error', 'warning', 'debug')

    Example:
        @with_error_boundary(fallback_ui_message="Could not update filters")
        async def on_school_changed(self, e):
            ...
    """
    def decorator(func: Callable) -> Callable:
        def handle(e: Exception, args) -> Any:
            log_func = getattr(logger, log_level, logger.error)
            log_func(
                f"Error in {func.__name__}: {e}",
                exc_info=log_level == "error"
            )
            if fallback_ui_message:
                _report_to_status(args, fallback_ui_message)
            return fallback_value

        if asyncio.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    return handle(e, args)
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return handle(e, args)

        return wrapper
    return decorator


def safe_ui_update(func: Callable) -> Callable:
    """Decorator for safe UI updates with fallback.

    Wraps UI update methods to prevent crashes from Flet session issues,
    disposed controls, or other UI-related errors.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (RuntimeError, AttributeError) as e:
            error_msg = str(e).lower()
            if any(word in error_msg for word in ['disposed', 'session', 'closed', 'shutdown']):
                logger.debug(f"UI update skipped (session closed): {func.__name__}")
                return None
            raise
        except Exception as e:
            logger.error(f"Unexpected error in UI update {func.__name__}: {e}", exc_info=True)
            return None

    return wrapper
