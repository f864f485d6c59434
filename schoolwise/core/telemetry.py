"""Timing for backend round trips and report saves.

``timed`` wraps one step (an HTTP call, a report request, a file save) and
logs how long it took. A step that runs longer than ``warn_after`` seconds is
logged as a warning instead, which is how slow cold starts of the backend
show up in ``logs/schoolwise_main.log``.

Set ``SCHOOLWISE_PROFILE=1`` to raise every timing line to INFO so it shows
on the console without ``--verbose``.
"""
from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

# Backend answers slower than this are worth a warning in the log
SLOW_REQUEST_SECONDS = 10.0


def is_profiling_enabled() -> bool:
    value = os.environ.get("SCHOOLWISE_PROFILE", "").lower()
    return value in ("1", "true", "yes")


def request_label(method: str, path: str) -> str:
    """Log label for one backend call, e.g. ``GET /api/school-reports/schools``."""
    return f"{method.upper()} {path}"


@dataclass
class Timing:
    """Elapsed time of a ``timed`` block; ``elapsed`` is filled in on exit."""
    label: str
    elapsed: float = 0.0
    failed: bool = False


@contextmanager
def timed(
    logger: logging.Logger,
    label: str,
    *,
    level: int = logging.DEBUG,
    warn_after: Optional[float] = None,
) -> Iterator[Timing]:
    """
    Time a block and log one line when it ends.

    Args:
        logger: Logger of the calling module
        label: What is being timed, see ``request_label``
        level: Level for the normal completion line
        warn_after: Seconds after which the line is logged as a warning

    Example:
        >>> with timed(logger, request_label("POST", FULL_REPORT_PATH), warn_after=30) as timing:
        ...     response = session.post(url, json=body)
        >>> timing.elapsed
        2.345
    """
    if is_profiling_enabled():
        level = max(level, logging.INFO)

    timing = Timing(label)
    start = time.perf_counter()
    try:
        yield timing
    except BaseException:
        timing.failed = True
        raise
    finally:
        timing.elapsed = time.perf_counter() - start
        if timing.failed:
            logger.log(level, "%s failed after %.3fs", label, timing.elapsed)
        elif warn_after is not None and timing.elapsed > warn_after:
            logger.warning("%s took %.3fs (slower than %.0fs)", label, timing.elapsed, warn_after)
        else:
            logger.log(level, "%s took %.3fs", label, timing.elapsed)
