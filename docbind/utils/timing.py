# ------------------------------------------------------------
# Module: docbind/utils/timing.py
# Purpose: Provide timing utilities and context-based logging for performance tracking.
# ------------------------------------------------------------

"""Lightweight utilities for timing measurements and structured log timing.

Responsibilities
----------------
- Measure high-resolution elapsed time in milliseconds.
- Provide a consistent context manager for timing and logging operations.
- Log start, success, and failure messages with elapsed durations.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager


def ms_since(t0_ns: int) -> float:
    """Return the precise elapsed time in milliseconds since t0_ns."""
    return (time.perf_counter_ns() - t0_ns) / 1_000_000.0


@contextmanager
def log_timer(
    msg: str,
    logger: logging.Logger | None = None,
    level: int = logging.INFO,
    **ctx,
):
    """
    Log a start/ok/failed message with elapsed time.

    Start and ok lines use `level`; failures are logged at WARNING with the
    exception text and then re-raised unchanged.

    Usage:
        with log_timer("deserialize", logger=log, level=logging.DEBUG, target="Person"):
            ...
    """
    log = logger or logging.getLogger(__name__)
    t0 = time.perf_counter_ns()
    if ctx:
        log.log(level, "%s start %s", msg, ctx)
    else:
        log.log(level, "%s start", msg)
    try:
        yield
    except Exception as exc:
        log.warning("%s failed after %.3fms %s: %s", msg, ms_since(t0), ctx, exc)
        raise
    else:
        if ctx:
            log.log(level, "%s ok in %.3fms %s", msg, ms_since(t0), ctx)
        else:
            log.log(level, "%s ok in %.3fms", msg, ms_since(t0))
