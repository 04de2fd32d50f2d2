from __future__ import annotations

from contextlib import contextmanager
import time


@contextmanager
def log_timing(logger, label: str, timings: dict[str, float] | None = None):
    """Log how long the block took and, if given, store it in ``timings[label]``."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if timings is not None:
            timings[label] = round(elapsed, 3)
        logger.info("%s phase took %.2fs", label, elapsed)
