"""Opt-in timing instrumentation for the per-frame processing path."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Return True when ``SENSETONE_DEBUG`` asks for timing information."""
    return os.getenv("SENSETONE_DEBUG", "").lower() in _TRUTHY


@contextmanager
def time_block(label: str, *, emitter: Callable[[str], None] | None = None) -> Iterator[None]:
    """
    Context manager that reports elapsed time when debugging is enabled.

    Costs a single environment lookup when disabled.
    """
    if not debug_enabled():
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        target = emitter or logger.debug
        target(f"{label} took {elapsed_ms:.3f} ms")
