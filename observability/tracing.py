"""Latency span around the AI operations of one session."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from .logger import log_event


@contextmanager
def span(session_id: str, op: str) -> Iterator[None]:
    """Log ``op`` with its duration and whether it raised."""

    started = time.perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "ok"
    finally:
        log_event("span", session_id, op=op, ms=round((time.perf_counter() - started) * 1000), outcome=outcome)


__all__ = ["span"]
