"""Elapsed-time measurement and local time formatting."""

from __future__ import annotations

import time
from datetime import datetime

__all__ = ["Timestamp", "localtime"]


class Timestamp:
    """Measures milliseconds elapsed since creation or the last reset."""

    def __init__(self) -> None:
        self._begin = time.perf_counter()

    def reset(self) -> None:
        """Restart the measurement from now."""
        self._begin = time.perf_counter()

    def elapsed(self) -> int:
        """Whole milliseconds since the start point."""
        return int((time.perf_counter() - self._begin) * 1000)


def localtime() -> str:
    """Current local time as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")