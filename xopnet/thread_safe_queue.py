"""An unbounded queue shared between threads."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

__all__ = ["ThreadSafeQueue"]

T = TypeVar("T")


class ThreadSafeQueue(Generic[T]):
    """FIFO queue whose consumers may block until an item or a wake-up arrives."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()

    def push(self, value: T) -> None:
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def wait_and_pop(self, timeout: Optional[float] = None) -> Optional[T]:
        """Wait for an item; return None if woken or timed out with none."""
        with self._cond:
            if not self._items:
                self._cond.wait(timeout)
            if not self._items:
                return None
            return self._items.popleft()

    def try_pop(self) -> Optional[T]:
        """Return the oldest item, or None if the queue is empty."""
        with self._cond:
            if not self._items:
                return None
            return self._items.popleft()

    def is_empty(self) -> bool:
        with self._cond:
            return not self._items

    def clear(self) -> None:
        with self._cond:
            self._items.clear()

    def wake(self) -> None:
        """Release one waiting consumer."""
        with self._cond:
            self._cond.notify()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)