"""A bounded first-in first-out buffer."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, TypeVar

__all__ = ["RingBuffer"]

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Fixed-capacity FIFO; pushing into a full buffer is refused."""

    def __init__(self, capacity: int = 60) -> None:
        self.capacity = capacity
        self._items: Deque[T] = deque()
        self._lock = threading.Lock()

    def push(self, data: T) -> bool:
        """Append ``data``; return False if the buffer is full."""
        with self._lock:
            if len(self._items) >= self.capacity:
                return False
            self._items.append(data)
            return True

    def pop(self) -> T:
        """Remove and return the oldest item; IndexError if empty."""
        with self._lock:
            if not self._items:
                raise IndexError("pop from empty ring buffer")
            return self._items.popleft()

    def is_full(self) -> bool:
        return len(self._items) == self.capacity

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)