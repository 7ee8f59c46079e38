"""Binding of a descriptor to the events of interest and their handlers."""

from __future__ import annotations

import enum
from typing import Callable, Optional

__all__ = ["EventType", "Channel", "EventCallback"]

EventCallback = Callable[[], None]


class EventType(enum.IntFlag):
    """I/O readiness flags, numbered as in epoll."""

    NONE = 0
    IN = 1
    PRI = 2
    OUT = 4
    ERR = 8
    HUP = 16
    RDHUP = 8192


class Channel:
    """A descriptor, the events it waits for and the callbacks to run.

    A callback left as ``None`` is skipped when its event fires.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.events = EventType.NONE
        self.read_callback: Optional[EventCallback] = None
        self.write_callback: Optional[EventCallback] = None
        self.close_callback: Optional[EventCallback] = None
        self.error_callback: Optional[EventCallback] = None

    def fileno(self) -> int:
        return self.fd

    def enable_reading(self) -> None:
        self.events |= EventType.IN

    def enable_writing(self) -> None:
        self.events |= EventType.OUT

    def disable_reading(self) -> None:
        self.events &= ~EventType.IN

    def disable_writing(self) -> None:
        self.events &= ~EventType.OUT

    def is_none_event(self) -> bool:
        return self.events == EventType.NONE

    def is_writing(self) -> bool:
        return bool(self.events & EventType.OUT)

    def is_reading(self) -> bool:
        return bool(self.events & EventType.IN)

    def handle_event(self, events: int) -> None:
        """Run the callbacks for the ready ``events``; a hang-up ends handling."""
        if events & (EventType.PRI | EventType.IN) and self.read_callback:
            self.read_callback()
        if events & EventType.OUT and self.write_callback:
            self.write_callback()
        if events & EventType.HUP:
            if self.close_callback:
                self.close_callback()
            return
        if events & EventType.ERR and self.error_callback:
            self.error_callback()