"""A task scheduler that waits for I/O with the platform's best selector."""

from __future__ import annotations

import selectors
import threading
from typing import Dict, List, Tuple

from .channel import Channel, EventType
from .task_scheduler import MAX_TRIGGER_EVENTS, TaskScheduler
from .timer import Timer

__all__ = ["SelectorTaskScheduler"]


def _mask(events: int) -> int:
    mask = 0
    if events & (EventType.IN | EventType.PRI):
        mask |= selectors.EVENT_READ
    if events & EventType.OUT:
        mask |= selectors.EVENT_WRITE
    return mask


def _events(mask: int) -> EventType:
    events = EventType.NONE
    if mask & selectors.EVENT_READ:
        events |= EventType.IN
    if mask & selectors.EVENT_WRITE:
        events |= EventType.OUT
    return events


class SelectorTaskScheduler(TaskScheduler):
    """Dispatches channel events found by epoll, kqueue, poll or select."""

    def __init__(self, id: int = 0, max_trigger_events: int = MAX_TRIGGER_EVENTS) -> None:
        super().__init__(id, max_trigger_events)
        self._selector = selectors.DefaultSelector()
        self._channel_lock = threading.Lock()
        self._channels: Dict[int, Channel] = {}
        if self.wakeup_channel is not None:
            self.update_channel(self.wakeup_channel)

    def update_channel(self, channel: Channel) -> None:
        """Watch, re-watch or, when it wants no events, drop ``channel``."""
        with self._channel_lock:
            fd = channel.fileno()
            if fd in self._channels:
                if channel.is_none_event():
                    self._unregister(fd)
                    del self._channels[fd]
                else:
                    self._channels[fd] = channel
                    self._modify(fd, channel)
            elif not channel.is_none_event():
                self._channels[fd] = channel
                self._register(fd, channel)

    def remove_channel(self, channel: Channel) -> None:
        with self._channel_lock:
            fd = channel.fileno()
            if fd in self._channels:
                self._unregister(fd)
                del self._channels[fd]

    def handle_event(self, timeout: int) -> bool:
        """Wait up to ``timeout`` ms (forever if negative) and dispatch.

        With no channels at all it only sleeps, 10 ms if ``timeout`` is not
        positive. Returns False if waiting failed.
        """
        with self._channel_lock:
            empty = not self._channels
        if empty:
            Timer.sleep(timeout if timeout > 0 else 10)
            return True

        wait = None if timeout < 0 else timeout / 1000
        try:
            ready = self._selector.select(wait)
        except (OSError, ValueError):
            return False

        dispatch: List[Tuple[Channel, EventType]] = [
            (key.data, _events(mask)) for key, mask in ready if key.data is not None
        ]
        for channel, events in dispatch:
            channel.handle_event(events)
        return True

    def _register(self, fd: int, channel: Channel) -> None:
        mask = _mask(channel.events)
        if not mask:
            return
        try:
            self._selector.register(fd, mask, channel)
        except (KeyError, ValueError, OSError):
            pass

    def _modify(self, fd: int, channel: Channel) -> None:
        mask = _mask(channel.events)
        if not mask:
            self._unregister(fd)
            return
        try:
            self._selector.modify(fd, mask, channel)
        except (KeyError, ValueError, OSError):
            self._unregister(fd)
            self._register(fd, channel)

    def _unregister(self, fd: int) -> None:
        try:
            self._selector.unregister(fd)
        except (KeyError, ValueError, OSError):
            pass