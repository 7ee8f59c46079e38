"""The per-thread scheduler loop: trigger events, timers and I/O dispatch."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from .channel import Channel
from .pipe import Pipe
from .ring_buffer import RingBuffer
from .timer import TimerEvent, TimerQueue

__all__ = ["TaskScheduler", "TriggerEvent", "MAX_TRIGGER_EVENTS"]

TriggerEvent = Callable[[], None]

MAX_TRIGGER_EVENTS = 50000
_TRIGGER_BYTE = b"\x01"


class TaskScheduler:
    """Runs queued callbacks, due timers and I/O events in one thread.

    This base class has no I/O multiplexer: :meth:`handle_event` does nothing
    and returns False. Subclasses supply channel registration and waiting.
    """

    def __init__(self, id: int = 1, max_trigger_events: int = MAX_TRIGGER_EVENTS) -> None:
        self.id = id
        self._shutdown = False
        self._trigger_lock = threading.Lock()
        self._trigger_events: RingBuffer[TriggerEvent] = RingBuffer(max_trigger_events)
        self._timer_queue = TimerQueue()
        self._wakeup_pipe = Pipe()
        self.wakeup_channel: Optional[Channel] = None
        if self._wakeup_pipe.create():
            channel = Channel(self._wakeup_pipe.read_fd())
            channel.enable_reading()
            channel.read_callback = self._wake
            self.wakeup_channel = channel

    def start(self) -> None:
        """Run the loop in the calling thread until :meth:`stop` is called.

        A stop() that arrives before start() makes it return at once; the
        scheduler can then be started again.
        """
        try:
            while not self._shutdown:
                self._handle_trigger_events()
                self._timer_queue.handle_timer_event()
                timeout = self._timer_queue.get_time_remaining()
                self.handle_event(timeout)
        finally:
            self._shutdown = False

    def stop(self) -> None:
        """Ask the loop to finish and wake it if it is waiting."""
        self._shutdown = True
        self._notify()

    def add_timer(self, event: TimerEvent, msec: int) -> int:
        """Schedule ``event`` after ``msec`` ms; it repeats while it returns True."""
        return self._timer_queue.add_timer(event, msec)

    def remove_timer(self, timer_id: int) -> None:
        self._timer_queue.remove_timer(timer_id)

    def add_trigger_event(self, callback: TriggerEvent) -> bool:
        """Queue ``callback`` to run in the loop; False if the queue is full."""
        with self._trigger_lock:
            if not self._trigger_events.push(callback):
                return False
            self._notify()
            return True

    def update_channel(self, channel: Channel) -> None:
        """Register or change the events watched for ``channel``."""

    def remove_channel(self, channel: Channel) -> None:
        """Stop watching ``channel``."""

    def handle_event(self, timeout: int) -> bool:
        """Wait up to ``timeout`` ms for I/O and dispatch it."""
        return False

    def _notify(self) -> None:
        if self.wakeup_channel is not None:
            self._wakeup_pipe.write(_TRIGGER_BYTE)

    def _wake(self) -> None:
        while self._wakeup_pipe.read(10):
            pass

    def _handle_trigger_events(self) -> None:
        while True:
            try:
                callback = self._trigger_events.pop()
            except IndexError:
                return
            callback()