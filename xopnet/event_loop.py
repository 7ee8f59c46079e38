"""A pool of scheduler threads with round-robin hand-out."""

from __future__ import annotations

import threading
from typing import List

from .channel import Channel
from .selector_task_scheduler import SelectorTaskScheduler
from .task_scheduler import TaskScheduler, TriggerEvent
from .timer import TimerEvent

__all__ = ["EventLoop"]


class EventLoop:
    """Starts ``num_threads`` schedulers, each in its own thread.

    Channels, timers and trigger events given to the loop itself go to the
    first scheduler; :meth:`get_task_scheduler` hands out the others in turn.
    """

    def __init__(self, num_threads: int = 1) -> None:
        self._lock = threading.Lock()
        self._num_threads = num_threads if num_threads > 0 else 1
        self._index = 1
        self._schedulers: List[TaskScheduler] = []
        self._threads: List[threading.Thread] = []
        self.loop()

    def get_task_scheduler(self) -> TaskScheduler:
        """The only scheduler, or the next of schedulers 1..n-1 in turn."""
        with self._lock:
            if not self._schedulers:
                raise RuntimeError("event loop is not running")
            if len(self._schedulers) == 1:
                return self._schedulers[0]
            scheduler = self._schedulers[self._index]
            self._index += 1
            if self._index >= len(self._schedulers):
                self._index = 1
            return scheduler

    def add_trigger_event(self, callback: TriggerEvent) -> bool:
        with self._lock:
            if not self._schedulers:
                return False
            return self._schedulers[0].add_trigger_event(callback)

    def add_timer(self, event: TimerEvent, msec: int) -> int:
        """Schedule ``event`` on the first scheduler; 0 if not running."""
        with self._lock:
            if not self._schedulers:
                return 0
            return self._schedulers[0].add_timer(event, msec)

    def remove_timer(self, timer_id: int) -> None:
        with self._lock:
            if self._schedulers:
                self._schedulers[0].remove_timer(timer_id)

    def update_channel(self, channel: Channel) -> None:
        with self._lock:
            if self._schedulers:
                self._schedulers[0].update_channel(channel)

    def remove_channel(self, channel: Channel) -> None:
        with self._lock:
            if self._schedulers:
                self._schedulers[0].remove_channel(channel)

    def loop(self) -> None:
        """Start the scheduler threads unless they are already running."""
        with self._lock:
            if self._schedulers:
                return
            self._index = 1
            for n in range(self._num_threads):
                scheduler = SelectorTaskScheduler(n)
                thread = threading.Thread(
                    target=scheduler.start, name=f"task-scheduler-{n}", daemon=True
                )
                self._schedulers.append(scheduler)
                self._threads.append(thread)
                thread.start()

    def quit(self) -> None:
        """Stop every scheduler and wait for its thread to end."""
        with self._lock:
            schedulers, self._schedulers = self._schedulers, []
            threads, self._threads = self._threads, []
        for scheduler in schedulers:
            scheduler.stop()
        current = threading.current_thread()
        for thread in threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> "EventLoop":
        return self

    def __exit__(self, *exc) -> None:
        self.quit()