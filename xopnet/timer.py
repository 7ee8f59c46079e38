"""Millisecond timers and a queue that fires them on a steady clock."""

from __future__ import annotations

import bisect
import threading
import time
from typing import Callable, Dict, List, Tuple

__all__ = ["Timer", "TimerQueue", "TimerEvent"]

TimerEvent = Callable[[], bool]


def _now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class Timer:
    """A callback with an interval in milliseconds (at least 1)."""

    def __init__(self, event: TimerEvent, msec: int) -> None:
        self.event_callback: TimerEvent = event
        self.interval = msec if msec > 0 else 1
        self._repeat = False
        self._next_timeout = 0

    @staticmethod
    def sleep(msec: int) -> None:
        """Block the calling thread for ``msec`` milliseconds."""
        time.sleep(msec / 1000)

    def start(self, microseconds: int, repeat: bool = False) -> None:
        """Sleep and fire the callback; keep going while repeating."""
        self._repeat = repeat
        elapsed = 0
        while True:
            time.sleep(max(0, microseconds - elapsed) / 1_000_000)
            begin = time.perf_counter()
            if self.event_callback:
                self.event_callback()
            elapsed = max(0, int((time.perf_counter() - begin) * 1_000_000))
            if not self._repeat:
                break

    def stop(self) -> None:
        """End a repeating start() after the current round."""
        self._repeat = False


class TimerQueue:
    """Timers ordered by deadline; a callback returning True is rescheduled."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._timers: Dict[int, Timer] = {}
        self._schedule: List[Tuple[int, int]] = []
        self._last_timer_id = 0

    def add_timer(self, event: TimerEvent, msec: int) -> int:
        """Schedule ``event`` after ``msec`` ms and return its id."""
        with self._lock:
            now = _now_ms()
            self._last_timer_id += 1
            timer_id = self._last_timer_id
            timer = Timer(event, msec)
            timer._next_timeout = now + timer.interval
            self._timers[timer_id] = timer
            bisect.insort(self._schedule, (timer._next_timeout, timer_id))
            return timer_id

    def remove_timer(self, timer_id: int) -> None:
        with self._lock:
            timer = self._timers.pop(timer_id, None)
            if timer is None:
                return
            key = (timer._next_timeout, timer_id)
            pos = bisect.bisect_left(self._schedule, key)
            if pos < len(self._schedule) and self._schedule[pos] == key:
                del self._schedule[pos]

    def get_time_remaining(self) -> int:
        """Milliseconds until the next deadline, 0 if overdue, -1 if none."""
        with self._lock:
            if not self._timers or not self._schedule:
                return -1
            return max(0, self._schedule[0][0] - _now_ms())

    def handle_timer_event(self) -> None:
        """Fire every timer whose deadline has passed."""
        with self._lock:
            now = _now_ms()
            while self._schedule and self._schedule[0][0] <= now:
                _, timer_id = self._schedule.pop(0)
                timer = self._timers.get(timer_id)
                if timer is None:
                    continue
                keep = timer.event_callback()
                if timer_id not in self._timers:
                    continue
                if keep:
                    timer._next_timeout = now + timer.interval
                    bisect.insort(self._schedule, (timer._next_timeout, timer_id))
                else:
                    del self._timers[timer_id]