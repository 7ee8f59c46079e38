import socket
import threading
import time

import pytest

from xopnet.channel import Channel
from xopnet.selector_task_scheduler import SelectorTaskScheduler


@pytest.fixture
def scheduler():
    return SelectorTaskScheduler()


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def _reading_channel(sock, calls):
    channel = Channel(sock.fileno())
    channel.read_callback = lambda: calls.append(sock.recv(64))
    channel.enable_reading()
    return channel


def test_readable_channel_dispatches_read(scheduler, pair):
    a, b = pair
    calls = []
    scheduler.update_channel(_reading_channel(a, calls))
    b.sendall(b"ping")
    assert scheduler.handle_event(1000) is True
    assert calls == [b"ping"]


def test_nothing_ready_dispatches_nothing(scheduler, pair):
    a, _ = pair
    calls = []
    scheduler.update_channel(_reading_channel(a, calls))
    assert scheduler.handle_event(20) is True
    assert calls == []


def test_writable_channel_dispatches_write(scheduler, pair):
    a, _ = pair
    reads, writes = [], []
    channel = Channel(a.fileno())
    channel.read_callback = lambda: reads.append(1)
    channel.write_callback = lambda: writes.append(1)
    channel.enable_writing()
    scheduler.update_channel(channel)
    assert scheduler.handle_event(1000) is True
    assert writes == [1]
    assert reads == []


def test_removed_channel_is_not_dispatched(scheduler, pair):
    a, b = pair
    calls = []
    channel = _reading_channel(a, calls)
    scheduler.update_channel(channel)
    scheduler.remove_channel(channel)
    b.sendall(b"x")
    scheduler.handle_event(20)
    assert calls == []


def test_channel_without_events_is_dropped(scheduler, pair):
    a, b = pair
    calls = []
    channel = _reading_channel(a, calls)
    scheduler.update_channel(channel)
    channel.disable_reading()
    scheduler.update_channel(channel)
    b.sendall(b"x")
    scheduler.handle_event(20)
    assert calls == []


def test_modified_channel_gets_new_events(scheduler, pair):
    a, b = pair
    reads, writes = [], []
    channel = Channel(a.fileno())
    channel.read_callback = lambda: reads.append(a.recv(64))
    channel.write_callback = lambda: writes.append(1)
    channel.enable_reading()
    scheduler.update_channel(channel)
    channel.enable_writing()
    scheduler.update_channel(channel)
    b.sendall(b"data")
    assert scheduler.handle_event(1000) is True
    assert reads == [b"data"]
    assert writes == [1]


def test_trigger_event_wakes_blocked_loop(scheduler):
    thread = threading.Thread(target=scheduler.start, daemon=True)
    thread.start()
    done = threading.Event()
    try:
        time.sleep(0.05)
        assert scheduler.add_trigger_event(done.set)
        assert done.wait(2)
    finally:
        scheduler.stop()
        thread.join(2)
    assert not thread.is_alive()


def test_repeating_timer_runs_until_it_returns_false(scheduler):
    calls = []
    finished = threading.Event()

    def on_timer():
        calls.append(1)
        if len(calls) == 3:
            finished.set()
            return False
        return True

    timer_id = scheduler.add_timer(on_timer, 5)
    assert timer_id == 1
    thread = threading.Thread(target=scheduler.start, daemon=True)
    thread.start()
    try:
        assert finished.wait(2)
        time.sleep(0.05)
    finally:
        scheduler.stop()
        thread.join(2)
    assert len(calls) == 3