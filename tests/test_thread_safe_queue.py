import time
from concurrent.futures import ThreadPoolExecutor

from xopnet.thread_safe_queue import ThreadSafeQueue


def test_push_and_try_pop_fifo():
    q = ThreadSafeQueue()
    q.push(1)
    q.push(2)
    assert len(q) == 2
    assert q.try_pop() == 1
    assert q.try_pop() == 2
    assert q.try_pop() is None


def test_clear_empties():
    q = ThreadSafeQueue()
    q.push("a")
    q.clear()
    assert q.is_empty()
    assert len(q) == 0


def test_wait_and_pop_returns_existing_item():
    q = ThreadSafeQueue()
    q.push("x")
    assert q.wait_and_pop(timeout=1) == "x"


def test_wait_and_pop_receives_from_other_thread():
    q = ThreadSafeQueue()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(q.wait_and_pop, timeout=5)
        time.sleep(0.05)
        q.push(42)
        assert future.result(timeout=5) == 42
    assert len(q) == 0


def test_wake_releases_waiter_with_none():
    q = ThreadSafeQueue()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(q.wait_and_pop, timeout=5)
        time.sleep(0.05)
        q.wake()
        assert future.result(timeout=5) is None
    q.push(1)
    assert q.try_pop() == 1


def test_wait_and_pop_times_out():
    q = ThreadSafeQueue()
    start = time.monotonic()
    assert q.wait_and_pop(timeout=0.05) is None
    assert time.monotonic() - start >= 0.04