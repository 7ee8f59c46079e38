import pytest

from xopnet.channel import Channel, EventType


@pytest.fixture
def recorded():
    calls = []
    channel = Channel(7)
    channel.read_callback = lambda: calls.append("read")
    channel.write_callback = lambda: calls.append("write")
    channel.close_callback = lambda: calls.append("close")
    channel.error_callback = lambda: calls.append("error")
    return channel, calls


def test_flag_values_match_epoll(recorded):
    channel, calls = recorded
    channel.enable_reading()
    assert channel.events == 1
    channel.enable_writing()
    assert channel.events == 5
    channel.handle_event(16)
    assert calls == ["close"]
    channel.handle_event(8192)
    assert calls == ["close"]


def test_new_channel_has_no_events():
    channel = Channel(3)
    assert channel.fileno() == 3
    assert channel.is_none_event()
    assert not channel.is_reading()
    assert not channel.is_writing()


def test_enable_and_disable():
    channel = Channel(3)
    channel.enable_reading()
    channel.enable_writing()
    assert channel.is_reading() and channel.is_writing()
    assert channel.events == EventType.IN | EventType.OUT
    channel.disable_writing()
    assert channel.is_reading() and not channel.is_writing()
    channel.disable_reading()
    assert channel.is_none_event()


def test_read_and_write_order(recorded):
    channel, calls = recorded
    channel.handle_event(EventType.IN | EventType.OUT)
    assert calls == ["read", "write"]


def test_priority_triggers_read(recorded):
    channel, calls = recorded
    channel.handle_event(EventType.PRI)
    assert calls == ["read"]


def test_hangup_skips_error(recorded):
    channel, calls = recorded
    channel.handle_event(EventType.HUP | EventType.ERR)
    assert calls == ["close"]


def test_error_alone(recorded):
    channel, calls = recorded
    channel.handle_event(EventType.ERR)
    assert calls == ["error"]


def test_default_callbacks_do_nothing():
    channel = Channel(1)
    channel.handle_event(int(EventType.IN | EventType.OUT | EventType.HUP))
    assert channel.is_none_event()