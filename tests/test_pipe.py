import pytest

from xopnet.pipe import Pipe


@pytest.fixture
def pipe():
    p = Pipe()
    assert p.create() is True
    yield p
    p.close()


def test_write_then_read(pipe):
    data = b"\x01\x01"
    assert pipe.write(data) == len(data)
    assert pipe.read(10) == data


def test_read_empty_returns_empty(pipe):
    assert pipe.read(10) == b""


def test_read_respects_size(pipe):
    pipe.write(b"abcdef")
    assert pipe.read(2) == b"ab"
    assert pipe.read(10) == b"cdef"


def test_descriptors(pipe):
    assert pipe.read_fd() >= 0
    assert pipe.write_fd() >= 0
    assert pipe.read_fd() != pipe.write_fd()


def test_unopened_pipe():
    p = Pipe()
    assert p.read_fd() == -1
    assert p.write_fd() == -1
    with pytest.raises(OSError):
        p.read(1)
    with pytest.raises(OSError):
        p.write(b"x")


def test_close_resets_descriptors():
    p = Pipe()
    p.create()
    p.close()
    assert p.read_fd() == -1
    assert p.write_fd() == -1


def test_context_manager():
    with Pipe() as p:
        p.write(b"z")
        assert p.read(1) == b"z"
    assert p.read_fd() == -1


def test_full_pipe_write_returns_short(pipe):
    chunk = b"x" * 65536
    total = 0
    for _ in range(256):
        written = pipe.write(chunk)
        total += written
        if written == 0:
            break
    assert written == 0
    assert total > 0