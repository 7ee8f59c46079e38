"""A non-blocking one-way channel used to wake a waiting event loop."""

from __future__ import annotations

import os
import socket
import sys
from typing import Optional, Union

__all__ = ["Pipe"]

_USE_SOCKETS = sys.platform == "win32"


class Pipe:
    """A non-blocking pipe (a connected socket pair on Windows)."""

    def __init__(self) -> None:
        self._reader: Optional[Union[int, socket.socket]] = None
        self._writer: Optional[Union[int, socket.socket]] = None

    def create(self) -> bool:
        """Open both ends; return False on failure."""
        try:
            if _USE_SOCKETS:
                reader, writer = socket.socketpair()
                reader.setblocking(False)
                writer.setblocking(False)
            else:
                reader, writer = os.pipe()
                os.set_blocking(reader, False)
                os.set_blocking(writer, False)
        except OSError:
            return False
        self._reader, self._writer = reader, writer
        return True

    def write(self, data: bytes) -> int:
        """Write ``data``; return bytes written, 0 if the pipe is full."""
        if self._writer is None:
            raise OSError("pipe is not open")
        try:
            if isinstance(self._writer, socket.socket):
                return self._writer.send(data)
            return os.write(self._writer, data)
        except (BlockingIOError, InterruptedError):
            return 0

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; ``b""`` if nothing is waiting."""
        if self._reader is None:
            raise OSError("pipe is not open")
        try:
            if isinstance(self._reader, socket.socket):
                return self._reader.recv(size)
            return os.read(self._reader, size)
        except (BlockingIOError, InterruptedError):
            return b""

    def close(self) -> None:
        for end in (self._reader, self._writer):
            if isinstance(end, socket.socket):
                end.close()
            elif end is not None:
                os.close(end)
        self._reader = None
        self._writer = None

    def read_fd(self) -> int:
        """Descriptor of the reading end, or -1 if not open."""
        return _fileno(self._reader)

    def write_fd(self) -> int:
        """Descriptor of the writing end, or -1 if not open."""
        return _fileno(self._writer)

    def __enter__(self) -> "Pipe":
        if self._reader is None and not self.create():
            raise OSError("cannot create pipe")
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _fileno(end: Optional[Union[int, socket.socket]]) -> int:
    if end is None:
        return -1
    if isinstance(end, socket.socket):
        return end.fileno()
    return end