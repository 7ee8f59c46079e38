"""A growable receive buffer and big/little-endian integer readers."""

from __future__ import annotations

import socket
from typing import Optional

__all__ = [
    "read_uint32_be",
    "read_uint32_le",
    "read_uint24_be",
    "read_uint24_le",
    "read_uint16_be",
    "read_uint16_le",
    "BufferReader",
    "MAX_BYTES_PER_READ",
    "MAX_BUFFER_SIZE",
]

MAX_BYTES_PER_READ = 4096
MAX_BUFFER_SIZE = 1024 * 100000

_CRLF = b"\r\n"
_CRLF_CRLF = b"\r\n\r\n"


def read_uint32_be(data: bytes) -> int:
    """Unsigned 32-bit big-endian integer from the first four bytes."""
    return int.from_bytes(data[:4], "big")


def read_uint32_le(data: bytes) -> int:
    """Unsigned 32-bit little-endian integer from the first four bytes."""
    return int.from_bytes(data[:4], "little")


def read_uint24_be(data: bytes) -> int:
    """Unsigned 24-bit big-endian integer from the first three bytes."""
    return int.from_bytes(data[:3], "big")


def read_uint24_le(data: bytes) -> int:
    """Unsigned 24-bit little-endian integer from the first three bytes."""
    return int.from_bytes(data[:3], "little")


def read_uint16_be(data: bytes) -> int:
    """Unsigned 16-bit big-endian integer from the first two bytes."""
    return int.from_bytes(data[:2], "big")


def read_uint16_le(data: bytes) -> int:
    """Unsigned 16-bit little-endian integer from the first two bytes."""
    return int.from_bytes(data[:2], "little")


class BufferReader:
    """Accumulates bytes received from a socket until they are consumed.

    Offsets returned by the ``find_*`` methods are relative to the start of
    the readable data, i.e. to what :meth:`peek` returns.
    """

    def __init__(self, initial_size: int = 2048) -> None:
        self._buffer = bytearray(initial_size)
        self._reader = 0
        self._writer = 0

    def readable_bytes(self) -> int:
        return self._writer - self._reader

    def writable_bytes(self) -> int:
        return len(self._buffer) - self._writer

    def peek(self) -> bytes:
        """The unread data, without consuming it."""
        return bytes(self._buffer[self._reader:self._writer])

    def _find(self, needle: bytes, last: bool) -> Optional[int]:
        search = self._buffer.rfind if last else self._buffer.find
        pos = search(needle, self._reader, self._writer)
        return None if pos < 0 else pos - self._reader

    def find_first_crlf(self) -> Optional[int]:
        return self._find(_CRLF, last=False)

    def find_last_crlf(self) -> Optional[int]:
        return self._find(_CRLF, last=True)

    def find_last_crlf_crlf(self) -> Optional[int]:
        return self._find(_CRLF_CRLF, last=True)

    def retrieve_all(self) -> None:
        """Discard all unread data."""
        self._reader = 0
        self._writer = 0

    def retrieve(self, length: int) -> None:
        """Consume ``length`` bytes; consuming more than is readable clears all."""
        if length <= self.readable_bytes():
            self._reader += length
            if self._reader == self._writer:
                self.retrieve_all()
        else:
            self.retrieve_all()

    def retrieve_until(self, end: int) -> None:
        """Consume everything before offset ``end``."""
        self.retrieve(end)

    def read(self, sock: socket.socket) -> int:
        """Receive once from ``sock``.

        Returns the number of bytes received; 0 means the peer closed or the
        buffer has reached its size limit. Socket errors, including
        ``BlockingIOError``, propagate.
        """
        if self.writable_bytes() < MAX_BYTES_PER_READ:
            if len(self._buffer) > MAX_BUFFER_SIZE:
                return 0
            self._buffer.extend(bytes(MAX_BYTES_PER_READ))

        view = memoryview(self._buffer)[self._writer:self._writer + MAX_BYTES_PER_READ]
        try:
            received = sock.recv_into(view, MAX_BYTES_PER_READ)
        finally:
            view.release()
        if received > 0:
            self._writer += received
        return received

    def read_all(self) -> bytes:
        """Consume and return all unread data."""
        data = self.peek()
        if data:
            self.retrieve_all()
        return data

    def read_until_crlf(self) -> bytes:
        """Consume and return data up to and including the last CRLF."""
        pos = self.find_last_crlf()
        if pos is None:
            return b""
        size = pos + 2
        data = bytes(self._buffer[self._reader:self._reader + size])
        self.retrieve(size)
        return data

    def capacity(self) -> int:
        """Current size of the underlying storage."""
        return len(self._buffer)