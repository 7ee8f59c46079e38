"""A bounded queue of outgoing packets and integer-to-bytes encoders."""

from __future__ import annotations

import socket
from collections import deque
from dataclasses import dataclass
from typing import Deque

from .socket_util import set_block, set_non_block

__all__ = [
    "write_uint32_be",
    "write_uint32_le",
    "write_uint24_be",
    "write_uint24_le",
    "write_uint16_be",
    "write_uint16_le",
    "BufferWriter",
    "MAX_QUEUE_LENGTH",
]

MAX_QUEUE_LENGTH = 10000


def write_uint32_be(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "big")


def write_uint32_le(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "little")


def write_uint24_be(value: int) -> bytes:
    return (value & 0xFFFFFF).to_bytes(3, "big")


def write_uint24_le(value: int) -> bytes:
    return (value & 0xFFFFFF).to_bytes(3, "little")


def write_uint16_be(value: int) -> bytes:
    return (value & 0xFFFF).to_bytes(2, "big")


def write_uint16_le(value: int) -> bytes:
    return (value & 0xFFFF).to_bytes(2, "little")


@dataclass
class _Packet:
    data: bytes
    index: int


class BufferWriter:
    """Queues packets and writes them to a socket as it accepts them."""

    def __init__(self, capacity: int = MAX_QUEUE_LENGTH) -> None:
        self.capacity = capacity
        self._packets: Deque[_Packet] = deque()

    def append(self, data: bytes, index: int = 0) -> bool:
        """Queue ``data`` starting from ``index``; False if empty or full."""
        if len(data) <= index:
            return False
        if self.is_full():
            return False
        self._packets.append(_Packet(bytes(data), index))
        return True

    def send(self, sock: socket.socket, timeout: int = 0) -> int:
        """Send queued packets until one is only partly written.

        Returns the byte count of the last partial write, or 0 when the
        queue has been drained or the socket would block. Other socket
        errors propagate. With a positive ``timeout`` (ms) the socket is
        made blocking for the call and non-blocking afterwards.
        """
        if timeout > 0:
            set_block(sock, timeout)
        try:
            sent = 0
            budget = 1
            while budget > 0:
                if not self._packets:
                    return 0
                budget -= 1
                packet = self._packets[0]
                try:
                    sent = sock.send(memoryview(packet.data)[packet.index:])
                except (BlockingIOError, InterruptedError):
                    sent = 0
                    continue
                if sent > 0:
                    packet.index += sent
                    if packet.index == len(packet.data):
                        self._packets.popleft()
                        budget += 1
            return sent
        finally:
            if timeout > 0:
                set_non_block(sock)

    def is_empty(self) -> bool:
        return not self._packets

    def is_full(self) -> bool:
        return len(self._packets) >= self.capacity

    def __len__(self) -> int:
        return len(self._packets)