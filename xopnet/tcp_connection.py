"""One accepted TCP connection driven by a task scheduler."""

from __future__ import annotations

import contextlib
import socket
import threading
from typing import Callable, Optional

from . import socket_util
from .buffer_reader import BufferReader
from .buffer_writer import BufferWriter
from .channel import Channel
from .task_scheduler import TaskScheduler

__all__ = ["TcpConnection", "ReadCallback", "CloseCallback", "DisconnectCallback"]

ReadCallback = Callable[["TcpConnection", BufferReader], bool]
CloseCallback = Callable[["TcpConnection"], None]
DisconnectCallback = Callable[["TcpConnection"], None]

_SEND_QUEUE_LENGTH = 500
_SEND_BUF_SIZE = 100 * 1024


class TcpConnection:
    """Reads into a buffer, queues writes and reports closing.

    ``read_callback(conn, buffer)`` is run after each successful read; if it
    returns False the connection is closed. ``close_callback`` and then
    ``disconnect_callback`` run once when the connection closes. When a
    ``disconnect_callback`` is set, the socket is left open for its owner to
    release; otherwise it is closed straight away.
    """

    def __init__(self, task_scheduler: TaskScheduler, sock: socket.socket) -> None:
        self.task_scheduler = task_scheduler
        self.read_callback: Optional[ReadCallback] = None
        self.close_callback: Optional[CloseCallback] = None
        self.disconnect_callback: Optional[DisconnectCallback] = None
        self._sock = sock
        self._read_buffer = BufferReader()
        self._write_buffer = BufferWriter(_SEND_QUEUE_LENGTH)
        self._lock = threading.RLock()
        self._closed = False

        self._channel = Channel(sock.fileno())
        self._channel.read_callback = self.handle_read
        self._channel.write_callback = self.handle_write
        self._channel.close_callback = self.handle_close
        self._channel.error_callback = self.handle_error

        socket_util.set_non_block(sock)
        with contextlib.suppress(OSError):
            socket_util.set_send_buf_size(sock, _SEND_BUF_SIZE)
        with contextlib.suppress(OSError):
            socket_util.set_keep_alive(sock)

        self._channel.enable_reading()
        self.task_scheduler.update_channel(self._channel)

    def send(self, data: bytes) -> None:
        """Queue ``data`` and try to write it now; ignored once closed."""
        if self._closed:
            return
        with self._lock:
            self._write_buffer.append(data)
        self.handle_write()

    def disconnect(self) -> None:
        """Close the connection from within its scheduler's thread."""
        with self._lock:
            self.task_scheduler.add_trigger_event(self._close_locked)

    def is_closed(self) -> bool:
        return self._closed

    def fileno(self) -> int:
        return self._channel.fileno()

    def ip(self) -> str:
        """Address of the peer, ``0.0.0.0`` if unknown."""
        return socket_util.get_peer_ip(self._sock)

    def port(self) -> int:
        """Port of the peer, 0 if unknown."""
        return socket_util.get_peer_port(self._sock)

    def handle_read(self) -> None:
        """Receive waiting data and pass the buffer to the read callback."""
        with self._lock:
            if self._closed:
                return
            try:
                received = self._read_buffer.read(self._sock)
            except (BlockingIOError, InterruptedError):
                return
            except OSError:
                received = -1
            if received <= 0:
                self._close()
                return

        callback = self.read_callback
        if callback is not None and not callback(self, self._read_buffer):
            with self._lock:
                self._close()

    def handle_write(self) -> None:
        """Write queued data and watch for writability while some remains."""
        if self._closed:
            return
        if not self._lock.acquire(blocking=False):
            return
        try:
            try:
                self._write_buffer.send(self._sock)
            except OSError:
                self._close()
                return
            if self._write_buffer.is_empty():
                if self._channel.is_writing():
                    self._channel.disable_writing()
                    self.task_scheduler.update_channel(self._channel)
            elif not self._channel.is_writing():
                self._channel.enable_writing()
                self.task_scheduler.update_channel(self._channel)
        finally:
            self._lock.release()

    def handle_close(self) -> None:
        self._close_locked()

    def handle_error(self) -> None:
        self._close_locked()

    def _close_locked(self) -> None:
        with self._lock:
            self._close()

    def _close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.task_scheduler.remove_channel(self._channel)
        if self.close_callback is not None:
            self.close_callback(self)
        if self.disconnect_callback is not None:
            self.disconnect_callback(self)
        else:
            self._release()

    def _release(self) -> None:
        with contextlib.suppress(OSError):
            self._sock.close()