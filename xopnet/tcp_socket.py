"""A thin owner of one IPv4 TCP socket."""

from __future__ import annotations

import socket
from typing import Optional

from . import socket_util
from .logger import log_debug

__all__ = ["TcpSocket"]


class TcpSocket:
    """Creates, binds, listens, accepts and connects a TCP socket."""

    def __init__(self, sock: Optional[socket.socket] = None) -> None:
        self.sock = sock

    def create(self) -> socket.socket:
        """Open a new IPv4 stream socket and take ownership of it."""
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        return self.sock

    def bind(self, ip: str, port: int) -> bool:
        if self.sock is None or not socket_util.bind(self.sock, ip, port):
            log_debug("<socket=%d> bind <%s:%u> failed.", self.fileno(), ip, port)
            return False
        return True

    def listen(self, backlog: int) -> bool:
        try:
            if self.sock is None:
                raise OSError("no socket")
            self.sock.listen(backlog)
        except OSError:
            log_debug("<socket=%d> listen failed.", self.fileno())
            return False
        return True

    def accept(self) -> Optional[socket.socket]:
        """Accept a pending connection, or None if there is none."""
        if self.sock is None:
            return None
        try:
            conn, _ = self.sock.accept()
        except OSError:
            return None
        return conn

    def connect(self, ip: str, port: int, timeout: int = 0) -> bool:
        """Connect to ``ip:port``, waiting up to ``timeout`` ms if positive."""
        if self.sock is None or not socket_util.connect(self.sock, ip, port, timeout):
            log_debug("<socket=%d> connect failed.", self.fileno())
            return False
        return True

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
        self.sock = None

    def shutdown_write(self) -> None:
        """Shut down the sending side and release the socket."""
        if self.sock is not None:
            try:
                self.sock.shutdown(socket.SHUT_WR)
            except OSError:
                pass
        self.sock = None

    def fileno(self) -> int:
        """Descriptor of the owned socket, or -1 if there is none."""
        return self.sock.fileno() if self.sock is not None else -1