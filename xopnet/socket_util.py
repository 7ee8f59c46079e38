"""Helpers for configuring and inspecting IPv4 TCP sockets."""

from __future__ import annotations

import select
import socket
import struct
import sys
from typing import Tuple

__all__ = [
    "bind",
    "set_non_block",
    "set_block",
    "set_reuse_addr",
    "set_reuse_port",
    "set_no_delay",
    "set_keep_alive",
    "set_send_buf_size",
    "set_recv_buf_size",
    "get_peer_ip",
    "get_socket_ip",
    "get_socket_addr",
    "get_peer_port",
    "get_peer_addr",
    "close",
    "connect",
]


def bind(sock: socket.socket, ip: str, port: int) -> bool:
    """Bind to ``ip:port``; return False on failure."""
    try:
        sock.bind((ip, port))
    except OSError:
        return False
    return True


def set_non_block(sock: socket.socket) -> None:
    sock.setblocking(False)


def set_block(sock: socket.socket, write_timeout: int = 0) -> None:
    """Make the socket blocking, with an optional send timeout in ms."""
    sock.setblocking(True)
    if write_timeout > 0 and hasattr(socket, "SO_SNDTIMEO"):
        if sys.platform == "win32":
            value = struct.pack("L", write_timeout)
        else:
            value = struct.pack("ll", write_timeout // 1000, (write_timeout % 1000) * 1000)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDTIMEO, value)


def set_reuse_addr(sock: socket.socket) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


def set_reuse_port(sock: socket.socket) -> None:
    if hasattr(socket, "SO_REUSEPORT"):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)


def set_no_delay(sock: socket.socket) -> None:
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


def set_keep_alive(sock: socket.socket) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)


def set_send_buf_size(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)


def set_recv_buf_size(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, size)


def get_peer_ip(sock: socket.socket) -> str:
    """Remote address, or ``0.0.0.0`` if not connected."""
    try:
        return sock.getpeername()[0]
    except OSError:
        return "0.0.0.0"


def get_socket_ip(sock: socket.socket) -> str:
    """Local address, or ``127.0.0.1`` if it cannot be read."""
    try:
        return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"


def get_socket_addr(sock: socket.socket) -> Tuple[str, int]:
    """Local ``(ip, port)``; raises OSError on failure."""
    host, port = sock.getsockname()[:2]
    return host, port


def get_peer_port(sock: socket.socket) -> int:
    """Remote port, or 0 if not connected."""
    try:
        return sock.getpeername()[1]
    except OSError:
        return 0


def get_peer_addr(sock: socket.socket) -> Tuple[str, int]:
    """Remote ``(ip, port)``; raises OSError if not connected."""
    host, port = sock.getpeername()[:2]
    return host, port


def close(sock: socket.socket) -> None:
    sock.close()


def connect(sock: socket.socket, ip: str, port: int, timeout: int = 0) -> bool:
    """Connect to ``ip:port``, waiting up to ``timeout`` ms if positive."""
    if timeout > 0:
        set_non_block(sock)
    try:
        error = sock.connect_ex((ip, port))
    except OSError:
        return False
    if error == 0:
        return True
    if timeout <= 0:
        return False
    _, writable, _ = select.select([], [sock], [], timeout / 1000)
    set_block(sock)
    return sock in writable