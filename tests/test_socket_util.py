import socket

import pytest

from xopnet import socket_util


@pytest.fixture
def tcp():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    yield sock
    sock.close()


@pytest.fixture
def server():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(4)
    yield srv
    srv.close()


def _free_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def _options(sock):
    return [
        bool(sock.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR)),
        bool(sock.getsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE)),
        bool(sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY)),
    ]


def test_bind_and_local_address(tcp):
    assert socket_util.bind(tcp, "127.0.0.1", 0)
    ip, port = socket_util.get_socket_addr(tcp)
    assert ip == "127.0.0.1"
    assert port > 0
    assert socket_util.get_socket_ip(tcp) == "127.0.0.1"


def test_bind_conflict_fails(tcp, server):
    port = server.getsockname()[1]
    assert socket_util.bind(tcp, "127.0.0.1", port) is False


def test_unconnected_peer_defaults(tcp):
    assert socket_util.get_peer_ip(tcp) == "0.0.0.0"
    assert socket_util.get_peer_port(tcp) == 0
    with pytest.raises(OSError):
        socket_util.get_peer_addr(tcp)


def test_block_toggle(tcp):
    socket_util.set_non_block(tcp)
    assert tcp.getblocking() is False
    socket_util.set_block(tcp, 500)
    assert tcp.getblocking() is True


def test_socket_options(tcp):
    assert _options(tcp) == [False, False, False]
    socket_util.set_reuse_addr(tcp)
    socket_util.set_keep_alive(tcp)
    socket_util.set_no_delay(tcp)
    assert _options(tcp) == [True, True, True]


def test_buffer_sizes(tcp):
    socket_util.set_send_buf_size(tcp, 100 * 1024)
    socket_util.set_recv_buf_size(tcp, 100 * 1024)
    assert tcp.getsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF) >= 100 * 1024
    assert tcp.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF) >= 100 * 1024


def test_connect_blocking(tcp, server):
    port = server.getsockname()[1]
    assert socket_util.connect(tcp, "127.0.0.1", port)
    assert socket_util.get_peer_port(tcp) == port
    assert socket_util.get_peer_ip(tcp) == "127.0.0.1"
    assert socket_util.get_peer_addr(tcp) == ("127.0.0.1", port)


def test_connect_with_timeout(tcp, server):
    port = server.getsockname()[1]
    assert socket_util.connect(tcp, "127.0.0.1", port, 1000)
    assert socket_util.get_peer_port(tcp) == port


def test_connect_refused(tcp):
    assert socket_util.connect(tcp, "127.0.0.1", _free_port()) is False


def test_close(tcp):
    socket_util.close(tcp)
    assert tcp.fileno() == -1