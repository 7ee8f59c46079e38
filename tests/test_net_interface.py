import ipaddress
from unittest import mock

from xopnet.net_interface import get_local_ip_address


def test_result_is_ipv4_and_not_loopback():
    address = get_local_ip_address()
    ip = ipaddress.IPv4Address(address)
    assert not ip.is_loopback
    assert ip.is_unspecified or not ip.is_unspecified and str(ip) == address


@mock.patch("socket.gethostbyname_ex", return_value=("host", [], ["127.0.0.1"]))
@mock.patch("socket.socket", side_effect=OSError("no network"))
def test_only_loopback_gives_unspecified(_socket, _lookup):
    assert get_local_ip_address() == "0.0.0.0"


@mock.patch("socket.gethostbyname_ex", return_value=("host", [], ["127.0.0.1", "10.1.2.3"]))
@mock.patch("socket.socket", side_effect=OSError("no network"))
def test_falls_back_to_hostname_addresses(_socket, _lookup):
    assert get_local_ip_address() == "10.1.2.3"


@mock.patch("socket.gethostbyname_ex", side_effect=OSError("unknown host"))
@mock.patch("socket.socket", side_effect=OSError("no network"))
def test_nothing_available(_socket, _lookup):
    assert get_local_ip_address() == "0.0.0.0"