"""Discovery of the host's primary IPv4 address."""

from __future__ import annotations

import ipaddress
import socket
from typing import List, Optional

__all__ = ["get_local_ip_address"]

_UNSPECIFIED = "0.0.0.0"
# Documentation-only address: connecting a UDP socket to it sends nothing
# but makes the system choose the outgoing interface.
_PROBE_ADDRESS = ("192.0.2.1", 9)


def _route_address() -> Optional[str]:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
            probe.connect(_PROBE_ADDRESS)
            return probe.getsockname()[0]
    except OSError:
        return None


def _hostname_addresses() -> List[str]:
    try:
        return list(socket.gethostbyname_ex(socket.gethostname())[2])
    except OSError:
        return []


def _usable(address: Optional[str]) -> bool:
    if not address:
        return False
    try:
        ip = ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return not (ip.is_loopback or ip.is_unspecified)


def get_local_ip_address() -> str:
    """First non-loopback IPv4 address of this host, or ``0.0.0.0``."""
    for candidate in (_route_address(), *_hostname_addresses()):
        if _usable(candidate):
            return candidate
    return _UNSPECIFIED