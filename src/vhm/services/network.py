"""Host network capability checks."""

from __future__ import annotations

import socket
from pathlib import Path

_IF_INET6 = Path("/proc/net/if_inet6")


def ipv6_supported() -> bool:
    """Return True when the interpreter and the kernel both support IPv6."""
    if not socket.has_ipv6:
        return False
    return _IF_INET6.exists()
