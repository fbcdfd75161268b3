"""TCP connectivity checks."""

from __future__ import annotations

import socket

from .targets import Target

PROBE_TIMEOUT = 1.0


def probe(target: Target, timeout: float = PROBE_TIMEOUT) -> bool:
    """Return ``True`` if ``target`` accepts a TCP connection.

    The connection is closed straight away without sending anything. Refused
    connections, timeouts and resolver failures all come back as ``False``.

    ``timeout`` bounds each connect attempt, not the whole probe: name
    resolution is not covered by it, and a host resolving to several
    addresses gets ``timeout`` per address. A single probe can therefore block
    for longer than ``timeout``.
    """

    try:
        with socket.create_connection((target.host, target.port), timeout=timeout):
            return True
    except (OSError, UnicodeError, ValueError):
        return False
