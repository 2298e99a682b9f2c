"""
Host/port resolution for database connection settings.

DB_HOST may embed a port ("db.internal:3307") or be a bracketed IPv6
literal with a port ("[::1]:3306"). When no port is embedded the caller's
default (normally DB_PORT) is used.
"""

import re
from typing import NamedTuple

_LEADING_INT = re.compile(r'^\s*\+?([0-9]+)')


class ConnectionEndpoint(NamedTuple):
    host: str
    port: int


def parse_port(value):
    """
    Best-effort integer conversion of a port segment.

    Leading digits are used ("3306abc" -> 3306); anything without leading
    digits, including negative numbers, gives 0. Never raises.
    """
    match = _LEADING_INT.match(value or '')
    return int(match.group(1)) if match else 0


def resolve(raw_host, default_port):
    """
    Split a host string into a (host, port) endpoint.

    Args:
        raw_host: "host", "host:port", "[ipv6]:port" or "[ipv6]"
        default_port: Port used when raw_host carries none

    Returns:
        ConnectionEndpoint. A bracketed literal without a port is returned
        unchanged, brackets included.
    """
    parts = raw_host.split(':')
    bracketed = raw_host.startswith('[')

    if bracketed and ']:' in raw_host:
        host = ':'.join(parts[:-1])
        if host.startswith('[') and host.endswith(']'):
            host = host[1:-1]
        return ConnectionEndpoint(host, parse_port(parts[-1]))

    if not bracketed and len(parts) > 1:
        return ConnectionEndpoint(parts[0], parse_port(parts[1]))

    return ConnectionEndpoint(raw_host, default_port)
