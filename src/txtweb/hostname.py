"""Host identifier normalization."""
from __future__ import annotations

from .text import trim_space


def split_host_port(hostport: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into its parts.

    Args:
        hostport: Authority string including a port.

    Returns:
        Tuple of (host, port). The port may be empty (``"example.com:"``).

    Raises:
        ValueError: If the string has no port or ambiguous colons.
    """
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {hostport!r}")
        if end + 1 == len(hostport) or hostport[end + 1] != ":":
            raise ValueError(f"missing port in address {hostport!r}")
        host, port = hostport[1:end], hostport[end + 2:]
        if "[" in host:
            raise ValueError(f"unexpected '[' in address {hostport!r}")
    else:
        host, sep, port = hostport.rpartition(":")
        if not sep:
            raise ValueError(f"missing port in address {hostport!r}")
        if ":" in host:
            raise ValueError(f"too many colons in address {hostport!r}")
        if "[" in host or "]" in host:
            raise ValueError(f"unexpected bracket in address {hostport!r}")
    if "[" in port or "]" in port:
        raise ValueError(f"unexpected bracket in address {hostport!r}")
    return host, port


def extract_hostname(host: str) -> str:
    """Reduce a raw ``Host`` value to a bare hostname.

    Ports and IPv6 brackets are stripped. Nothing is validated; an empty
    result means the request did not carry a usable host.

    Args:
        host: Header value such as ``example.com:8080`` or ``[::1]:80``.

    Returns:
        The bare hostname, or ``""``.
    """
    host = trim_space(host)
    if not host:
        return ""

    try:
        parsed, _ = split_host_port(host)
    except ValueError:
        pass
    else:
        return parsed.strip("[]")

    # IPv6 literal without a port.
    if host.count(":") > 1:
        return host.strip("[]")

    return host
