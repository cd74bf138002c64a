"""TXT record resolution.

The handler only depends on the :class:`TXTResolver` capability, so any
object with a ``lookup_txt`` coroutine can stand in for :class:`DNSResolver`.
"""
from __future__ import annotations

import logging
from typing import Protocol

import dns.asyncresolver
import dns.exception
import dns.name
import dns.resolver

from .text import trim_space

logger = logging.getLogger(__name__)

RESOLV_CONF = "/etc/resolv.conf"
DEFAULT_NAMESERVER = "127.0.0.1"


class DNSLookupError(Exception):
    """A TXT lookup failed for a reason other than the name being absent.

    Attributes:
        name: Queried domain name.
        reason: Short description of the failure.
    """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"lookup {name}: {reason}")
        self.name = name
        self.reason = reason


class NotFoundError(DNSLookupError):
    """The queried name, or a TXT record for it, does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(name, "no such host")


class TXTResolver(Protocol):
    """Anything that can look up TXT records; absent names raise NotFoundError."""

    async def lookup_txt(self, name: str) -> list[str]:
        """Return the TXT strings at ``name``, raising NotFoundError if there are none."""
        ...


class DNSResolver:
    """Asynchronous stub resolver backed by dnspython.

    Without explicit nameservers the system resolv.conf is read, including
    its ``options`` line (``timeout:``, ``attempts:``, ``rotate``) and
    scoped IPv6 addresses such as ``fe80::1%eth0``. Truncated UDP replies
    are retried over TCP and CNAME chains are followed by dnspython.

    Args:
        nameservers: Addresses to query; defaults to the system resolv.conf.
        port: Nameserver port.
        timeout: Seconds allowed per nameserver attempt; None keeps the
            system setting.
        resolv_conf: File read when ``nameservers`` is empty.
    """

    def __init__(
        self,
        nameservers: list[str] | None = None,
        port: int = 53,
        timeout: float | None = None,
        resolv_conf: str = RESOLV_CONF,
    ) -> None:
        if nameservers:
            self._resolver = dns.asyncresolver.Resolver(configure=False)
            addresses = list(nameservers)
        else:
            self._resolver = self._system_resolver(resolv_conf)
            addresses = self.nameservers

        # Nameserver objects capture the port when assigned.
        self._resolver.port = port
        self._resolver.nameservers = addresses
        if timeout is not None:
            self._resolver.timeout = timeout
            self._resolver.lifetime = timeout * max(1, len(addresses))

    @staticmethod
    def _system_resolver(path: str) -> dns.asyncresolver.Resolver:
        try:
            return dns.asyncresolver.Resolver(filename=path)
        except dns.resolver.NoResolverConfiguration as exc:
            logger.warning("%s: %s, falling back to %s", path, exc, DEFAULT_NAMESERVER)
            resolver = dns.asyncresolver.Resolver(configure=False)
            resolver.nameservers = [DEFAULT_NAMESERVER]
            return resolver

    @property
    def nameservers(self) -> list[str]:
        return [getattr(ns, "address", ns) for ns in self._resolver.nameservers]

    @property
    def timeout(self) -> float:
        return self._resolver.timeout

    async def lookup_txt(self, name: str) -> list[str]:
        """Return the TXT strings published at ``name``.

        Each resource record becomes one string: its character-strings are
        concatenated and decoded as UTF-8, undecodable bytes surviving as
        surrogate escapes.

        Raises:
            NotFoundError: The name or its TXT records do not exist, or the
                name is not a valid DNS name.
            DNSLookupError: No nameserver gave a usable answer.
        """
        try:
            qname = dns.name.from_text(name)
        except dns.exception.DNSException as exc:
            # A name that cannot be encoded cannot exist.
            logger.debug("unencodable name %r: %s", name, exc)
            raise NotFoundError(name) from exc

        try:
            answer = await self._resolver.resolve(qname, "TXT", search=False)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as exc:
            raise NotFoundError(name) from exc
        except dns.exception.Timeout as exc:
            raise DNSLookupError(name, "i/o timeout") from exc
        except (dns.exception.DNSException, OSError) as exc:
            logger.debug("TXT %s failed: %s", name, exc)
            raise DNSLookupError(name, str(exc) or type(exc).__name__) from exc

        return [b"".join(rdata.strings).decode("utf-8", "surrogateescape") for rdata in answer]


async def resolve_txt_record(resolver: TXTResolver, name: str) -> list[str]:
    """Look up ``name`` once and normalize the answer.

    A missing name yields ``[]``. Records are trimmed and blank ones
    dropped, so a whitespace-only answer is also ``[]``.

    Raises:
        DNSLookupError: Any failure other than not-found.
    """
    try:
        records = await resolver.lookup_txt(name)
    except NotFoundError:
        return []

    return [trim_space(r) for r in records if trim_space(r)]


async def lookup_first_txt_record(resolver: TXTResolver, record: str, hostname: str) -> str:
    """Return the first TXT value at ``record.hostname``, or ``""``."""
    records = await resolve_txt_record(resolver, f"{record}.{hostname}")
    if not records:
        return ""
    return trim_space(records[0])
