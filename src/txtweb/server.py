"""Server entry point and lifecycle management."""
from __future__ import annotations

import asyncio
import logging
from typing import NoReturn

from .config import Config
from .handler import TXTWebHandler
from .protocol import HTTPProtocol
from .resolver import DNSResolver, TXTResolver

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO") -> None:
    """Install the root handler once and apply ``log_level``."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


async def start_server(config: Config, resolver: TXTResolver | None = None) -> asyncio.Server:
    """Bind the HTTP listener.

    Args:
        config: Listener and resolver settings.
        resolver: TXT lookup capability; a :class:`DNSResolver` built from
            ``config`` when omitted.

    Returns:
        The listening server.

    Raises:
        OSError: If the socket cannot be bound.
    """
    if resolver is None:
        resolver = DNSResolver(config.nameservers, port=config.dns_port, timeout=config.dns_timeout)
    handler = TXTWebHandler(resolver)

    loop = asyncio.get_running_loop()
    server = await loop.create_server(
        lambda: HTTPProtocol(handler, read_header_timeout=config.read_header_timeout),
        host=config.host or None,
        port=config.port,
    )
    for sock in server.sockets:
        logger.info("listening on %s", sock.getsockname())
    return server


async def serve(config: Config, resolver: TXTResolver | None = None) -> NoReturn:
    """Run the HTTP server until cancelled.

    Args:
        config: Listener and resolver settings.
        resolver: Optional TXT lookup capability.
    """
    configure_logging(config.log_level)

    server = await start_server(config, resolver)
    try:
        await asyncio.Future()
    except asyncio.CancelledError:
        logger.info("server task cancelled")
        raise
    finally:
        logger.info("shutting down…")
        server.close()
        await server.wait_closed()
