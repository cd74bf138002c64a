"""Asyncio HTTP/1.1 protocol in front of the request handler."""
from __future__ import annotations

import asyncio
import logging
from email.utils import formatdate

from .handler import HTTPRequest, HTTPResponse, TXTWebHandler, error_response

logger = logging.getLogger(__name__)

MAX_HEADER_BYTES = 64 * 1024

STATUS_TEXT: dict[int, str] = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
}


class RequestParseError(ValueError):
    """The request head could not be parsed."""


def parse_request_head(block: bytes) -> HTTPRequest:
    """Parse a request line and header fields.

    Args:
        block: Bytes up to and including the blank line ending the head.

    Returns:
        The parsed request; header names are lowercased, and the first
        occurrence of a repeated header wins.

    Raises:
        RequestParseError: If the request line is malformed.
    """
    lines = block.decode("iso-8859-1").split("\r\n")
    if not lines or not lines[0]:
        raise RequestParseError("missing request line")

    parts = lines[0].split(" ")
    if len(parts) != 3 or not parts[2].startswith("HTTP/"):
        raise RequestParseError(f"invalid request line {lines[0]!r}")
    method, target, version = parts

    headers: dict[str, str] = {}
    for line in lines[1:]:
        if not line:
            break
        if ":" not in line:
            raise RequestParseError(f"invalid header line {line!r}")
        name, value = line.split(":", 1)
        headers.setdefault(name.strip().lower(), value.strip())
    return HTTPRequest(method=method, target=target, version=version, headers=headers)


def serialize_response(response: HTTPResponse, include_body: bool = True) -> bytes:
    """Render a response for a ``Connection: close`` exchange."""
    headers = dict(response.headers)
    headers.setdefault("Content-Length", str(len(response.body)))
    headers["Date"] = formatdate(usegmt=True)
    headers["Connection"] = "close"

    head = f"HTTP/1.1 {response.status} {STATUS_TEXT.get(response.status, 'Unknown')}\r\n"
    head += "".join(f"{name}: {value}\r\n" for name, value in headers.items())
    data = (head + "\r\n").encode("latin-1", "replace")
    if include_body:
        data += response.body
    return data


class HTTPProtocol(asyncio.Protocol):
    """Serves a single request per connection.

    The head must arrive within ``read_header_timeout`` seconds or the
    connection is dropped. If the client goes away while the handler is
    still resolving, the handler task is cancelled and nothing is written.

    Attributes:
        transport: Active transport or None until connected.
        handler: Request handler shared by all connections.
    """

    def __init__(self, handler: TXTWebHandler, read_header_timeout: float = 5.0) -> None:
        self.handler = handler
        self.read_header_timeout = read_header_timeout
        self.transport: asyncio.Transport | None = None
        self.peer = None
        self._buffer = bytearray()
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]
        self.peer = transport.get_extra_info("peername")
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.read_header_timeout, self._header_timeout)

    def data_received(self, data: bytes) -> None:
        if self._task is not None:
            return
        self._buffer.extend(data)

        end = self._buffer.find(b"\r\n\r\n")
        if end < 0:
            if len(self._buffer) > MAX_HEADER_BYTES:
                self._reply(error_response("Request Header Fields Too Large", 431))
            return

        self._cancel_timer()
        try:
            request = parse_request_head(bytes(self._buffer[: end + 4]))
        except (RequestParseError, UnicodeDecodeError) as exc:
            logger.debug("bad request from %s: %s", self.peer, exc)
            self._reply(error_response("Bad Request", 400))
            return

        logger.debug("%s %s %s (host %r)", self.peer, request.method, request.target, request.host)
        self._task = asyncio.get_running_loop().create_task(self._respond(request))

    def eof_received(self) -> bool:
        # Half-closed clients still get their answer.
        return self._task is not None

    def connection_lost(self, exc: Exception | None) -> None:
        self._cancel_timer()
        if self._task is not None and not self._task.done():
            logger.debug("client %s went away, abandoning request", self.peer)
            self._task.cancel()
        self.transport = None

    async def _respond(self, request: HTTPRequest) -> None:
        try:
            response = await self.handler.handle(request)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("handler failed for %s", request.host)
            response = error_response("Internal Server Error", 500)
        self._reply(response, include_body=request.method != "HEAD")

    def _reply(self, response: HTTPResponse, include_body: bool = True) -> None:
        if self.transport is None or self.transport.is_closing():
            return
        try:
            self.transport.write(serialize_response(response, include_body))
        except (OSError, RuntimeError) as exc:
            logger.warning("failed to send response to %s: %s", self.peer, exc)
        self.transport.close()

    def _header_timeout(self) -> None:
        self._timer = None
        if self.transport is not None and self._task is None:
            logger.debug("header read timeout from %s", self.peer)
            self.transport.close()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
