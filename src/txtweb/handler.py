"""Request handling: from a Host header to a response built from DNS."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from .hostname import extract_hostname
from .html import INDEX_HEADER, wrap_html
from .records import SiteOptions, parse_txtweb_config
from .resolver import DNSLookupError, TXTResolver, lookup_first_txt_record, resolve_txt_record

logger = logging.getLogger(__name__)

TXTWEB_RECORD = "_txtweb"
TXTWEB_CONFIG_RECORD = "_txtweb_cfg"
DEFAULT_PLAIN_CONTENT_TYPE = "text/plain; charset=UTF-8"
DEFAULT_WRAPPED_CONTENT_TYPE = "text/html; charset=UTF-8"
ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"
POWERED_BY_HEADER_NAME = "X-Powered-By"
POWERED_BY_HEADER_VALUE = "txtweb; served from DNS TXT record, see https://txtweb.lefelys.com"


def encode_body(text: str) -> bytes:
    # Surrogate escapes carry TXT bytes that were not valid UTF-8.
    return text.encode("utf-8", "surrogateescape")


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    """Parsed request head.

    Attributes:
        method (str): Request method, e.g. ``GET``.
        target (str): Request target as sent (origin or absolute form).
        version (str): Protocol version, e.g. ``HTTP/1.1``.
        headers (dict[str, str]): Header fields keyed by lowercased name.
    """

    method: str
    target: str
    version: str = "HTTP/1.1"
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def host(self) -> str:
        """Host header, or the authority of an absolute-form target."""
        host = self.headers.get("host", "")
        if host:
            return host
        if "://" in self.target:
            return urlsplit(self.target).netloc
        return ""


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def error_response(message: str, status: int) -> HTTPResponse:
    """Short plain-text error reply."""
    return HTTPResponse(
        status=status,
        headers={
            POWERED_BY_HEADER_NAME: POWERED_BY_HEADER_VALUE,
            "Content-Type": ERROR_CONTENT_TYPE,
            "X-Content-Type-Options": "nosniff",
        },
        body=encode_body(message + "\n"),
    )


class TXTWebHandler:
    """Serves the content published in a host's ``_txtweb`` TXT record.

    Up to two lookups run per request, one after the other: the content
    record, then ``_txtweb_cfg`` only when there is content to render.

    Args:
        resolver: TXT lookup capability.
    """

    def __init__(self, resolver: TXTResolver) -> None:
        self.resolver = resolver

    async def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Build the response for one request.

        DNS failures other than not-found become a 500 and are logged; the
        underlying error is never sent to the client.

        Args:
            request: Parsed request head.

        Returns:
            The response to send.
        """
        hostname = extract_hostname(request.host)
        if not hostname:
            return error_response("Missing Host header", 400)

        try:
            txt_records = await resolve_txt_record(self.resolver, f"{TXTWEB_RECORD}.{hostname}")
        except DNSLookupError as exc:
            logger.warning("content lookup for %s failed: %s", hostname, exc)
            return error_response("DNS lookup failed", 500)

        if not txt_records:
            logger.debug("%s: no %s record", hostname, TXTWEB_RECORD)
            return HTTPResponse(
                status=404,
                headers={
                    POWERED_BY_HEADER_NAME: POWERED_BY_HEADER_VALUE,
                    "Content-Type": ERROR_CONTENT_TYPE,
                },
                body=encode_body(INDEX_HEADER),
            )

        try:
            cfg_record = await lookup_first_txt_record(self.resolver, TXTWEB_CONFIG_RECORD, hostname)
        except DNSLookupError as exc:
            logger.warning("config lookup for %s failed: %s", hostname, exc)
            return error_response("DNS lookup failed", 500)

        options = SiteOptions.from_config(parse_txtweb_config(cfg_record))
        content_type = options.content_type
        body = "\n".join(txt_records)

        if options.html_wrap:
            body = wrap_html(
                body,
                options.html_align,
                options.html_max_width,
                options.html_bg,
                options.html_fg,
            )
            if not content_type:
                content_type = DEFAULT_WRAPPED_CONTENT_TYPE

        if not content_type:
            content_type = DEFAULT_PLAIN_CONTENT_TYPE

        logger.debug("%s: serving %d record(s) as %s", hostname, len(txt_records), content_type)
        return HTTPResponse(
            status=200,
            headers={
                POWERED_BY_HEADER_NAME: POWERED_BY_HEADER_VALUE,
                "Content-Type": content_type,
            },
            body=encode_body(body),
        )
