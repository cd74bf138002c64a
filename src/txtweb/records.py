"""Parsing of the ``_txtweb_cfg`` configuration record."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

from .text import trim_left_space, trim_space

logger = logging.getLogger(__name__)

# Characters that may not appear in a parameter token (RFC 2045).
TSPECIALS = frozenset('()<>@,;:\\"/[]?=')

_BAD_ESCAPE = re.compile("%(?![0-9A-Fa-f]{2})")


class ConfigSyntaxError(ValueError):
    """Raised internally for a malformed parameter list."""


def _is_token_char(ch: str) -> bool:
    return "\x20" < ch < "\x7f" and ch not in TSPECIALS


def _consume_token(s: str) -> tuple[str, str]:
    i = 0
    while i < len(s) and _is_token_char(s[i]):
        i += 1
    return s[:i], s[i:]


def _consume_value(s: str) -> tuple[str, str]:
    """Consume a token or a quoted string from the front of ``s``."""
    if not s.startswith('"'):
        value, rest = _consume_token(s)
        if not value:
            raise ConfigSyntaxError(f"expected value at {s!r}")
        return value, rest

    out: list[str] = []
    i = 1
    while i < len(s):
        ch = s[i]
        if ch == '"':
            return "".join(out), s[i + 1:]
        if ch in "\r\n":
            break
        # A backslash only escapes special characters.
        if ch == "\\" and i + 1 < len(s) and s[i + 1] in TSPECIALS:
            out.append(s[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    raise ConfigSyntaxError("unterminated quoted string")


def _percent_unescape(s: str) -> str:
    """Decode ``%XX`` escapes; any other ``%`` is an error."""
    if _BAD_ESCAPE.search(s):
        raise ConfigSyntaxError(f"bad percent escape in {s!r}")
    return unquote_to_bytes(s.encode("utf-8", "surrogateescape")).decode("utf-8", "surrogateescape")


def _decode_2231(value: str) -> str | None:
    """Decode an RFC 2231 ``charset'language'percent-encoded`` value.

    Returns:
        The decoded text, or None for a malformed value or a charset other
        than US-ASCII or UTF-8.
    """
    parts = value.split("'", 2)
    if len(parts) != 3:
        return None
    charset = parts[0].lower()
    if charset not in ("us-ascii", "utf-8"):
        return None
    try:
        return _percent_unescape(parts[2])
    except ConfigSyntaxError:
        return None


def _join_continuations(name: str, pieces: dict[str, str]) -> str | None:
    """Assemble ``name*``, or ``name*0``, ``name*1*``... into one value."""
    if f"{name}*" in pieces:
        return _decode_2231(pieces[f"{name}*"])

    out: list[str] = []
    found = False
    n = 0
    while True:
        simple = f"{name}*{n}"
        if simple in pieces:
            out.append(pieces[simple])
        elif simple + "*" in pieces:
            encoded = pieces[simple + "*"]
            if n == 0:
                out.append(_decode_2231(encoded) or "")
            else:
                try:
                    out.append(_percent_unescape(encoded))
                except ConfigSyntaxError as exc:
                    logger.debug("dropping %s: %s", simple + "*", exc)
        else:
            break
        found = True
        n += 1
    return "".join(out) if found else None


def parse_parameters(params: str) -> dict[str, str]:
    """Parse a ``; key=value; key="value"`` media-type parameter list.

    Keys are lowercased. One trailing semicolon is tolerated. A key may be
    repeated with the same value. RFC 2231 extended parameters
    (``key*=utf-8''%23fff``) and continuations (``key*0=a; key*1=b``) are
    decoded into the plain ``key``.

    Args:
        params: Parameter section of a media type, including leading ``;``.

    Returns:
        Parameter names mapped to their values.

    Raises:
        ConfigSyntaxError: On any grammar violation, or a key repeated with
            a different value.
    """
    result: dict[str, str] = {}
    continuations: dict[str, dict[str, str]] = {}
    rest = params
    while trim_space(rest):
        rest = trim_left_space(rest)
        if trim_space(rest) == ";":
            break
        if not rest.startswith(";"):
            raise ConfigSyntaxError(f"expected ';' at {rest!r}")

        key, rest = _consume_token(trim_left_space(rest[1:]))
        key = key.lower()
        if not key:
            raise ConfigSyntaxError(f"expected parameter name at {rest!r}")

        rest = trim_left_space(rest)
        if not rest.startswith("="):
            raise ConfigSyntaxError(f"expected '=' after {key!r}")
        value, rest = _consume_value(trim_left_space(rest[1:]))

        target = result
        if "*" in key:
            target = continuations.setdefault(key.split("*", 1)[0], {})
        if target.get(key, value) != value:
            raise ConfigSyntaxError(f"duplicate parameter {key!r}")
        target[key] = value

    for name, pieces in continuations.items():
        value = _join_continuations(name, pieces)
        if value is not None:
            result[name] = value
    return result


def parse_txtweb_config(cfg: str) -> dict[str, str]:
    """Parse a configuration record into an option mapping.

    The record is read as the parameter list of a media type, e.g.
    ``html-wrap=true; html-bg="#fff"``. A malformed record yields an empty
    mapping rather than an error, so a typo only loses the styling.

    Args:
        cfg: Raw record text, possibly empty.

    Returns:
        Lowercased option names mapped to trimmed, non-empty values.
    """
    trimmed = trim_space(cfg)
    if not trimmed:
        return {}

    try:
        params = parse_parameters("; " + trimmed)
    except ConfigSyntaxError as exc:
        logger.debug("ignoring malformed config record %r: %s", cfg, exc)
        return {}

    result: dict[str, str] = {}
    for key, value in params.items():
        key, value = trim_space(key).lower(), trim_space(value)
        if key and value:
            result[key] = value
    return result


@dataclass(frozen=True, slots=True)
class SiteOptions:
    """Rendering options recognized in a configuration record.

    Attributes:
        content_type (str): Explicit Content-Type, or empty for the default.
        html_wrap (bool): Wrap the content in an HTML document.
        html_align (str): Placement of the content box.
        html_max_width (str): CSS max-width of the content box.
        html_bg (str): CSS background of the page.
        html_fg (str): CSS text color of the page.
    """

    content_type: str = ""
    html_wrap: bool = False
    html_align: str = ""
    html_max_width: str = ""
    html_bg: str = ""
    html_fg: str = ""

    @classmethod
    def from_config(cls, cfg: dict[str, str]) -> SiteOptions:
        return cls(
            content_type=cfg.get("content-type", ""),
            html_wrap=trim_space(cfg.get("html-wrap", "")).lower() == "true",
            html_align=cfg.get("html-align", ""),
            html_max_width=cfg.get("html-max-width", ""),
            html_bg=cfg.get("html-bg", ""),
            html_fg=cfg.get("html-fg", ""),
        )
