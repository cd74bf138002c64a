"""Whitespace handling shared by the record parsers."""
from __future__ import annotations

# Unicode White_Space characters. Unlike str.isspace() this excludes the
# information separators U+001C..U+001F, which stay part of record text.
WHITESPACE = "\t\n\v\f\r \x85\xa0" + "".join(
    map(chr, (0x1680, *range(0x2000, 0x200B), 0x2028, 0x2029, 0x202F, 0x205F, 0x3000))
)


def trim_space(s: str) -> str:
    """Strip leading and trailing Unicode white space."""
    return s.strip(WHITESPACE)


def trim_left_space(s: str) -> str:
    return s.lstrip(WHITESPACE)
