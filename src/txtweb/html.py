"""HTML document wrapping for TXT content."""
from __future__ import annotations

INDEX_HEADER = """

█████████████████████████████████████████
█─▄─▄─█▄─▀─▄█─▄─▄─█▄─█▀▀▀█─▄█▄─▄▄─█▄─▄─▀█
███─████▀─▀████─████─█─█─█─███─▄█▀██─▄─▀█
▀▀▄▄▄▀▀▄▄█▄▄▀▀▄▄▄▀▀▀▄▄▄▀▄▄▄▀▀▄▄▄▄▄▀▄▄▄▄▀▀

txtweb — serve a website from a DNS TXT record.

Info: https://txtweb.lefelys.com
"""

DEFAULT_HTML_PADDING = "24px"

# html-align value -> (align-items, justify-content)
ALIGNMENTS: dict[str, tuple[str, str]] = {
    "top-right": ("flex-start", "flex-end"),
    "bottom-left": ("flex-end", "flex-start"),
    "bottom-right": ("flex-end", "flex-end"),
    "center": ("center", "center"),
}
DEFAULT_ALIGNMENT = ("flex-start", "flex-start")

_DOCUMENT_HEAD = (
    '<!doctype html><html><head><meta charset="utf-8">'
    '<meta name="viewport" content="width=device-width, initial-scale=1"></head>'
)


def comment_safe(text: str) -> str:
    """Replace ``--`` so ``text`` cannot end an HTML comment early."""
    return text.replace("--", "—")


def wrap_html(content: str, align: str, max_width: str, bg_color: str, fg_color: str) -> str:
    """Build a full HTML page around ``content``.

    ``content`` is inserted as-is. It is not escaped: the owner of the DNS
    zone decides what markup their site serves. Style values are likewise
    copied verbatim into the ``style`` attributes; empty ones are left out.

    Args:
        content: Raw page content.
        align: ``top-right``, ``bottom-left``, ``bottom-right`` or ``center``;
            anything else places the content top-left.
        max_width: CSS length limiting the content width.
        bg_color: CSS background of the page.
        fg_color: CSS text color of the page.

    Returns:
        The HTML document.
    """
    align_items, justify_content = ALIGNMENTS.get(align, DEFAULT_ALIGNMENT)
    body_styles = [
        "margin:0",
        "min-height:100vh",
        "padding:" + DEFAULT_HTML_PADDING,
        "box-sizing:border-box",
        "display:flex",
        "align-items:" + align_items,
        "justify-content:" + justify_content,
    ]
    content_styles = ["white-space:pre-wrap", "text-align:left"]

    if bg_color:
        body_styles.append("background:" + bg_color)
    if fg_color:
        body_styles.append("color:" + fg_color)
    if max_width:
        content_styles.extend(["max-width:" + max_width, "width:100%"])

    return (
        "<!--\n" + comment_safe(INDEX_HEADER) + "\n-->\n"
        + _DOCUMENT_HEAD
        + '<body style="' + ";".join(body_styles) + '">'
        + '<div style="' + ";".join(content_styles) + '">'
        + content
        + "</div></body></html>"
    )
