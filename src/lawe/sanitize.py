"""HTML escaping and attribute allow-listing for pseudo-HTML tags.

Every piece of user text that reaches the HTML output passes through
``html_escape``; every attribute the lexer keeps has been filtered through
``filter_attributes``.

Example:
    >>> filter_attributes("callout", {"type": "info", "onclick": "x()"})
    {'type': 'info'}
    >>> filter_attributes("td", {"class": "javascript:alert(1)"})
    {'class': ''}
"""

import html
import re
from collections.abc import Mapping

# Zero-width, bidi override and ASCII control characters hidden inside schemes
_OBFUSCATION_PATTERN = re.compile(
    "[\x00-\x20\x7f\u200b\u200c\u200d\u200e\u200f\u202a\u202b\u202c\u202d\u202e\ufeff]+"
)

_PREFIX_SCHEMES = ("vbscript:", "data:")

ATTRIBUTE_ALLOWLIST: Mapping[str, frozenset[str]] = {
    "callout": frozenset(("type", "title")),
    "sub": frozenset(),
    "sup": frozenset(),
    "table": frozenset(("class", "width")),
    "thead": frozenset(("class",)),
    "tbody": frozenset(("class",)),
    "tfoot": frozenset(("class",)),
    "tr": frozenset(("class",)),
    "td": frozenset(("class", "colspan", "rowspan", "align")),
    "th": frozenset(("class", "colspan", "rowspan", "align")),
    "affili": frozenset(("name", "school", "class", "fAppear")),
}


def html_escape(s: str) -> str:
    """Escape ``& < > " '`` for use in text and attribute positions.

    Single quotes become ``&#039;`` so that values are safe inside either
    quote style.
    """
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def escape_attribute(value: str) -> str:
    """Escape an attribute value that may already be escaped.

    Values pass through the lexer's sanitizer once and the renderer's
    attribute writer once more; unescaping first keeps the result stable.
    """
    return html_escape(html.unescape(value))


def is_dangerous_value(value: str) -> bool:
    """Check whether an attribute value carries a script-capable scheme."""
    normalized = _OBFUSCATION_PATTERN.sub("", html.unescape(value)).lower()
    if "javascript:" in normalized:
        return True
    return normalized.startswith(_PREFIX_SCHEMES)


def sanitize_value(value: str) -> str:
    """Escape a retained value, reducing dangerous ones to ``""``."""
    if is_dangerous_value(value):
        return ""
    return html_escape(value)


def filter_attributes(tag: str, attributes: Mapping[str, str]) -> dict[str, str]:
    """Keep only the attributes allowed for ``tag``, sanitizing their values.

    Args:
        tag: Lowercase pseudo-HTML tag name
        attributes: Raw attributes as scanned from the source

    Returns:
        New dict of allowed, escaped attribute values (unknown tags keep none)
    """
    allowed = ATTRIBUTE_ALLOWLIST.get(tag, frozenset())
    return {
        name: sanitize_value(value)
        for name, value in attributes.items()
        if name in allowed
    }


__all__ = [
    "ATTRIBUTE_ALLOWLIST",
    "escape_attribute",
    "filter_attributes",
    "html_escape",
    "is_dangerous_value",
    "sanitize_value",
]
