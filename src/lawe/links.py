"""Link target classification and normalization.

Pure functions shared by the lexer's LinkHandler and the parser. A link
target is one of:

- interwiki: ``prefix>id`` resolved through ``INTERWIKI`` (e.g. ``wp>Python``)
- external: ``http://`` or ``https://`` URLs
- anchor: ``#fragment`` within the current page
- internal: ``namespace/page#anchor`` wiki paths

Thread Safety:
All functions are pure. The interwiki registry is read-only after import
unless a caller registers a new destination at startup.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

type LinkType = Literal["external", "internal", "anchor"]

_EXTERNAL_URL = re.compile(r"^https?://")
_INTERNAL_LINK = re.compile(r"^[a-zA-Z0-9_\-/:#]+$")
_INTERWIKI_PREFIX = re.compile(r"^([a-z]+)>(.+)$", re.IGNORECASE)
_REPEATED_SLASHES = re.compile(r"/+")

# Characters left unescaped in interwiki identifiers (URI component rules)
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True, slots=True)
class InterwikiSite:
    """A known interwiki destination.

    Attributes:
        base_url: Scheme and host, without trailing slash
        path_template: Path with an ``{id}`` placeholder
    """

    base_url: str
    path_template: str

    def url_for(self, identifier: str) -> str:
        encoded = quote(identifier, safe=_URI_COMPONENT_SAFE)
        return self.base_url + self.path_template.replace("{id}", encoded)


INTERWIKI: dict[str, InterwikiSite] = {
    "wp": InterwikiSite("https://en.wikipedia.org", "/wiki/{id}"),
    "yt": InterwikiSite("https://www.youtube.com", "/watch?v={id}"),
}


@dataclass(frozen=True, slots=True)
class LinkTarget:
    """Classification of a raw link target.

    Attributes:
        is_valid: Whether the target can be rendered as a link
        type: external, internal or anchor
        namespace: Internal link namespace (``a/b`` in ``a/b/c``)
        page: Internal page name
        anchor: Fragment without ``#``
        interwiki_dest: Interwiki prefix (``wp``)
        interwiki_id: Identifier on the interwiki site
        error: Reason the target is invalid
    """

    is_valid: bool
    type: LinkType
    namespace: str | None = None
    page: str | None = None
    anchor: str | None = None
    interwiki_dest: str | None = None
    interwiki_id: str | None = None
    error: str | None = None

    @property
    def is_interwiki(self) -> bool:
        return self.interwiki_dest is not None and self.interwiki_id is not None


def validate_link_target(target: str) -> LinkTarget:
    """Classify and validate a raw link target.

    Examples:
        >>> validate_link_target("wp>Topic").interwiki_dest
        'wp'
        >>> validate_link_target("a/b/c").namespace
        'a/b'
        >>> validate_link_target("").is_valid
        False
    """
    if not target or not target.strip():
        return LinkTarget(False, "internal", error="Empty link target")

    trimmed = target.strip()

    match = _INTERWIKI_PREFIX.match(trimmed)
    if match:
        prefix, identifier = match.groups()
        if prefix.lower() not in INTERWIKI:
            return LinkTarget(False, "external", error=f"Unknown wiki prefix: {prefix}")
        if not identifier.strip():
            return LinkTarget(False, "external", error=f"Empty {prefix} identifier")
        return LinkTarget(
            True,
            "external",
            interwiki_dest=prefix,
            interwiki_id=identifier.strip(),
        )

    if _EXTERNAL_URL.match(trimmed):
        return LinkTarget(True, "external")

    if trimmed.startswith("#"):
        anchor = trimmed[1:]
        if not anchor:
            return LinkTarget(False, "anchor", error="Empty anchor")
        return LinkTarget(True, "anchor", anchor=anchor)

    if not _INTERNAL_LINK.match(trimmed):
        return LinkTarget(False, "internal", error="Invalid characters in internal link")

    link_part, _, anchor = trimmed.partition("#")
    namespace, _, page = link_part.rpartition("/")

    if not page and not anchor:
        return LinkTarget(False, "internal", error="Missing page name")

    return LinkTarget(
        True,
        "internal",
        namespace=namespace or None,
        page=page or None,
        anchor=anchor or None,
    )


def normalize_internal_link(target: str) -> str:
    """Strip one leading slash and collapse repeated slashes.

    Non-internal or invalid targets are returned unchanged.

    Example:
        >>> normalize_internal_link("/a//b///c")
        'a/b/c'
    """
    classified = validate_link_target(target)
    if not classified.is_valid or classified.type != "internal":
        return target

    normalized = target.strip()
    if normalized.startswith("/"):
        normalized = normalized[1:]
    return _REPEATED_SLASHES.sub("/", normalized)


def generate_interwiki_url(prefix: str, identifier: str) -> str | None:
    """Build the URL for an interwiki link, or None for unknown prefixes.

    Example:
        >>> generate_interwiki_url("wp", "Rust (language)")
        'https://en.wikipedia.org/wiki/Rust%20(language)'
    """
    site = INTERWIKI.get(prefix.lower())
    if site is None:
        return None
    return site.url_for(identifier)


def register_interwiki(prefix: str, base_url: str, path_template: str) -> None:
    """Register an additional interwiki destination."""
    if not prefix.isalpha() or not prefix.islower():
        raise ValueError(f"Interwiki prefix must be lowercase letters, got {prefix!r}")
    INTERWIKI[prefix] = InterwikiSite(base_url, path_template)


__all__ = [
    "INTERWIKI",
    "InterwikiSite",
    "LinkTarget",
    "LinkType",
    "generate_interwiki_url",
    "normalize_internal_link",
    "register_interwiki",
    "validate_link_target",
]
