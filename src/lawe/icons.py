"""Icon lookup for callouts and page notices.

Icons are raw ``<svg ...>`` strings keyed by name. The renderer asks for
``get_markup(name, size=..., class_name=..., color=...)``, which decorates
the root ``<svg`` tag with id, class, size and fill attributes. Unknown
names produce an empty string.

A resolver can be injected to serve icons from a site's own asset bank;
names it does not know fall back to the built-in set.

Usage:
    from lawe.icons import set_icon_resolver

    set_icon_resolver(lambda name: site_icons.get(name))

Thread Safety:
    set_icon_resolver() should be called once at application startup,
    before any concurrent rendering. Updates are guarded by a lock.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol

from lawe.sanitize import escape_attribute


class IconResolver(Protocol):
    """Resolve an icon name to raw SVG markup, or None if unknown."""

    def __call__(self, name: str) -> str | None: ...


_SVG_OPEN = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" stroke="currentColor" stroke-width="1.5">'

BUILTIN_ICONS: dict[str, str] = {
    "default-calloutIcon": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M7.5 8.25h9m-9 3H12m-9.75 1.51c0 1.6 1.12 2.99 2.7 3.23 1.09.16 2.19.28 3.3.37'
        'V21l4.18-4.18a1.15 1.15 0 0 1 .78-.33 48.3 48.3 0 0 0 5.83-.5c1.58-.23 2.7-1.62 2.7-3.23'
        'V6.74c0-1.6-1.12-2.99-2.7-3.23A48.4 48.4 0 0 0 12 3c-2.39 0-4.74.17-7.05.5'
        'C3.37 3.75 2.25 5.14 2.25 6.74v6.02Z"/></svg>'
    ),
    "info-calloutIcon": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="m11.25 11.25.04-.02a.75.75 0 0 1 1.06.85l-.7 2.84a.75.75 0 0 0 1.06.85l.04-.02'
        'M21 12a9 9 0 1 1-18 0 9 9 0 0 1 18 0Zm-9-3.75h.01v.01H12V8.25Z"/></svg>'
    ),
    "success-calloutIcon": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M9 12.75 11.25 15 15 9.75M21 12a9 9 0 1 1-18 0 9 9 0 0 1 18 0Z"/></svg>'
    ),
    "warning-calloutIcon": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M12 9v3.75m-9.3 3.38c-.87 1.5.22 3.37 1.95 3.37h14.7c1.73 0 2.81-1.87 1.95-3.37'
        'L13.95 3.38c-.87-1.5-3.03-1.5-3.9 0L2.7 16.13ZM12 15.75h.01v.01H12v-.01Z"/></svg>'
    ),
    "danger-calloutIcon": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M12 9v3.75m9-.75a9 9 0 1 1-18 0 9 9 0 0 1 18 0Zm-9 3.75h.01v.01H12v-.01Z"/></svg>'
    ),
    "globe2": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M12 21a9 9 0 1 0 0-18 9 9 0 0 0 0 18Zm0 0c2.5-2.5 3.75-5.5 3.75-9S14.5 5.5 12 3'
        'm0 18c-2.5-2.5-3.75-5.5-3.75-9S9.5 5.5 12 3M3.5 9h17M3.5 15h17"/></svg>'
    ),
    "document-text": (
        f'{_SVG_OPEN}<path stroke-linecap="round" stroke-linejoin="round" '
        'd="M19.5 14.25v-2.63a3.38 3.38 0 0 0-3.38-3.37h-1.5A1.13 1.13 0 0 1 13.5 7.13v-1.5'
        'a3.38 3.38 0 0 0-3.38-3.38H8.25m0 12.75h7.5m-7.5 3H12M10.5 2.25H5.63'
        'c-.62 0-1.13.5-1.13 1.13v17.25c0 .62.5 1.12 1.13 1.12h12.75c.62 0 1.12-.5 1.12-1.12V11.25'
        'a9 9 0 0 0-9-9Z"/></svg>'
    ),
}

_icon_resolver: Callable[[str], str | None] | None = None
_resolver_lock = threading.Lock()


def set_icon_resolver(resolver: Callable[[str], str | None] | None) -> None:
    """Set the global icon resolver. Pass None to use only the built-in set.

    Example:
        >>> set_icon_resolver(lambda name: "<svg ></svg>" if name == "x" else None)
        >>> get_icon("x")
        '<svg ></svg>'
        >>> set_icon_resolver(None)
    """
    global _icon_resolver
    with _resolver_lock:
        _icon_resolver = resolver


def get_icon(name: str) -> str | None:
    """Raw SVG for ``name`` from the resolver, then the built-in set."""
    resolver = _icon_resolver
    if resolver is not None:
        icon = resolver(name)
        if icon:
            return icon
    return BUILTIN_ICONS.get(name)


def get_markup(
    name: str,
    *,
    size: int = 24,
    class_name: str = "",
    color: str | None = None,
) -> str:
    """Decorated SVG markup for ``name``, or ``""`` when unknown.

    Args:
        name: Icon name, e.g. ``"info-calloutIcon"``
        size: Width and height in pixels
        class_name: CSS class for the svg element
        color: Fill color (``"none"`` when not given)

    Example:
        >>> get_markup("globe2", class_name="mb-2").startswith('<svg id="lawe-icon-svg" class="mb-2"')
        True
        >>> get_markup("no-such-icon")
        ''
    """
    raw = get_icon(name)
    if not raw:
        return ""
    decoration = (
        f'<svg id="lawe-icon-svg" class="{escape_attribute(class_name)}" '
        f'width="{size}" height="{size}" fill="{escape_attribute(color or "none")}" '
    )
    return raw.replace("<svg ", decoration, 1)


def has_icon_resolver() -> bool:
    """Check if a custom icon resolver is configured."""
    return _icon_resolver is not None
