"""List-backed string accumulator used by the HTML renderer.

Fragments are collected in a list and joined once, so building a page is
linear in its output size.

Thread Safety:
    Each render pass owns its builder.

"""

from __future__ import annotations


class StringBuilder:
    """Collect HTML fragments and join them at the end.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<p>").append("hi").append("</p>").build()
            '<p>hi</p>'

    """

    __slots__ = ("_fragments",)

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def append(self, fragment: str) -> StringBuilder:
        """Add ``fragment``; empty strings are skipped."""
        if fragment:
            self._fragments.append(fragment)
        return self

    def build(self) -> str:
        return "".join(self._fragments)
