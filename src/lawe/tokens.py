"""Token and TokenType definitions for the Lawe lexer.

The lexer produces a flat stream of Token objects terminated by EOF.
Each Token has a type, the raw source value and a source location.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

from lawe.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the lexer.

    Organized by category:
    - Text and structure (TEXT, NEWLINE, WHITESPACE, EOF)
    - Formatting pairs (bold, italic, underline)
    - Block constructs (headings, rules, callouts, tables)
    - Inline containers (links, images, footnotes, sub/sup)
    - Directives (triple parentheses, affili info-box)

    """

    # Text and structure
    TEXT = auto()
    NEWLINE = auto()
    WHITESPACE = auto()
    EOF = auto()

    # Formatting
    BOLD_OPEN = auto()  # **
    BOLD_CLOSE = auto()
    ITALIC_OPEN = auto()  # //
    ITALIC_CLOSE = auto()
    UNDERLINE_OPEN = auto()  # __
    UNDERLINE_CLOSE = auto()

    # Headings and rules
    HEADING_OPEN = auto()  # ====== at start of line
    HEADING_CLOSE = auto()
    HORIZ_RULE = auto()  # ----
    LINEBREAK = auto()  # \\

    # Pseudo-HTML containers
    CALLOUT_OPEN = auto()  # <callout type="info" title="...">
    CALLOUT_CLOSE = auto()
    SUB_OPEN = auto()
    SUB_CLOSE = auto()
    SUP_OPEN = auto()
    SUP_CLOSE = auto()
    TABLE_OPEN = auto()
    TABLE_CLOSE = auto()
    THEAD_OPEN = auto()
    THEAD_CLOSE = auto()
    TBODY_OPEN = auto()
    TBODY_CLOSE = auto()
    TFOOT_OPEN = auto()
    TFOOT_CLOSE = auto()
    TR_OPEN = auto()
    TR_CLOSE = auto()
    TD_OPEN = auto()
    TD_CLOSE = auto()
    TH_OPEN = auto()
    TH_CLOSE = auto()

    # Images and links
    IMAGE_OPEN = auto()  # {{
    IMAGE_PIPE = auto()
    IMAGE_CLOSE = auto()  # }}
    LINK_OPEN = auto()  # [[
    LINK_PIPE = auto()
    LINK_CLOSE = auto()  # ]]

    # Footnotes
    FOOTNOTE_OPEN = auto()  # ((
    FOOTNOTE_CLOSE = auto()  # ))
    CITATION_NEEDED = auto()  # ((cn))

    # Directives
    TRIPLE_PARENTHESES = auto()  # (((unfinished|2024-01-01)))
    AFFILI = auto()  # <affili name="..." />


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        type: The token type
        value: The raw source text of the token
        location: Where the token starts in the source
        attributes: Sanitized attributes for pseudo-HTML and directive tokens
        callout_type: Callout variant carried by CALLOUT_OPEN
        callout_title: Optional callout title carried by CALLOUT_OPEN

    """

    type: TokenType
    value: str
    location: SourceLocation
    attributes: Mapping[str, str] | None = field(default=None, hash=False)
    callout_type: str | None = None
    callout_title: str | None = None

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.lineno}:{self.col})"

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self.location.lineno

    @property
    def col(self) -> int:
        """Column (convenience accessor)."""
        return self.location.col_offset

    def attr(self, name: str, default: str = "") -> str:
        """Look up a sanitized attribute value."""
        if self.attributes is None:
            return default
        return self.attributes.get(name, default)
