"""Typed AST nodes for Lawe.

All AST nodes are frozen dataclasses with slots. The tree is a sum type:
``Inline`` and ``Block`` are unions of concrete node classes, and the
renderer dispatches on them with ``match``. No node carries behaviour.

Node kinds:
Block
├── Document
├── Paragraph
├── Heading
├── Rule
├── Callout
├── Table ── TableHead / TableBody / TableFoot ── TableRow ── TableCell / TableHeaderCell
├── Image
├── InfoTableAffili
└── TripleParentheses (also allowed inline)
Inline
├── Text
├── Bold / Italic / Underline / Subscript / Superscript
├── LineBreak / Newline
├── Link
├── Footnote
└── CitationNeeded

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from lawe.links import LinkType
from lawe.location import SourceLocation

type Attributes = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for diagnostics.
    """

    location: SourceLocation


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text. The renderer escapes it."""

    content: str


@dataclass(frozen=True, slots=True)
class Bold(Node):
    """Wiki: **text**  HTML: <strong>text</strong>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Italic(Node):
    """Wiki: //text//  HTML: <em>text</em>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Underline(Node):
    """Wiki: __text__  HTML: <u>text</u>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Subscript(Node):
    """Wiki: <sub>text</sub>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Superscript(Node):
    """Wiki: <sup>text</sup>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Forced line break (``\\\\``)."""


@dataclass(frozen=True, slots=True)
class Newline(Node):
    """Source newline inside inline content."""


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Wiki link.

    Wiki: [[target]] or [[target|text]]

    Attributes:
        link_type: external, internal or anchor
        href: Normalized internal path, full URL, or anchor text
        text: Display text when it is plain text only
        children: Display content when it contains markup
        namespace: Internal namespace (``a/b`` for ``a/b/c``)
        page: Internal page name
        anchor: Fragment without ``#``
        interwiki_dest: Interwiki prefix (``wp``)
        interwiki_id: Interwiki identifier
    """

    link_type: LinkType
    href: str
    text: str | None = None
    children: tuple[Inline, ...] = ()
    namespace: str | None = None
    page: str | None = None
    anchor: str | None = None
    interwiki_dest: str | None = None
    interwiki_id: str | None = None

    @property
    def is_interwiki(self) -> bool:
        return self.interwiki_dest is not None and self.interwiki_id is not None


@dataclass(frozen=True, slots=True)
class Footnote(Node):
    """Wiki: ((footnote text)). Rendered as a numbered reference."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class CitationNeeded(Node):
    """Wiki: ((cn))"""


@dataclass(frozen=True, slots=True)
class TripleParentheses(Node):
    """Page notice. Wiki: (((unfinished|2024-05-01)))

    Attributes:
        command: unfinished, contextwarn or external
        date: Free-form date text
    """

    command: Literal["unfinished", "contextwarn", "external"]
    date: str


type Inline = (
    Text
    | Bold
    | Italic
    | Underline
    | Subscript
    | Superscript
    | LineBreak
    | Newline
    | Link
    | Footnote
    | CitationNeeded
    | TripleParentheses
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """A line of inline content."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """Section heading.

    Wiki: ====== Title ====== (six signs is level 1, one sign is level 6)

    Attributes:
        level: 1-6
        children: Heading text
        id: Unique anchor slug within the document
    """

    level: int
    children: tuple[Inline, ...]
    id: str


@dataclass(frozen=True, slots=True)
class Rule(Node):
    """Horizontal rule. Wiki: ----"""


@dataclass(frozen=True, slots=True)
class Callout(Node):
    """Wiki: <callout type="info" title="Note">body</callout>"""

    callout_type: str
    title: str | None
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """<td> with its sanitized attributes."""

    children: tuple[Inline, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class TableHeaderCell(Node):
    """<th> with its sanitized attributes."""

    children: tuple[Inline, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    children: tuple[TableCell | TableHeaderCell, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class TableHead(Node):
    children: tuple[TableRow, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class TableBody(Node):
    children: tuple[TableRow, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class TableFoot(Node):
    children: tuple[TableRow, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


type TableSection = TableHead | TableBody | TableFoot | TableRow


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Pseudo-HTML table. Bare rows directly under <table> are allowed."""

    children: tuple[TableSection, ...]
    attributes: Attributes = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Block image with caption.

    Wiki: {{/path/img.png?200|caption}} (right-aligned)
          {{ /path/img.png?50%|caption}} (left-aligned)

    Attributes:
        src: Path without the width query
        width: Width including unit (``"200"``, ``"50%"``, ``"120px"``)
        alt: Caption text, also used as alt text
        format: Lowercase file extension, if any
        align: left or right
        loading: Always ``"lazy"``
    """

    src: str
    width: str
    alt: str = ""
    format: str | None = None
    align: Literal["left", "right"] = "right"
    loading: str = "lazy"


@dataclass(frozen=True, slots=True)
class InfoTableAffili(Node):
    """Affiliation info-box. Wiki: <affili name="hina" school="gehenna" />"""

    attributes: Attributes = field(default_factory=dict, hash=False)


type Block = (
    Paragraph
    | Heading
    | Rule
    | Callout
    | Table
    | Image
    | InfoTableAffili
    | TripleParentheses
)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root node. Owned by one parse call."""

    children: tuple[Block, ...]


type AnyNode = (
    Block
    | Inline
    | Document
    | TableSection
    | TableCell
    | TableHeaderCell
)


__all__ = [
    "AnyNode",
    "Attributes",
    "Block",
    "Bold",
    "Callout",
    "CitationNeeded",
    "Document",
    "Footnote",
    "Heading",
    "Image",
    "InfoTableAffili",
    "Inline",
    "Italic",
    "LineBreak",
    "Link",
    "Newline",
    "Node",
    "Paragraph",
    "Rule",
    "Subscript",
    "Superscript",
    "Table",
    "TableBody",
    "TableCell",
    "TableFoot",
    "TableHead",
    "TableHeaderCell",
    "TableRow",
    "TableSection",
    "Text",
    "TripleParentheses",
    "Underline",
]
