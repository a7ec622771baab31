"""HTML renderer using the StringBuilder pattern.

Maps each AST node to a fixed HTML fragment. Downstream styling and the
site's anchor scheme depend on the exact ids and classes emitted here
(``lawe-heading-{level}``, ``lawe-callout-{type}``, ``fn-{n}``/``fnref-{n}``).

Text nodes are the only place source text enters the output, and they are
always escaped. Attribute values are re-escaped idempotently on the way out.

Thread Safety:
Footnote numbering and collected headings live in a RenderContext. Rendering
a Document always starts a fresh context, so one HtmlRenderer can process
many documents in sequence without numbering leaking between them. Share an
instance across threads only if each thread renders whole Documents and does
not read ``headings`` afterwards; otherwise use one renderer per thread.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from lawe.config import LaweConfig, get_config
from lawe.errors import RenderError
from lawe.icons import get_markup
from lawe.nodes import (
    AnyNode,
    Bold,
    Callout,
    CitationNeeded,
    Document,
    Footnote,
    Heading,
    Image,
    InfoTableAffili,
    Italic,
    LineBreak,
    Link,
    Newline,
    Node,
    Paragraph,
    Rule,
    Subscript,
    Superscript,
    Table,
    TableBody,
    TableCell,
    TableFoot,
    TableHead,
    TableHeaderCell,
    TableRow,
    Text,
    TripleParentheses,
    Underline,
)
from lawe.renderers.infobox import render_affili_table
from lawe.sanitize import escape_attribute, html_escape
from lawe.stringbuilder import StringBuilder
from lawe.utils.logger import get_logger
from lawe.visitor import extract_text

logger = get_logger(__name__)

CALLOUT_TYPES = frozenset(("default", "info", "success", "warning", "danger"))

_SIMPLE_TAGS: dict[type[Node], str] = {
    Bold: "strong",
    Italic: "em",
    Underline: "u",
    Subscript: "sub",
    Superscript: "sup",
}

_SECTION_TAGS: dict[type[Node], str] = {
    TableHead: "thead",
    TableBody: "tbody",
    TableFoot: "tfoot",
    TableRow: "tr",
}

_NOTICE_OPEN = '<div id="lawe-alertnotif" class="alert alert-warning alertnotif" role="alert">'


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """Heading metadata collected while rendering."""

    level: int
    text: str
    id: str


@dataclass(slots=True)
class RenderContext:
    """Per-document mutable state.

    Attributes:
        footnotes: Rendered footnote bodies in encounter order
        headings: Headings seen so far
    """

    footnotes: list[str] = field(default_factory=list)
    headings: list[HeadingInfo] = field(default_factory=list)

    @property
    def footnote_count(self) -> int:
        return len(self.footnotes)


class HtmlRenderer:
    """Render a Lawe AST to HTML.

    Usage:
        >>> from lawe import parse, tokenise
        >>> HtmlRenderer().render(parse(tokenise("**Bold**")))
        '<p><strong>Bold</strong></p>'

    Rendering a Document resets footnote state, renders the children, then
    appends the Notes section when any footnotes were seen. Rendering any
    other node continues the current context, so fragments rendered one by
    one share numbering until ``reset_footnotes()`` is called.
    """

    __slots__ = ("_config", "_context")

    def __init__(self, config: LaweConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Configuration to use; the active context config when None
        """
        self._config = config
        self._context = RenderContext()

    @property
    def config(self) -> LaweConfig:
        return self._config if self._config is not None else get_config()

    @property
    def headings(self) -> list[HeadingInfo]:
        """Headings collected by the most recent render."""
        return list(self._context.headings)

    def reset_footnotes(self) -> None:
        """Start a fresh render context."""
        self._context = RenderContext()

    def render(self, node: AnyNode) -> str:
        """Render ``node`` to an HTML string.

        Raises:
            RenderError: For an unknown callout type or an unresolvable
                info-box subject
        """
        sb = StringBuilder()
        if isinstance(node, Document):
            self.reset_footnotes()
            self._render_children(node.children, sb)
            sb.append(self.footnote_definitions())
        else:
            self._render_node(node, sb)
        return sb.build()

    def footnote_definitions(self) -> str:
        """The Notes section for the footnotes collected so far, or ``""``."""
        footnotes = self._context.footnotes
        if not footnotes:
            return ""
        items = "".join(
            f'<li id="fn-{n}" class="mb-4"><div class="footnote-content">{n}. '
            f'<a href="#fnref-{n}" class="footnote-backref mr-2">⇈</a> {body}</div></li>'
            for n, body in enumerate(footnotes, start=1)
        )
        return (
            '<div id="lawe-heading-2-div" class="lawe-heading-div">'
            '<h2 id="notes" class="lawe-heading-2"><span class="lawe-heading">Notes</span></h2></div>'
            f'<div class="footnotes-section"><ol class="footnotes-list">{items}</ol></div>'
        )

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _render_children(self, children: Iterable[Node], sb: StringBuilder) -> None:
        for child in children:
            self._render_node(child, sb)

    def _render_inner(self, children: Iterable[Node]) -> str:
        sb = StringBuilder()
        self._render_children(children, sb)
        return sb.build()

    def _render_node(self, node: Node, sb: StringBuilder) -> None:
        match node:
            case Text(content=content):
                sb.append(html_escape(content))
            case Paragraph(children=children):
                sb.append("<p>")
                self._render_children(children, sb)
                sb.append("</p>")
            case Bold() | Italic() | Underline() | Subscript() | Superscript():
                tag = _SIMPLE_TAGS[type(node)]
                sb.append(f"<{tag}>")
                self._render_children(node.children, sb)
                sb.append(f"</{tag}>")
            case LineBreak():
                sb.append("<br />")
            case Newline():
                sb.append("\n")
            case Rule():
                sb.append('<div id="horiz_rule"><hr /></div>')
            case Heading():
                self._render_heading(node, sb)
            case Callout():
                self._render_callout(node, sb)
            case Table():
                self._render_table(node, sb)
            case TableHead() | TableBody() | TableFoot() | TableRow():
                self._render_section(node, sb)
            case TableCell():
                self._render_element("td", node.attributes, {}, node.children, sb)
            case TableHeaderCell():
                self._render_element(
                    "th", node.attributes, {"id": "lawe-table-header-cell"}, node.children, sb
                )
            case Image():
                self._render_image(node, sb)
            case Link():
                self._render_link(node, sb)
            case Footnote():
                self._render_footnote(node, sb)
            case CitationNeeded():
                sb.append(
                    '<sup class="citation-needed" title="Citation needed">'
                    "[<em>citation needed</em>]</sup>"
                )
            case TripleParentheses():
                sb.append(self._render_notice(node))
            case InfoTableAffili():
                self._render_affili(node, sb)
            case Document():
                self._render_children(node.children, sb)
            case _:
                logger.warning("Unknown node type %s, rendering nothing", type(node).__name__)

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_heading(self, heading: Heading, sb: StringBuilder) -> None:
        level = max(1, min(heading.level, 6))
        self._context.headings.append(
            HeadingInfo(level=level, text=extract_text(heading.children), id=heading.id)
        )
        sb.append(
            f'<div id="lawe-heading-{level}-div" class="lawe-heading-div">'
            f'<h{level} id="{escape_attribute(heading.id)}" class="lawe-heading-{level}">'
            '<span class="lawe-heading">'
        )
        self._render_children(heading.children, sb)
        sb.append(f"</span></h{level}></div>")

    def _render_callout(self, callout: Callout, sb: StringBuilder) -> None:
        kind = callout.callout_type or "default"
        if kind not in CALLOUT_TYPES:
            raise RenderError(f"Unknown callout type {kind!r} at {callout.location}")

        icon = get_markup(
            f"{kind}-calloutIcon",
            size=28 if kind == "info" else 24,
            class_name="mb-2",
        )
        sb.append(
            f'<div id="lawe-callout-{kind}" class="lawe-callout"><div id="lawe-callout-inner">'
            f'<div id="lawe-callout-icon"><span id="lawe-callout-icon-span-{kind}">{icon}</span></div>'
        )
        if callout.title:
            sb.append(
                f'<span id="lawe-callout-title-span"><h4>{escape_attribute(callout.title)}</h4></span>'
            )
        sb.append('<span id="lawe-callout-span-body">')
        self._render_children(callout.children, sb)
        sb.append("</span></div></div>")

    def _render_table(self, table: Table, sb: StringBuilder) -> None:
        self._render_element("table", table.attributes, {"id": "lawe-table"}, table.children, sb)

    def _render_section(self, section: TableHead | TableBody | TableFoot | TableRow, sb: StringBuilder) -> None:
        tag = _SECTION_TAGS[type(section)]
        self._render_element(tag, section.attributes, {}, section.children, sb)

    def _render_element(
        self,
        tag: str,
        attributes: Mapping[str, str],
        defaults: Mapping[str, str],
        children: Iterable[Node],
        sb: StringBuilder,
    ) -> None:
        attrs = render_attributes(attributes, defaults)
        sb.append(f"<{tag} {attrs}>" if attrs else f"<{tag}>")
        self._render_children(children, sb)
        sb.append(f"</{tag}>")

    def _render_image(self, image: Image, sb: StringBuilder) -> None:
        config = self.config
        path = image.src if image.src.startswith("/") else f"/{image.src}"
        src = config.image_base_url.rstrip("/") + path
        link = config.image_link_base_url.rstrip("/") + path
        alt = escape_attribute(image.alt)

        if config.image_optimizer is not None:
            img = config.image_optimizer(src, image)
        else:
            width = f' width="{escape_attribute(image.width)}"' if image.width else ""
            img = (
                f'<img src="{escape_attribute(src)}"{width} alt="{alt}" '
                f'loading="{escape_attribute(image.loading)}" />'
            )

        sb.append(
            f'<figure id="lawe-figure" class="lawe-figure-{image.align}">'
            f'<a id="lawe-figure-a" class="a-no-style" href="{escape_attribute(link)}">{img}</a>'
            f"<figcaption>{alt}</figcaption></figure>"
        )

    def _render_affili(self, node: InfoTableAffili, sb: StringBuilder) -> None:
        name = node.attributes.get("name", "")
        school = node.attributes.get("school", "")
        if not name or not school:
            raise RenderError(f"affili at {node.location} needs both name and school")
        sb.append(render_affili_table(name, school, self.config))

    def _render_notice(self, notice: TripleParentheses) -> str:
        date = html_escape(notice.date)
        match notice.command:
            case "external":
                icon = get_markup("globe2", class_name="mb-2", color="black")
                return (
                    f"{_NOTICE_OPEN}{icon}<p><strong>This article is for an external media.</strong> "
                    "The material being described in this article are not part of the main story "
                    "or game, and while most of them are considered canon, everything may not be. "
                    "This wiki only provides the lore side of all external media.<br>"
                    f'<span class="alertnotifsubtext"><em>({date}) &middot;</em></span></p></div>'
                )
            case "unfinished":
                icon = get_markup("document-text", class_name="mb-2")
                wiki_base = self.config.wiki_base.rstrip("/")
                return (
                    f"{_NOTICE_OPEN}{icon}<p>This article is <strong>unfinished</strong>. "
                    "Please wait patiently until the article is complete. You may help speed up "
                    "the completion process by providing extra details or completing missing "
                    'sections.<br><span class="alertnotifsubtext"><em>'
                    f'({date}) &middot; <a href="{wiki_base}/alert_notifications">'
                    "How do you know whether an article is finished?</a> &middot; "
                    '<a href="#">Learn how and when to remove this message</a></em></span></p></div>'
                )
            case "contextwarn":
                icon = get_markup("warning-calloutIcon", class_name="mb-2")
                return (
                    f"{_NOTICE_OPEN}{icon}<p>This article <strong>needs more context</strong>. "
                    "Parts of it may be hard to follow without background from the main story. "
                    "You may help by describing the surrounding events or linking related articles."
                    f'<br><span class="alertnotifsubtext"><em>({date}) &middot;</em></span></p></div>'
                )
            case _:
                logger.warning("Unknown notice command %r at %s", notice.command, notice.location)
                return ""

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_footnote(self, footnote: Footnote, sb: StringBuilder) -> None:
        # Number is claimed before the body renders so nested footnotes follow it
        context = self._context
        context.footnotes.append("")
        n = context.footnote_count
        context.footnotes[n - 1] = self._render_inner(footnote.children)
        sb.append(
            f'<sup id="fn_anchor-{n}" class="footnote">'
            f'<a href="#fn-{n}" id="fnref-{n}" class="footnote-link">[{n}]</a></sup>'
        )

    def _render_link(self, link: Link, sb: StringBuilder) -> None:
        if link.is_interwiki:
            href = link.href
            css_class = "external interwiki"
            label = link.interwiki_id or link.href
        elif link.link_type == "external":
            href = link.href
            css_class = "external"
            label = link.href
        elif link.link_type == "anchor":
            href = f"#{link.anchor or link.href.lstrip('#')}"
            css_class = "anchor"
            label = (link.anchor or "").replace("_", " ")
        else:
            path = link.href[1:] if link.href.startswith("/") else link.href
            href = f"{self.config.wiki_base.rstrip('/')}/{path}"
            css_class = "internal"
            label = (link.page or link.anchor or path).replace("_", " ")

        if link.children:
            body = self._render_inner(link.children)
            title = extract_text(link.children) or label
        else:
            title = link.text or label
            body = html_escape(title)

        sb.append(
            f'<a href="{escape_attribute(href)}" title="{escape_attribute(title)}" '
            f'id="lawe-link" class="{css_class}">{body}</a>'
        )


def render_attributes(
    attributes: Mapping[str, str] | None,
    defaults: Mapping[str, str] | None = None,
) -> str:
    """Merge node attributes over defaults and format them.

    A ``class`` present in both is appended to the default rather than
    replacing it. Attributes whose value is blank are omitted.

    Example:
        >>> render_attributes({"class": "wide", "width": ""}, {"id": "t", "class": "base"})
        'id="t" class="base wide"'
    """
    merged = dict(defaults or {})
    for key, value in (attributes or {}).items():
        if key == "class" and merged.get("class"):
            merged["class"] = f"{merged['class']} {value}"
        else:
            merged[key] = value
    return " ".join(
        f'{key}="{escape_attribute(value.strip())}"'
        for key, value in merged.items()
        if value.strip()
    )


__all__ = [
    "CALLOUT_TYPES",
    "HeadingInfo",
    "HtmlRenderer",
    "RenderContext",
    "render_attributes",
]
