"""AST visitor, immutable transform and plain-text extraction.

Example - collect headings:

    class HeadingCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.headings: list[Heading] = []

        def visit_heading(self, node: Heading) -> None:
            self.headings.append(node)

    collector = HeadingCollector()
    collector.visit(doc)

Example - demote every heading:

    def demote(node: Node) -> Node:
        if isinstance(node, Heading):
            return dataclasses.replace(node, level=min(node.level + 1, 6))
        return node

    new_doc = transform(doc, demote)

Thread Safety:
    Visitors may accumulate state; create one per thread. ``transform`` and
    ``extract_text`` are pure.

"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Iterable

from lawe.nodes import (
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

_SPACES = re.compile(r"\s+")


class BaseVisitor[T]:
    """Base AST visitor with match-based dispatch.

    Override ``visit_*`` for the node kinds you care about; the rest fall
    through to ``visit_default``. Children are walked after each visit.

    """

    def visit(self, node: Node) -> T:
        result = self._dispatch(node)
        self._walk_children(node)
        return result

    def visit_default(self, node: Node) -> T:
        """Catch-all; returns None."""
        return None  # type: ignore[return-value]

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_paragraph(self, node: Paragraph) -> T:
        return self.visit_default(node)

    def visit_heading(self, node: Heading) -> T:
        return self.visit_default(node)

    def visit_rule(self, node: Rule) -> T:
        return self.visit_default(node)

    def visit_callout(self, node: Callout) -> T:
        return self.visit_default(node)

    def visit_table(self, node: Table) -> T:
        return self.visit_default(node)

    def visit_image(self, node: Image) -> T:
        return self.visit_default(node)

    def visit_info_table_affili(self, node: InfoTableAffili) -> T:
        return self.visit_default(node)

    def visit_triple_parentheses(self, node: TripleParentheses) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def visit_footnote(self, node: Footnote) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: Node) -> T:
        match node:
            case Document():
                return self.visit_document(node)
            case Paragraph():
                return self.visit_paragraph(node)
            case Heading():
                return self.visit_heading(node)
            case Rule():
                return self.visit_rule(node)
            case Callout():
                return self.visit_callout(node)
            case Table():
                return self.visit_table(node)
            case Image():
                return self.visit_image(node)
            case InfoTableAffili():
                return self.visit_info_table_affili(node)
            case TripleParentheses():
                return self.visit_triple_parentheses(node)
            case Text():
                return self.visit_text(node)
            case Link():
                return self.visit_link(node)
            case Footnote():
                return self.visit_footnote(node)
            case _:
                return self.visit_default(node)

    def _walk_children(self, node: Node) -> None:
        for child in child_nodes(node):
            self.visit(child)


def child_nodes(node: Node) -> tuple[Node, ...]:
    """Direct children of ``node`` (empty for leaves)."""
    match node:
        case (
            Document(children=children)
            | Paragraph(children=children)
            | Heading(children=children)
            | Callout(children=children)
            | Bold(children=children)
            | Italic(children=children)
            | Underline(children=children)
            | Subscript(children=children)
            | Superscript(children=children)
            | Link(children=children)
            | Footnote(children=children)
            | Table(children=children)
            | TableHead(children=children)
            | TableBody(children=children)
            | TableFoot(children=children)
            | TableRow(children=children)
            | TableCell(children=children)
            | TableHeaderCell(children=children)
        ):
            return tuple(children)
        case _:
            return ()


def transform(doc: Document, fn: Callable[[Node], Node | None]) -> Document:
    """Apply ``fn`` bottom-up to every node, returning a new tree.

    Return None from ``fn`` to drop a node. The root cannot be dropped.

    Raises:
        TypeError: If ``fn`` does not return a Document for the root
    """
    result = _transform_node(doc, fn)
    if not isinstance(result, Document):
        raise TypeError("transform fn must return a Document for the root")
    return result


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    children = child_nodes(node)
    if children:
        new_children = tuple(
            result for child in children if (result := _transform_node(child, fn)) is not None
        )
        if new_children != children:
            node = dataclasses.replace(node, children=new_children)  # type: ignore[call-arg]
    return fn(node)


def extract_text(nodes: Node | Iterable[Node], *, footnotes: bool = False) -> str:
    """Plain text of a node or node sequence.

    Line breaks become spaces. Footnote bodies are skipped unless
    ``footnotes`` is true.

    Example:
        >>> from lawe import parse, tokenise
        >>> extract_text(parse(tokenise("**Hello** //world//")))
        'Hello world'
    """
    parts: list[str] = []
    _collect_text(nodes, parts, footnotes)
    return _SPACES.sub(" ", "".join(parts)).strip()


def _collect_text(nodes: Node | Iterable[Node], parts: list[str], footnotes: bool) -> None:
    if isinstance(nodes, Node):
        nodes = (nodes,)
    for node in nodes:
        match node:
            case Text(content=content):
                parts.append(content)
            case LineBreak() | Newline():
                parts.append(" ")
            case Link(text=str() as text):
                parts.append(text)
            case Footnote() if not footnotes:
                pass
            case CitationNeeded() | TripleParentheses():
                pass
            case Image(alt=alt):
                parts.append(alt)
            case Document() | Table() | TableHead() | TableBody() | TableFoot() | TableRow():
                for child in child_nodes(node):
                    _collect_text(child, parts, footnotes)
                    parts.append(" ")
            case _:
                _collect_text(child_nodes(node), parts, footnotes)


__all__ = [
    "BaseVisitor",
    "child_nodes",
    "extract_text",
    "transform",
]
