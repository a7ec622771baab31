"""Inline content parsing for the Lawe parser.

Inline content is a closed grammar: text, whitespace, line breaks,
formatting spans, links, footnotes, citation markers and notices. Images
are block-level, so one met mid-line is kept as its source text. Any other
token inside inline content raises ParseError, which the top-level parse
loop recovers from.

Unclosed links and footnotes degrade to literal text followed by their
parsed content. Formatting spans are repaired before parsing by
``balance_formatting``.
"""

from __future__ import annotations

from collections.abc import Sequence

from lawe.links import generate_interwiki_url, normalize_internal_link, validate_link_target
from lawe.nodes import (
    Bold,
    CitationNeeded,
    Footnote,
    Inline,
    Italic,
    LineBreak,
    Link,
    Newline,
    Subscript,
    Superscript,
    Text,
    TripleParentheses,
    Underline,
)
from lawe.tokens import Token, TokenType
from lawe.utils.logger import get_logger

logger = get_logger(__name__)

SPAN_PAIRS: dict[TokenType, TokenType] = {
    TokenType.BOLD_OPEN: TokenType.BOLD_CLOSE,
    TokenType.ITALIC_OPEN: TokenType.ITALIC_CLOSE,
    TokenType.UNDERLINE_OPEN: TokenType.UNDERLINE_CLOSE,
    TokenType.SUB_OPEN: TokenType.SUB_CLOSE,
    TokenType.SUP_OPEN: TokenType.SUP_CLOSE,
}

_SPAN_OPENERS: dict[TokenType, TokenType] = {close: open_ for open_, close in SPAN_PAIRS.items()}

_SPAN_NODES: dict[TokenType, type[Bold | Italic | Underline | Subscript | Superscript]] = {
    TokenType.BOLD_OPEN: Bold,
    TokenType.ITALIC_OPEN: Italic,
    TokenType.UNDERLINE_OPEN: Underline,
    TokenType.SUB_OPEN: Subscript,
    TokenType.SUP_OPEN: Superscript,
}

_SPAN_MARKUP: dict[TokenType, str] = {
    TokenType.BOLD_OPEN: "**",
    TokenType.BOLD_CLOSE: "**",
    TokenType.ITALIC_OPEN: "//",
    TokenType.ITALIC_CLOSE: "//",
    TokenType.UNDERLINE_OPEN: "__",
    TokenType.UNDERLINE_CLOSE: "__",
    TokenType.SUB_OPEN: "<sub>",
    TokenType.SUB_CLOSE: "</sub>",
    TokenType.SUP_OPEN: "<sup>",
    TokenType.SUP_CLOSE: "</sup>",
}


_TOGGLE_MARKERS: dict[TokenType, tuple[TokenType, TokenType]] = {
    kind: pair
    for pair in (
        (TokenType.BOLD_OPEN, TokenType.BOLD_CLOSE),
        (TokenType.ITALIC_OPEN, TokenType.ITALIC_CLOSE),
        (TokenType.UNDERLINE_OPEN, TokenType.UNDERLINE_CLOSE),
    )
    for kind in pair
}

# Regions read back as raw source: a link target and a whole image
_VERBATIM_ENDS: dict[TokenType, frozenset[TokenType]] = {
    TokenType.LINK_OPEN: frozenset((TokenType.LINK_PIPE, TokenType.LINK_CLOSE)),
    TokenType.IMAGE_OPEN: frozenset((TokenType.IMAGE_CLOSE,)),
}


def decide_markers(tokens: Sequence[Token]) -> list[Token]:
    """Re-decide open or close for ``**``, ``//`` and ``__`` line by line.

    A marker closes when the same kind is open earlier on its line and opens
    otherwise. Markers inside link targets and image sources are plain TEXT,
    so ``{{/my__pic.png?200}}`` leaves underlining on that line untouched.

    Example:
        >>> from lawe.lexer import Lexer
        >>> tokens = decide_markers(Lexer().tokenise("[[a__b]] __u__"))
        >>> [t.type.name for t in tokens if t.value == "__"]
        ['TEXT', 'UNDERLINE_OPEN', 'UNDERLINE_CLOSE']
    """
    decided: list[Token] = []
    open_kinds: set[TokenType] = set()
    verbatim_until: frozenset[TokenType] | None = None

    for token in tokens:
        kind = token.type
        if kind is TokenType.NEWLINE:
            open_kinds.clear()
            verbatim_until = None
        elif verbatim_until is not None:
            if kind in verbatim_until:
                verbatim_until = None
            elif kind in _TOGGLE_MARKERS:
                token = Token(TokenType.TEXT, token.value, token.location)
        elif kind in _VERBATIM_ENDS:
            verbatim_until = _VERBATIM_ENDS[kind]
        elif kind in _TOGGLE_MARKERS:
            open_kind, close_kind = _TOGGLE_MARKERS[kind]
            if open_kind in open_kinds:
                open_kinds.discard(open_kind)
                wanted = close_kind
            else:
                open_kinds.add(open_kind)
                wanted = open_kind
            if wanted is not kind:
                token = Token(wanted, token.value, token.location)
        decided.append(token)
    return decided


def _pair_spans(tokens: Sequence[Token]) -> set[int]:
    """Indices of span markers that have a partner on the same line."""
    matched: set[int] = set()
    open_indices: list[int] = []
    for index, token in enumerate(tokens):
        kind = token.type
        if kind is TokenType.NEWLINE:
            open_indices.clear()
        elif kind in SPAN_PAIRS:
            open_indices.append(index)
        elif kind in _SPAN_OPENERS:
            wanted = _SPAN_OPENERS[kind]
            for position in range(len(open_indices) - 1, -1, -1):
                if tokens[open_indices[position]].type is wanted:
                    matched.add(open_indices.pop(position))
                    matched.add(index)
                    break
    return matched


def balance_formatting(tokens: Sequence[Token]) -> list[Token]:
    """Rewrite span markers so that spans nest properly.

    Open and close are first re-decided per line by ``decide_markers``.
    Markers without a partner on the same line become TEXT. When a close
    marker ends a span that still has other spans open inside it, those
    inner spans are closed just before it and reopened just after it, so
    ``**a//b**c//`` parses as ``**a//b//**//c//``.

    Example:
        >>> from lawe.lexer import Lexer
        >>> tokens = balance_formatting(Lexer().tokenise("**a//b**c//"))
        >>> "".join(t.value for t in tokens)
        '**a//b//**//c//'
    """
    tokens = decide_markers(tokens)
    matched = _pair_spans(tokens)
    balanced: list[Token] = []
    open_spans: list[TokenType] = []

    for index, token in enumerate(tokens):
        kind = token.type
        if kind not in SPAN_PAIRS and kind not in _SPAN_OPENERS:
            balanced.append(token)
            continue

        if index not in matched:
            balanced.append(Token(TokenType.TEXT, token.value, token.location))
            continue

        if kind in SPAN_PAIRS:
            open_spans.append(kind)
            balanced.append(token)
            continue

        wanted = _SPAN_OPENERS[kind]
        depth = len(open_spans) - 1 - open_spans[::-1].index(wanted)
        interrupted = open_spans[depth + 1 :]
        for inner in reversed(interrupted):
            closer = SPAN_PAIRS[inner]
            balanced.append(Token(closer, _SPAN_MARKUP[closer], token.location))
        balanced.append(token)
        for inner in interrupted:
            balanced.append(Token(inner, _SPAN_MARKUP[inner], token.location))
        del open_spans[depth:]
        open_spans.extend(interrupted)

    return balanced


def trim_inline(children: list[Inline], *, newlines: bool = True) -> list[Inline]:
    """Drop whitespace-only Text (and optionally Newline) nodes at both ends."""

    def blank(node: Inline) -> bool:
        if isinstance(node, Text):
            return node.content.strip() == ""
        return newlines and isinstance(node, Newline)

    start, end = 0, len(children)
    while start < end and blank(children[start]):
        start += 1
    while end > start and blank(children[end - 1]):
        end -= 1
    return children[start:end]


def plain_text(children: Sequence[Inline]) -> str | None:
    """Concatenated content if every child is Text, else None."""
    if not all(isinstance(child, Text) for child in children):
        return None
    return "".join(child.content for child in children)  # type: ignore[union-attr]


class InlineParsingMixin:
    """Mixin for inline content parsing.

    Enclosing constructs register their close token in ``_stops`` while
    their content is parsed, so a nested construct interrupted by an outer
    close ends there instead of swallowing it.

    Required Host Attributes:
        - _stops: list[TokenType]

    Required Host Methods:
        - TokenNavigationMixin methods
    """

    _stops: list[TokenType]

    def _parse_inline_until(self, *terminators: TokenType) -> list[Inline]:
        """Parse inline nodes up to (not including) a terminator or enclosing close."""
        children: list[Inline] = []
        while not self._at_end():
            kind = self._current.type
            if kind in terminators or kind in self._stops:
                break
            children.extend(self._parse_inline())
        return children

    def _parse_enclosed(self, close_kind: TokenType) -> tuple[list[Inline], bool]:
        """Parse content up to ``close_kind`` and consume it.

        Returns:
            The children and whether the close token was found
        """
        self._stops.append(close_kind)
        try:
            children = self._parse_inline_until(close_kind)
        finally:
            self._stops.pop()
        return children, self._match(close_kind)

    def _parse_inline(self) -> list[Inline]:
        token = self._current
        location = token.location

        match token.type:
            case TokenType.TEXT:
                self._advance()
                return [Text(location, token.value)]
            case TokenType.WHITESPACE:
                self._advance()
                return [Text(location, " ")]
            case TokenType.LINEBREAK:
                self._advance()
                return [LineBreak(location)]
            case TokenType.NEWLINE:
                self._advance()
                return [Newline(location)]
            case TokenType.LINK_OPEN:
                return self._parse_link()
            case TokenType.FOOTNOTE_OPEN:
                return self._parse_footnote()
            case TokenType.CITATION_NEEDED:
                self._advance()
                return [CitationNeeded(location)]
            case TokenType.TRIPLE_PARENTHESES:
                return [self._parse_triple_parentheses()]
            case TokenType.IMAGE_OPEN | TokenType.IMAGE_PIPE | TokenType.IMAGE_CLOSE:
                return [self._parse_inline_image()]
            case kind if kind in SPAN_PAIRS:
                return self._parse_span()
            case _:
                raise self._error(f"Unexpected {token.type.name} in inline content")

    def _parse_span(self) -> list[Inline]:
        open_token = self._advance()
        children, closed = self._parse_enclosed(SPAN_PAIRS[open_token.type])
        if not closed:
            return [Text(open_token.location, open_token.value), *children]
        node_class = _SPAN_NODES[open_token.type]
        return [node_class(open_token.location, tuple(children))]

    def _parse_footnote(self) -> list[Inline]:
        open_token = self._advance()
        children, closed = self._parse_enclosed(TokenType.FOOTNOTE_CLOSE)
        if not closed:
            return [Text(open_token.location, open_token.value), *children]
        return [Footnote(open_token.location, tuple(trim_inline(children)))]

    def _parse_inline_image(self) -> Text:
        """Keep an image that is not at the start of a line as its source text."""
        open_token = self._advance()
        parts = [open_token.value]
        if open_token.type is TokenType.IMAGE_OPEN:
            while not self._at_end() and not self._check(TokenType.NEWLINE, *self._stops):
                token = self._advance()
                parts.append(token.value)
                if token.type is TokenType.IMAGE_CLOSE:
                    break
        return Text(open_token.location, "".join(parts))

    def _parse_triple_parentheses(self) -> TripleParentheses:
        token = self._advance()
        return TripleParentheses(
            token.location,
            command=token.attr("command"),  # type: ignore[arg-type]
            date=token.attr("date"),
        )

    def _parse_link(self) -> list[Inline]:
        """Parse ``[[target]]`` or ``[[target|text]]``.

        Invalid targets degrade to the literal bracket text with a warning.
        """
        open_token = self._advance()
        location = open_token.location

        parts: list[str] = []
        while not self._at_end() and not self._check(
            TokenType.LINK_PIPE, TokenType.LINK_CLOSE, TokenType.NEWLINE
        ):
            parts.append(self._advance().value)
        target = "".join(parts).strip()

        if not self._check(TokenType.LINK_PIPE, TokenType.LINK_CLOSE):
            return [Text(location, f"[[{target}")]

        children: list[Inline] = []
        has_text = self._match(TokenType.LINK_PIPE)
        if has_text:
            children, closed = self._parse_enclosed(TokenType.LINK_CLOSE)
            children = trim_inline(children)
        else:
            closed = self._match(TokenType.LINK_CLOSE)

        if not closed:
            return [Text(location, f"[[{target}|"), *children]

        text = plain_text(children) if has_text else None
        classified = validate_link_target(target)

        if not classified.is_valid:
            logger.warning("Invalid link target %r at %s: %s", target, location, classified.error)
            if not has_text:
                return [Text(location, f"[[{target}]]")]
            if text is not None:
                return [Text(location, f"[[{target}|{text}]]")]
            return [Text(location, f"[[{target}|"), *children, Text(location, "]]")]

        if classified.is_interwiki:
            dest, identifier = classified.interwiki_dest or "", classified.interwiki_id or ""
            href = generate_interwiki_url(dest, identifier) or target
        elif classified.type == "internal":
            href = normalize_internal_link(target)
        else:
            href = target

        return [
            Link(
                location,
                link_type=classified.type,
                href=href,
                text=text.strip() if text is not None else None,
                children=() if text is not None else tuple(children),
                namespace=classified.namespace,
                page=classified.page,
                anchor=classified.anchor,
                interwiki_dest=classified.interwiki_dest,
                interwiki_id=classified.interwiki_id,
            )
        ]

