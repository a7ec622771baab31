"""Recursive descent parser producing the Lawe AST.

Consumes the token list from Lexer and builds immutable nodes.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Token list traversal
- `InlineParsingMixin`: Text, formatting spans, links, footnotes
- `BlockParsingMixin`: Headings, rules, callouts, images, paragraphs
- `TableParsingMixin`: The pseudo-HTML table family
- `InfoBoxParsingMixin`: ``<affili />`` info-boxes

Thread Safety:
Parser instances hold per-document state (cursor, heading IDs, errors)
and must not be shared between threads. The resulting AST is immutable.

"""

from __future__ import annotations

from collections.abc import Sequence

from lawe.errors import ParseError
from lawe.location import SourceLocation
from lawe.nodes import Block, Document, Paragraph
from lawe.parsing import (
    BlockParsingMixin,
    InfoBoxParsingMixin,
    InlineParsingMixin,
    TableParsingMixin,
    TokenNavigationMixin,
    balance_formatting,
)
from lawe.tokens import Token, TokenType
from lawe.utils.logger import get_logger

logger = get_logger(__name__)


class Parser(
    TokenNavigationMixin,
    InlineParsingMixin,
    BlockParsingMixin,
    TableParsingMixin,
    InfoBoxParsingMixin,
):
    """Recursive descent parser for Lawe wiki markup.

    Usage:
            >>> from lawe.lexer import Lexer
            >>> doc = Parser().parse(Lexer().tokenise("== Hello =="))
            >>> doc.children[0].level, doc.children[0].id
            (5, 'hello')

    Error recovery:
        A ParseError raised while parsing a block is logged, appended to
        ``errors``, and the cursor moves one token forward before block
        parsing resumes. With ``strict=True`` the error propagates instead.

    Thread Safety:
        Not thread-safe. Reusable across documents: every ``parse`` call
        resets the cursor, heading IDs and collected errors.

    """

    __slots__ = (
        "_tokens",
        "_pos",
        "_stops",
        "_source_file",
        "_generated_ids",
        "errors",
        "strict",
    )

    def __init__(self, *, strict: bool = False) -> None:
        """Initialize parser.

        Args:
            strict: Raise ParseError instead of recovering
        """
        self.strict = strict
        self.errors: list[ParseError] = []
        self._tokens: Sequence[Token] = ()
        self._pos = 0
        self._stops: list[TokenType] = []
        self._source_file: str | None = None
        self._generated_ids: set[str] = set()

    def parse(self, tokens: Sequence[Token], source_file: str | None = None) -> Document:
        """Parse a token list into a Document.

        Args:
            tokens: Lexer output (normally ending with EOF)
            source_file: Path used in error messages

        Returns:
            Document root node

        Raises:
            ParseError: Only when ``strict`` is set
        """
        self._tokens = balance_formatting(tokens)
        self._pos = 0
        self._stops = []
        self._source_file = source_file
        self._generated_ids.clear()
        self.errors = []

        location = self._tokens[0].location if self._tokens else SourceLocation(1, 1)
        children: list[Block] = []

        while not self._at_end():
            try:
                node = self._parse_block()
            except ParseError as e:
                if self.strict:
                    raise
                logger.error("Parse error: %s", e)
                self.errors.append(e)
                self._stops.clear()
                self._advance()
                continue

            if node is None or (isinstance(node, Paragraph) and not node.children):
                continue
            children.append(node)

        return Document(location, tuple(children))
