"""
Lawe: wiki markup to HTML

Converts a DokuWiki-like markup (formatting, headings, callouts, pseudo-HTML
tables, images, interwiki links, footnotes, notices and affiliation
info-boxes) into sanitized HTML through three stages:
Lexer -> Parser -> HtmlRenderer.

Quick Start:
    >>> from lawe import convert
    >>> convert("**Bold**, //italic//, __underline__")
    '<p><strong>Bold</strong>, <em>italic</em>, <u>underline</u></p>'

    >>> # Or drive the stages yourself
    >>> from lawe import parse, render, tokenise
    >>> doc = parse(tokenise("====== Title ======"))
    >>> doc.children[0].id
    'title'

Batch Processing:
    from lawe.processor import load_pages, process_all_pages

    pages, stats = process_all_pages(load_pages("wiki/"))
"""

from collections.abc import Sequence

from lawe.cache import DictPageCache, PageCache
from lawe.config import (
    LaweConfig,
    config_context,
    get_config,
    reset_config,
    set_config,
)
from lawe.errors import LaweError, LexerError, PageProcessingError, ParseError, RenderError
from lawe.lexer import Lexer
from lawe.location import SourceLocation
from lawe.nodes import (
    Block,
    Bold,
    Callout,
    CitationNeeded,
    Document,
    Footnote,
    Heading,
    Image,
    InfoTableAffili,
    Inline,
    Italic,
    LineBreak,
    Link,
    Newline,
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
from lawe.parser import Parser
from lawe.renderers import HtmlRenderer
from lawe.tokens import Token, TokenType
from lawe.visitor import BaseVisitor, extract_text, transform

__version__ = "0.4.0"


def tokenise(text: str, *, source_file: str | None = None) -> list[Token]:
    """Tokenise wiki source into a token list ending with EOF.

    Raises:
        LexerError: If no handler accepts a character
    """
    return Lexer().tokenise(text, source_file=source_file)


def parse(
    tokens: Sequence[Token],
    *,
    source_file: str | None = None,
    strict: bool | None = None,
) -> Document:
    """Parse a token list into a Document.

    Args:
        tokens: Output of ``tokenise``
        source_file: Path used in error messages
        strict: Re-raise parse errors; defaults to the active config

    Example:
        >>> type(parse(tokenise("plain")).children[0]).__name__
        'Paragraph'
    """
    if strict is None:
        strict = get_config().strict
    return Parser(strict=strict).parse(tokens, source_file=source_file)


def render(doc: Document, *, config: LaweConfig | None = None) -> str:
    """Render a Document to HTML.

    Raises:
        RenderError: For an unknown callout type or info-box subject
    """
    return HtmlRenderer(config).render(doc)


def convert(text: str, *, source_file: str | None = None) -> str:
    """Tokenise, parse and render in one call."""
    return render(parse(tokenise(text, source_file=source_file), source_file=source_file))


__all__ = [
    "__version__",
    # Pipeline
    "convert",
    "parse",
    "render",
    "tokenise",
    "Lexer",
    "Parser",
    "HtmlRenderer",
    "Token",
    "TokenType",
    "SourceLocation",
    # Config
    "LaweConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
    # Errors
    "LaweError",
    "LexerError",
    "PageProcessingError",
    "ParseError",
    "RenderError",
    # Cache
    "DictPageCache",
    "PageCache",
    # Visitor
    "BaseVisitor",
    "extract_text",
    "transform",
    # Nodes
    "Block",
    "Inline",
    "Document",
    "Paragraph",
    "Heading",
    "Rule",
    "Callout",
    "Table",
    "TableHead",
    "TableBody",
    "TableFoot",
    "TableRow",
    "TableCell",
    "TableHeaderCell",
    "Image",
    "InfoTableAffili",
    "TripleParentheses",
    "Text",
    "Bold",
    "Italic",
    "Underline",
    "Subscript",
    "Superscript",
    "LineBreak",
    "Newline",
    "Link",
    "Footnote",
    "CitationNeeded",
]
