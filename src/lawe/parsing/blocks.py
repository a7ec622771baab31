"""Block-level parsing for the Lawe parser.

Dispatch is on the first token of the block: headings, rules, callouts,
tables, info-boxes, images and standalone notices have dedicated parsers,
and everything else is a paragraph of inline content ending at a newline.
"""

from __future__ import annotations

import re

from lawe.nodes import (
    Block,
    Callout,
    Heading,
    Image,
    Inline,
    Paragraph,
    Rule,
    Text,
    TripleParentheses,
)
from lawe.parsing.inline import plain_text, trim_inline
from lawe.tokens import Token, TokenType

_IMAGE_WIDTH = re.compile(r"^width=(\d+)(px|%)?$|^(\d+)(px|%)?$")
_IMAGE_FORMAT = re.compile(r"\.(\w+)$")
_SLUG_STRIP = re.compile(r"[^a-z0-9 ]")
_SLUG_SPACES = re.compile(r" +")

MAX_HEADING_LEVEL = 6


def heading_level(run_length: int) -> int:
    """Map an ``=`` run to a heading level: six signs is 1, one sign is 6.

    Example:
        >>> [heading_level(n) for n in (6, 3, 1, 9)]
        [1, 4, 6, 1]
    """
    return max(1, min(7 - run_length, MAX_HEADING_LEVEL))


def slugify(text: str) -> str:
    """Anchor slug: lowercase, alphanumerics and spaces only, spaces to ``_``.

    Example:
        >>> slugify("  Hello, World! ")
        'hello_world'
    """
    slug = _SLUG_STRIP.sub("", text.strip().lower())
    return _SLUG_SPACES.sub("_", slug.strip())


def parse_image_width(query: str) -> str | None:
    """Width from an image query (``200``, ``50%``, ``width=120px``), or None."""
    match = _IMAGE_WIDTH.match(query)
    if match is None:
        return None
    if match.group(1):
        return match.group(1)
    return match.group(3) + (match.group(4) or "")


class BlockParsingMixin:
    """Mixin for block-level parsing.

    Required Host Attributes:
        - _generated_ids: set[str]

    Required Host Methods:
        - TokenNavigationMixin, InlineParsingMixin, TableParsingMixin and
          InfoBoxParsingMixin methods
    """

    _generated_ids: set[str]

    def _parse_block(self) -> Block | None:
        """Parse one block, or return None when only whitespace remained."""
        self._skip(TokenType.WHITESPACE)
        if self._at_end():
            return None

        match self._current.type:
            case TokenType.HEADING_OPEN:
                return self._parse_heading()
            case TokenType.HORIZ_RULE:
                return self._parse_rule()
            case TokenType.CALLOUT_OPEN:
                return self._parse_callout()
            case TokenType.TABLE_OPEN:
                return self._parse_table()
            case TokenType.AFFILI:
                return self._parse_info_table()
            case TokenType.IMAGE_OPEN:
                return self._parse_image()
            case TokenType.TRIPLE_PARENTHESES if self._notice_stands_alone():
                return self._parse_notice_block()
            case _:
                return self._parse_paragraph()

    def _consume_block_end(self) -> None:
        """Eat up to two newlines (the line end and one blank line)."""
        if self._match(TokenType.NEWLINE):
            self._match(TokenType.NEWLINE)

    def _parse_heading(self) -> Heading:
        open_token = self._advance()
        open_length = len(open_token.value)
        self._skip(TokenType.WHITESPACE)

        self._stops.append(TokenType.HEADING_CLOSE)
        try:
            children = self._parse_inline_until(TokenType.HEADING_CLOSE, TokenType.NEWLINE)
        finally:
            self._stops.pop()

        close_length = open_length
        if self._check(TokenType.HEADING_CLOSE):
            close_length = len(self._advance().value)

        if open_length > close_length:
            children.append(Text(open_token.location, "="))
        elif open_length < close_length:
            children.insert(0, Text(open_token.location, "="))

        children = trim_inline(children, newlines=False)
        heading_id = self._heading_id(children, open_token)
        self._consume_block_end()

        return Heading(
            open_token.location,
            level=heading_level(open_length),
            children=tuple(children),
            id=heading_id,
        )

    def _heading_id(self, children: list[Inline], open_token: Token) -> str:
        """Unique slug from plain-text heading content.

        Collisions within one document get ``_1``, ``_2``, ... suffixes.
        """
        text = plain_text(children)
        if text is None:
            raise self._error("Heading IDs can only be generated from plain text", open_token)

        base = slugify(text) or "section"
        unique = base
        counter = 1
        while unique in self._generated_ids:
            unique = f"{base}_{counter}"
            counter += 1
        self._generated_ids.add(unique)
        return unique

    def _parse_rule(self) -> Rule:
        token = self._advance()
        self._consume_block_end()
        return Rule(token.location)

    def _parse_callout(self) -> Callout:
        open_token = self._advance()
        self._skip(TokenType.WHITESPACE, TokenType.NEWLINE)

        children, closed = self._parse_enclosed(TokenType.CALLOUT_CLOSE)
        if not closed:
            raise self._error("Expected '</callout>' to close callout", open_token)
        self._consume_block_end()

        return Callout(
            open_token.location,
            callout_type=open_token.callout_type or "default",
            title=open_token.callout_title,
            children=tuple(trim_inline(children)),
        )

    def _parse_image(self) -> Image:
        """Parse ``{{path?width|caption}}``.

        Whitespace right after ``{{`` left-aligns the image; the width query
        is mandatory.
        """
        open_token = self._advance()
        align = "left" if self._check(TokenType.WHITESPACE) else "right"

        parts: list[str] = []
        while not self._at_end() and not self._check(TokenType.IMAGE_PIPE, TokenType.IMAGE_CLOSE):
            token = self._advance()
            if token.type is not TokenType.WHITESPACE:
                parts.append(token.value)
        path = "".join(parts).strip()

        if "?" not in path:
            raise self._error(f"Image {path!r} has no width (expected '?200' or '?width=200')", open_token)
        src, _, query = path.partition("?")
        width = parse_image_width(query)
        if width is None:
            raise self._error(f"Image {src!r} has an invalid width query {query!r}", open_token)

        format_match = _IMAGE_FORMAT.search(src)
        image_format = format_match.group(1).lower() if format_match else None

        alt = ""
        if self._match(TokenType.IMAGE_PIPE):
            caption: list[str] = []
            while not self._at_end() and not self._check(TokenType.IMAGE_CLOSE):
                token = self._advance()
                caption.append(" " if token.type is TokenType.WHITESPACE else token.value)
            alt = "".join(caption).strip()

        self._expect(TokenType.IMAGE_CLOSE, "Expected '}}' to close image")
        self._consume_block_end()

        return Image(
            open_token.location,
            src=src,
            width=width,
            alt=alt,
            format=image_format,
            align=align,
        )

    def _notice_stands_alone(self) -> bool:
        following = self._peek()
        return following is None or following.type in (TokenType.NEWLINE, TokenType.EOF)

    def _parse_notice_block(self) -> TripleParentheses:
        notice = self._parse_triple_parentheses()
        self._consume_block_end()
        return notice

    def _parse_paragraph(self) -> Paragraph:
        location = self._current.location
        children = self._parse_inline_until(TokenType.NEWLINE)
        self._consume_block_end()
        return Paragraph(location, tuple(trim_inline(children)))
