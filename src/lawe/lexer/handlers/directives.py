"""Parenthesis constructs: ``(((notice|date)))``, ``((footnote))`` and ``((cn))``."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING

from lawe.lexer.handlers.base import find_last_unclosed, remove_last_unclosed
from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token

NOTICE_COMMANDS = frozenset(("unfinished", "contextwarn", "external"))

_DATE_PATTERN = re.compile(r"^[a-zA-Z0-9\-/\s:,.]+$")

CITATION_NEEDED_MARKUP = "((cn))"


def parse_notice(content: str) -> tuple[str, str] | None:
    """Split ``command|date`` and validate both halves.

    Example:
        >>> parse_notice(" unfinished | 2024-05-01 ")
        ('unfinished', '2024-05-01')
        >>> parse_notice("bogus|2024") is None
        True
    """
    parts = content.split("|")
    if len(parts) != 2:
        return None
    command, date = (part.strip() for part in parts)
    if command not in NOTICE_COMMANDS or not _DATE_PATTERN.match(date):
        return None
    return command, date


class TripleParenthesesHandler:
    """Page notices such as ``(((unfinished|2024-05-01)))``.

    Invalid content leaves the cursor untouched so the parentheses are
    retokenized by lower-priority handlers.
    """

    priority = 111

    def can_handle(self, ctx: LexerContext) -> bool:
        return ctx.match_string("(((")

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        start = ctx.position
        end = ctx.input.find(")))", start + 3)
        if end == -1:
            return False
        content = ctx.input[start + 3 : end]
        parsed = parse_notice(content)
        if parsed is None:
            return False

        command, date = parsed
        ctx.advance(end + 3 - start)
        tokens.append(
            ctx.create_token(
                TokenType.TRIPLE_PARENTHESES,
                ctx.input[start : ctx.position],
                attributes=MappingProxyType({"command": command, "date": date}),
            )
        )
        return True


class FootnoteHandler:
    """Footnote delimiters ``((`` / ``))`` and the ``((cn))`` marker.

    ``((`` next to a third parenthesis is left alone so that rejected
    notices fall back to text. ``))`` only closes an open footnote.
    """

    priority = 105

    def can_handle(self, ctx: LexerContext) -> bool:
        return ctx.match_string("((") or ctx.match_string("))")

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if ctx.match_string(CITATION_NEEDED_MARKUP):
            ctx.advance(len(CITATION_NEEDED_MARKUP))
            tokens.append(ctx.create_token(TokenType.CITATION_NEEDED, CITATION_NEEDED_MARKUP))
            return True

        if ctx.match_string("(("):
            if ctx.previous() == "(" or ctx.peek(2) == "(":
                return False
            ctx.advance(2)
            tokens.append(ctx.create_token(TokenType.FOOTNOTE_OPEN, "(("))
            stack.append(TokenType.FOOTNOTE_OPEN)
            return True

        if find_last_unclosed(stack, TokenType.FOOTNOTE_OPEN, TokenType.FOOTNOTE_CLOSE) == -1:
            return False
        ctx.advance(2)
        tokens.append(ctx.create_token(TokenType.FOOTNOTE_CLOSE, "))"))
        remove_last_unclosed(stack, TokenType.FOOTNOTE_OPEN, TokenType.FOOTNOTE_CLOSE)
        return True
