"""Fallback handlers: whitespace runs, newlines and plain text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token

# Characters that may start another construct and so end a text run
SPECIAL_CHARS = frozenset("_*/[]=\n|-`\\<{}()")

# Opens that never survive a line end
LINE_SCOPED = frozenset(
    (
        TokenType.HEADING_OPEN,
        TokenType.BOLD_OPEN,
        TokenType.ITALIC_OPEN,
        TokenType.UNDERLINE_OPEN,
    )
)


def _is_space(char: str) -> bool:
    return char != "" and char.isspace()


class WhitespaceHandler:
    """One NEWLINE token per ``\\n``; one WHITESPACE token per other run.

    Headings and formatting spans are single-line, so a newline also drops
    any of them left unclosed on the stack.
    """

    priority = 10

    def can_handle(self, ctx: LexerContext) -> bool:
        return _is_space(ctx.peek())

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if ctx.peek() == "\n":
            ctx.advance()
            tokens.append(ctx.create_token(TokenType.NEWLINE, "\n"))
            stack[:] = [kind for kind in stack if kind not in LINE_SCOPED]
            return True

        start = ctx.position
        while _is_space(ctx.peek()) and ctx.peek() != "\n":
            ctx.advance()
        tokens.append(ctx.create_token(TokenType.WHITESPACE, ctx.input[start : ctx.position]))
        return True


class TextHandler:
    """Greedy run of ordinary characters, or a single special character.

    Always accepts, which guarantees the lexer makes progress.
    """

    priority = 1

    def can_handle(self, ctx: LexerContext) -> bool:
        return not ctx.is_eof()

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        start = ctx.position
        while not ctx.is_eof() and not _is_space(ctx.peek()) and ctx.peek() not in SPECIAL_CHARS:
            ctx.advance()
        if ctx.position == start:
            ctx.advance()
        tokens.append(ctx.create_token(TokenType.TEXT, ctx.input[start : ctx.position]))
        return True
