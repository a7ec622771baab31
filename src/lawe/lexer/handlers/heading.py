"""Heading delimiters: runs of ``=`` around a heading line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe.lexer.handlers.base import remove_last_unclosed
from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token


class HeadingHandler:
    """Open a heading with an ``=`` run at line start, close it with the next run.

    The run length is kept in the token value; the parser turns it into a
    level.
    """

    priority = 90

    def can_handle(self, ctx: LexerContext) -> bool:
        return ctx.peek() == "="

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if ctx.at_line_start():
            run = self._consume_run(ctx)
            tokens.append(ctx.create_token(TokenType.HEADING_OPEN, run))
            stack.append(TokenType.HEADING_OPEN)
            return True

        if TokenType.HEADING_OPEN in stack:
            run = self._consume_run(ctx)
            tokens.append(ctx.create_token(TokenType.HEADING_CLOSE, run))
            remove_last_unclosed(stack, TokenType.HEADING_OPEN, TokenType.HEADING_CLOSE)
            return True

        return False

    @staticmethod
    def _consume_run(ctx: LexerContext) -> str:
        start = ctx.position
        while ctx.peek() == "=":
            ctx.advance()
        return ctx.input[start : ctx.position]
