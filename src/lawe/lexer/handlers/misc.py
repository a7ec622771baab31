"""Forced line breaks (``\\\\``) and horizontal rules (``----``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token


class MiscHandler:
    """Recognize line breaks and horizontal rules.

    A line break is two backslashes followed by a space, a newline or the
    end of input. A rule is exactly four dashes at the start of a line; a
    fifth dash disqualifies the whole run.
    """

    priority = 95

    def can_handle(self, ctx: LexerContext) -> bool:
        return self._is_linebreak(ctx) or self._is_horiz_rule(ctx)

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if self._is_linebreak(ctx):
            ctx.advance(2)
            tokens.append(ctx.create_token(TokenType.LINEBREAK, "\\\\"))
            return True

        if self._is_horiz_rule(ctx):
            ctx.advance(4)
            tokens.append(ctx.create_token(TokenType.HORIZ_RULE, "----"))
            return True

        return False

    @staticmethod
    def _is_linebreak(ctx: LexerContext) -> bool:
        return ctx.match_string("\\\\") and ctx.peek(2) in (" ", "\n", "")

    @staticmethod
    def _is_horiz_rule(ctx: LexerContext) -> bool:
        return ctx.at_line_start() and ctx.match_string("----") and ctx.peek(4) != "-"
