"""Bold, italic and underline markers: ``**``, ``//``, ``__``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe.lexer.handlers.base import find_last_unclosed
from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token

_PATTERNS: tuple[tuple[str, TokenType, TokenType], ...] = (
    ("**", TokenType.BOLD_OPEN, TokenType.BOLD_CLOSE),
    ("//", TokenType.ITALIC_OPEN, TokenType.ITALIC_CLOSE),
    ("__", TokenType.UNDERLINE_OPEN, TokenType.UNDERLINE_CLOSE),
)


class FormattingHandler:
    """Emit open or close tokens for paired formatting markers.

    A marker closes when an unclosed open of its kind exists anywhere on the
    stack, and opens otherwise. ``//`` right after ``:`` belongs to a URL
    scheme and is left to the text handler.
    """

    priority = 100

    def _match(self, ctx: LexerContext) -> tuple[str, TokenType, TokenType] | None:
        for pattern in _PATTERNS:
            if ctx.match_string(pattern[0]):
                return pattern
        return None

    def can_handle(self, ctx: LexerContext) -> bool:
        pattern = self._match(ctx)
        if pattern is None:
            return False
        return not (pattern[0] == "//" and ctx.previous() == ":")

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        pattern = self._match(ctx)
        if pattern is None:
            return False
        chars, open_kind, close_kind = pattern

        index = find_last_unclosed(stack, open_kind, close_kind)
        ctx.advance(len(chars))
        if index == -1:
            tokens.append(ctx.create_token(open_kind, chars))
            stack.append(open_kind)
        else:
            tokens.append(ctx.create_token(close_kind, chars))
            del stack[index]
        return True
