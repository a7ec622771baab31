"""Link and image delimiters.

``[[target|text]]`` and ``{{path?width|caption}}``. Close and pipe tokens
are only produced while the matching construct is open; otherwise the
characters fall through to plain text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe import links
from lawe.lexer.handlers.base import innermost, remove_last_unclosed
from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token


class _DelimitedHandler:
    """Shared open/pipe/close logic for two-character delimited constructs."""

    opener: str
    closer: str
    open_kind: TokenType
    pipe_kind: TokenType
    close_kind: TokenType

    def can_handle(self, ctx: LexerContext) -> bool:
        return ctx.match_string(self.opener) or ctx.match_string(self.closer) or ctx.peek() == "|"

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if ctx.match_string(self.opener):
            ctx.advance(2)
            tokens.append(ctx.create_token(self.open_kind, self.opener))
            stack.append(self.open_kind)
            return True

        if self.open_kind not in stack:
            return False

        if ctx.match_string(self.closer):
            ctx.advance(2)
            tokens.append(ctx.create_token(self.close_kind, self.closer))
            remove_last_unclosed(stack, self.open_kind, self.close_kind)
            return True

        # A pipe belongs to whichever of link/image was opened last
        if ctx.peek() == "|" and innermost(stack, TokenType.LINK_OPEN, TokenType.IMAGE_OPEN) is self.open_kind:
            ctx.advance()
            tokens.append(ctx.create_token(self.pipe_kind, "|"))
            return True

        return False


class LinkHandler(_DelimitedHandler):
    """Wiki link delimiters plus the link target utilities."""

    priority = 85
    opener = "[["
    closer = "]]"
    open_kind = TokenType.LINK_OPEN
    pipe_kind = TokenType.LINK_PIPE
    close_kind = TokenType.LINK_CLOSE

    validate_link_target = staticmethod(links.validate_link_target)
    normalize_internal_link = staticmethod(links.normalize_internal_link)
    generate_interwiki_url = staticmethod(links.generate_interwiki_url)


class ImageHandler(_DelimitedHandler):
    """Image delimiters."""

    priority = 80
    opener = "{{"
    closer = "}}"
    open_kind = TokenType.IMAGE_OPEN
    pipe_kind = TokenType.IMAGE_PIPE
    close_kind = TokenType.IMAGE_CLOSE
