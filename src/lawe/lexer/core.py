"""Priority-dispatch lexer.

Thread Safety:
A Lexer holds only its handler list, and handlers are stateless, so one
instance may tokenise many documents. Each ``tokenise`` call creates its
own LexerContext and open-tag stack.

"""

from __future__ import annotations

from collections.abc import Iterable

from lawe.errors import LexerError
from lawe.lexer.context import LexerContext
from lawe.lexer.handlers import TokenHandler, default_handlers
from lawe.tokens import Token, TokenType
from lawe.utils.logger import get_logger

logger = get_logger(__name__)


class Lexer:
    """Turn wiki source into a flat token list terminated by EOF.

    Handlers are kept sorted by descending priority; ties keep registration
    order. At each position the first handler whose ``can_handle`` and
    ``handle`` both succeed wins, and the scan restarts at the new cursor.

    Usage:
            >>> tokens = Lexer().tokenise("**hi**")
            >>> [t.type.name for t in tokens]
            ['BOLD_OPEN', 'TEXT', 'BOLD_CLOSE', 'EOF']

    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Iterable[TokenHandler] | None = None) -> None:
        """Initialize with the built-in handlers, or an explicit set.

        Args:
            handlers: Replacement handler set (the text fallback is not
                added automatically)
        """
        self._handlers: list[TokenHandler] = list(
            default_handlers() if handlers is None else handlers
        )
        self._sort()

    @property
    def handlers(self) -> tuple[TokenHandler, ...]:
        """Handlers in dispatch order."""
        return tuple(self._handlers)

    def register_handler(self, handler: TokenHandler) -> None:
        """Add a handler and re-sort; equal priorities keep insertion order."""
        self._handlers.append(handler)
        self._sort()

    def _sort(self) -> None:
        # list.sort is stable, so equal priorities keep registration order
        self._handlers.sort(key=lambda h: h.priority, reverse=True)

    def tokenise(self, text: str, source_file: str | None = None) -> list[Token]:
        """Tokenise ``text``.

        Args:
            text: Wiki source
            source_file: Path recorded on token locations

        Returns:
            Token list ending with an EOF token

        Raises:
            LexerError: If no handler accepts the character at the cursor
        """
        ctx = LexerContext(text, source_file)
        tokens: list[Token] = []
        stack: list[TokenType] = []

        while not ctx.is_eof():
            for handler in self._handlers:
                if handler.can_handle(ctx) and handler.handle(ctx, tokens, stack):
                    break
            else:
                raise LexerError(
                    f"Unhandled character {ctx.peek()!r} at offset {ctx.position}",
                    lineno=ctx.line,
                    col_offset=ctx.col,
                )

        if stack:
            logger.debug("Unclosed constructs at end of input: %s", [k.name for k in stack])
        tokens.append(ctx.create_token(TokenType.EOF, ""))
        return tokens

    tokenize = tokenise
