"""Token navigation utilities for the Lawe parser.

Provides the mixin for forward-only traversal of the token list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawe.errors import ParseError
from lawe.tokens import Token, TokenType

if TYPE_CHECKING:
    from collections.abc import Sequence


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    The cursor only moves forward. ``_current`` is never None while tokens
    remain because the lexer always ends the list with EOF.

    Required Host Attributes:
        - _tokens: Sequence[Token]
        - _pos: int
        - _source_file: str | None

    """

    _tokens: Sequence[Token]
    _pos: int
    _source_file: str | None

    @property
    def _current(self) -> Token:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return self._tokens[-1]

    def _at_end(self) -> bool:
        """Check if at EOF (or past the end of a list missing one)."""
        return self._pos >= len(self._tokens) or self._tokens[self._pos].type is TokenType.EOF

    def _advance(self) -> Token:
        """Consume the current token and return it."""
        token = self._current
        if self._pos < len(self._tokens):
            self._pos += 1
        return token

    def _peek(self, offset: int = 1) -> Token | None:
        """Peek at the token ``offset`` places ahead."""
        pos = self._pos + offset
        if pos < len(self._tokens):
            return self._tokens[pos]
        return None

    def _check(self, *kinds: TokenType) -> bool:
        return not self._at_end() and self._current.type in kinds

    def _match(self, *kinds: TokenType) -> bool:
        """Consume the current token if it is one of ``kinds``."""
        if self._check(*kinds):
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenType, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._error(message)

    def _skip(self, *kinds: TokenType) -> None:
        while self._match(*kinds):
            pass

    def _error(self, message: str, token: Token | None = None) -> ParseError:
        """Build a ParseError located at ``token`` (default: current)."""
        token = token or self._current
        return ParseError(
            message,
            lineno=token.lineno,
            col_offset=token.col,
            source_file=self._source_file,
        )
