"""TokenHandler protocol and open-tag stack helpers.

A handler is any object with a ``priority`` and the ``can_handle`` /
``handle`` pair. The lexer tries handlers in descending priority; the first
whose ``handle`` returns True wins the current position.

The open-tag stack is a plain ``list[TokenType]`` of unclosed paired
constructs shared by all handlers for one ``tokenise`` call. Kinds may
interleave (a link opened inside bold), so closing removes the last
*unclosed* entry of the right kind rather than the top of the stack.

Thread Safety:
Handlers must be stateless. All mutable state is in the LexerContext and
the stack passed to ``handle``.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token, TokenType


@runtime_checkable
class TokenHandler(Protocol):
    """Protocol for lexer handlers.

    Attributes:
        priority: Higher values are tried first
    """

    priority: int

    def can_handle(self, ctx: LexerContext) -> bool:
        """Cheap check whether the construct may start at the cursor."""
        ...

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        """Consume the construct and append its tokens.

        Returns False, with ``ctx.position`` unchanged, when the construct
        turns out not to match.
        """
        ...


def find_last_unclosed(stack: list[TokenType], open_kind: TokenType, close_kind: TokenType) -> int:
    """Index of the last open entry not cancelled by a later close, or -1.

    Scans backwards counting close entries so that same-kind pairs between
    the cursor and the candidate are skipped.
    """
    close_count = 0
    for index in range(len(stack) - 1, -1, -1):
        kind = stack[index]
        if kind is close_kind:
            close_count += 1
        elif kind is open_kind:
            if close_count == 0:
                return index
            close_count -= 1
    return -1


def remove_last_unclosed(stack: list[TokenType], open_kind: TokenType, close_kind: TokenType) -> bool:
    """Remove the entry found by ``find_last_unclosed``; False if none."""
    index = find_last_unclosed(stack, open_kind, close_kind)
    if index == -1:
        return False
    del stack[index]
    return True


def innermost(stack: list[TokenType], *kinds: TokenType) -> TokenType | None:
    """The most recently opened of ``kinds`` still on the stack."""
    for kind in reversed(stack):
        if kind in kinds:
            return kind
    return None
