"""Read cursor over the raw wiki source.

LexerContext owns the only mutable lexing state besides the open-tag
stack: an integer ``position`` into an immutable string. Handlers save
``position``, advance speculatively, and assign the saved value back when
their construct does not match.

Line and column are derived from ``position`` through a precomputed table
of line start offsets, so restoring ``position`` also restores them.

Thread Safety:
LexerContext instances are single-use. Create one per source string.

"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Mapping

from lawe.location import SourceLocation
from lawe.tokens import Token, TokenType


class LexerContext:
    """Cursor with lookahead, consumption and token construction.

    Usage:
            >>> ctx = LexerContext("ab\\ncd")
            >>> ctx.advance(3)
            'a'
            >>> (ctx.line, ctx.col)
            (2, 1)
            >>> ctx.peek(1)
            'd'

    """

    __slots__ = ("input", "position", "source_file", "_length", "_line_starts")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        self.input = source
        self.position = 0
        self.source_file = source_file
        self._length = len(source)
        self._line_starts = [0]
        index = source.find("\n")
        while index != -1:
            self._line_starts.append(index + 1)
            index = source.find("\n", index + 1)

    @property
    def line(self) -> int:
        """Current line (1-indexed)."""
        return bisect_right(self._line_starts, self.position)

    @property
    def col(self) -> int:
        """Current column (1-indexed)."""
        return self.position - self._line_starts[self.line - 1] + 1

    def peek(self, lookahead: int = 0) -> str:
        """Return the character ``lookahead`` places ahead, or ``""`` past the end."""
        index = self.position + lookahead
        if index >= self._length:
            return ""
        return self.input[index]

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters and return the first one consumed."""
        first = self.peek()
        self.position = min(self.position + count, self._length)
        return first

    def is_eof(self) -> bool:
        return self.position >= self._length

    def match_string(self, s: str) -> bool:
        """Check whether the input continues with ``s`` at the cursor."""
        return self.input.startswith(s, self.position)

    def at_line_start(self) -> bool:
        return self.position == 0 or self.input[self.position - 1] == "\n"

    def previous(self) -> str:
        """Character just before the cursor, or ``""`` at the start."""
        if self.position == 0:
            return ""
        return self.input[self.position - 1]

    def location_at(self, offset: int) -> SourceLocation:
        """Build a SourceLocation for an absolute offset."""
        offset = max(0, min(offset, self._length))
        line = bisect_right(self._line_starts, offset)
        return SourceLocation(
            lineno=line,
            col_offset=offset - self._line_starts[line - 1] + 1,
            offset=offset,
            end_offset=self.position,
            source_file=self.source_file,
        )

    def create_token(
        self,
        kind: TokenType,
        value: str,
        *,
        attributes: Mapping[str, str] | None = None,
        callout_type: str | None = None,
        callout_title: str | None = None,
    ) -> Token:
        """Create a token for ``value``, which the cursor has just consumed.

        The start position is back-computed as ``position - len(value)``.
        """
        return Token(
            type=kind,
            value=value,
            location=self.location_at(self.position - len(value)),
            attributes=attributes,
            callout_type=callout_type,
            callout_title=callout_title,
        )
