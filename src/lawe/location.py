"""Source positions attached to tokens, nodes and errors.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a token or node starts in the wiki source.

    Lines and columns count from 1; offsets count characters from 0.

    Attributes:
        lineno: Line of the first character
        col_offset: Column of the first character
        offset: Index of the first character in the source string
        end_offset: Index just past the construct
        source_file: Page path, when the caller supplied one

    Examples:
            >>> str(SourceLocation(lineno=3, col_offset=7))
            '3:7'

            >>> SourceLocation(1, 1, source_file="pages/start.txt").format()
            'pages/start.txt:1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        return self.format()

    def format(self) -> str:
        """``file:line:col``, or ``line:col`` without a source file."""
        position = f"{self.lineno}:{self.col_offset}"
        return f"{self.source_file}:{position}" if self.source_file else position
