"""Exception classes for Lawe.

Provides the exception hierarchy shared by the lexer, parser, renderer and
page processor.
"""

from __future__ import annotations

from typing import Literal

type Stage = Literal["lexing", "parsing", "rendering", "validation", "unknown"]


def _format_location(
    lineno: int | None,
    col_offset: int | None,
    source_file: str | None,
) -> str:
    location = ""
    if source_file:
        location = f"{source_file}:"
    if lineno is not None:
        location += f"{lineno}:"
        if col_offset is not None:
            location += f"{col_offset}:"
    if location:
        location = location.rstrip(":") + " "
    return location


class LaweError(Exception):
    """Base exception for all Lawe errors.

    Catch this to handle any failure raised by the pipeline.
    """


class LexerError(LaweError):
    """Raised when no token handler accepts the current character.

    The plain-text fallback handler accepts everything, so this only
    surfaces when a custom handler set omits it.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        super().__init__(f"{_format_location(lineno, col_offset, None)}{message}")


class ParseError(LaweError):
    """Error during wiki markup parsing.

    Raised when the parser meets a token it cannot place. The top-level
    parse loop catches it, records it and resumes one token later.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        super().__init__(
            f"{_format_location(lineno, col_offset, source_file)}{message}"
        )


class RenderError(LaweError):
    """Error during HTML rendering.

    Raised for internally inconsistent trees: an unknown callout type or an
    info-box name with no roster entry.
    """


class PageProcessingError(LaweError):
    """A single page failed somewhere in the lex/parse/render/validate chain.

    Attributes:
        stage: Pipeline stage that failed
        file_path: Source file of the page
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        stage: Stage,
        file_path: str,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.stage = stage
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"{file_path} [{stage}]: {message}")
