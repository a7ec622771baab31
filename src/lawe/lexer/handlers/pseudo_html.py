"""Pseudo-HTML tags: callouts, sub/sup, tables and the affili info-box.

Only tags in ``PAIRED_TAGS`` and ``VOID_TAGS`` are recognized; anything
else starting with ``<`` is left to the text handler. Attributes are
scanned permissively, then reduced to the per-tag allow-list in
``lawe.sanitize`` with every kept value escaped.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from lawe.lexer.handlers.base import remove_last_unclosed
from lawe.sanitize import filter_attributes
from lawe.tokens import TokenType

if TYPE_CHECKING:
    from lawe.lexer.context import LexerContext
    from lawe.tokens import Token

PAIRED_TAGS: dict[str, tuple[TokenType, TokenType]] = {
    "callout": (TokenType.CALLOUT_OPEN, TokenType.CALLOUT_CLOSE),
    "sub": (TokenType.SUB_OPEN, TokenType.SUB_CLOSE),
    "sup": (TokenType.SUP_OPEN, TokenType.SUP_CLOSE),
    "table": (TokenType.TABLE_OPEN, TokenType.TABLE_CLOSE),
    "thead": (TokenType.THEAD_OPEN, TokenType.THEAD_CLOSE),
    "tbody": (TokenType.TBODY_OPEN, TokenType.TBODY_CLOSE),
    "tfoot": (TokenType.TFOOT_OPEN, TokenType.TFOOT_CLOSE),
    "tr": (TokenType.TR_OPEN, TokenType.TR_CLOSE),
    "td": (TokenType.TD_OPEN, TokenType.TD_CLOSE),
    "th": (TokenType.TH_OPEN, TokenType.TH_CLOSE),
}

VOID_TAGS: dict[str, TokenType] = {
    "affili": TokenType.AFFILI,
}

DEFAULT_CALLOUT_TYPE = "default"


def _is_tag_char(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_space(char: str) -> bool:
    return char != "" and char.isspace()


def scan_attributes(ctx: LexerContext) -> dict[str, str]:
    """Scan ``name="value"`` pairs up to (not including) ``>`` or ``/>``.

    Values may be double-quoted, single-quoted or bare. A name without
    ``=`` gets an empty value. Scanning stops at the first character that
    cannot start an attribute name.
    """
    attributes: dict[str, str] = {}
    while not ctx.is_eof():
        while _is_space(ctx.peek()):
            ctx.advance()
        if ctx.peek() == ">" or ctx.match_string("/>"):
            break

        start = ctx.position
        while _is_tag_char(ctx.peek()) or ctx.peek() in ("-", "_"):
            ctx.advance()
        name = ctx.input[start : ctx.position]
        if not name:
            break

        while _is_space(ctx.peek()):
            ctx.advance()
        if ctx.peek() != "=":
            attributes[name] = ""
            continue
        ctx.advance()
        while _is_space(ctx.peek()):
            ctx.advance()

        quote = ctx.peek()
        if quote in ('"', "'"):
            ctx.advance()
            start = ctx.position
            while not ctx.is_eof() and ctx.peek() != quote:
                ctx.advance()
            value = ctx.input[start : ctx.position]
            if ctx.peek() == quote:
                ctx.advance()
        else:
            start = ctx.position
            while not ctx.is_eof() and not _is_space(ctx.peek()) and ctx.peek() != ">" and not ctx.match_string("/>"):
                ctx.advance()
            value = ctx.input[start : ctx.position]
        attributes[name] = value
    return attributes


class PseudoHTMLHandler:
    """Recognize the allow-listed pseudo-HTML tags.

    Opening tags push their kind on the stack; closing tags remove the last
    unclosed entry of the same kind. Callout open tokens carry
    ``callout_type`` (defaulting to ``"default"``) and ``callout_title``.
    """

    priority = 110

    def can_handle(self, ctx: LexerContext) -> bool:
        if ctx.peek() != "<":
            return False
        offset = 2 if ctx.peek(1) == "/" else 1
        name = self._peek_tag_name(ctx, offset)
        if offset == 2:
            return name in PAIRED_TAGS
        return name in PAIRED_TAGS or name in VOID_TAGS

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        if ctx.peek(1) == "/":
            return self._handle_closing(ctx, tokens, stack)
        return self._handle_opening(ctx, tokens, stack)

    @staticmethod
    def _peek_tag_name(ctx: LexerContext, offset: int) -> str:
        end = offset
        while _is_tag_char(ctx.peek(end)):
            end += 1
        following = ctx.peek(end)
        if following not in (">", "/", "") and not following.isspace():
            return ""
        return ctx.input[ctx.position + offset : ctx.position + end]

    def _handle_opening(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        start = ctx.position
        ctx.advance()
        name_start = ctx.position
        while _is_tag_char(ctx.peek()):
            ctx.advance()
        name = ctx.input[name_start : ctx.position]
        if name not in PAIRED_TAGS and name not in VOID_TAGS:
            ctx.position = start
            return False

        raw = scan_attributes(ctx)
        while not ctx.is_eof() and ctx.peek() != ">":
            ctx.advance()
        if ctx.is_eof():
            # Unterminated tag: leave it to the text handler
            ctx.position = start
            return False
        ctx.advance()

        full_tag = ctx.input[start : ctx.position]
        attributes = MappingProxyType(filter_attributes(name, raw))

        if name in VOID_TAGS:
            tokens.append(ctx.create_token(VOID_TAGS[name], full_tag, attributes=attributes))
            return True

        open_kind, _ = PAIRED_TAGS[name]
        if open_kind is TokenType.CALLOUT_OPEN:
            token = ctx.create_token(
                open_kind,
                full_tag,
                attributes=attributes,
                callout_type=attributes.get("type") or DEFAULT_CALLOUT_TYPE,
                callout_title=attributes.get("title") or None,
            )
        else:
            token = ctx.create_token(open_kind, full_tag, attributes=attributes)
        tokens.append(token)
        stack.append(open_kind)
        return True

    def _handle_closing(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        start = ctx.position
        ctx.advance(2)
        name_start = ctx.position
        while _is_tag_char(ctx.peek()):
            ctx.advance()
        name = ctx.input[name_start : ctx.position]
        if name not in PAIRED_TAGS:
            ctx.position = start
            return False

        while not ctx.is_eof() and ctx.peek() != ">":
            ctx.advance()
        if ctx.is_eof():
            ctx.position = start
            return False
        ctx.advance()

        open_kind, close_kind = PAIRED_TAGS[name]
        tokens.append(ctx.create_token(close_kind, ctx.input[start : ctx.position]))
        remove_last_unclosed(stack, open_kind, close_kind)
        return True
