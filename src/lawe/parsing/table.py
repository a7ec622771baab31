"""Pseudo-HTML table parsing.

One method per nesting level: table, section (thead/tbody/tfoot), row,
cell. Each level consumes its own close tag and skips stray tokens
(whitespace, newlines, text between tags). Cells directly inside a
section are wrapped in an implicit row.
"""

from __future__ import annotations

from lawe.errors import ParseError
from lawe.nodes import (
    Table,
    TableBody,
    TableCell,
    TableFoot,
    TableHead,
    TableHeaderCell,
    TableRow,
    TableSection,
)
from lawe.parsing.inline import trim_inline
from lawe.tokens import Token, TokenType

_SECTIONS: dict[TokenType, tuple[TokenType, type[TableHead | TableBody | TableFoot], str]] = {
    TokenType.THEAD_OPEN: (TokenType.THEAD_CLOSE, TableHead, "</thead>"),
    TokenType.TBODY_OPEN: (TokenType.TBODY_CLOSE, TableBody, "</tbody>"),
    TokenType.TFOOT_OPEN: (TokenType.TFOOT_CLOSE, TableFoot, "</tfoot>"),
}

_CELL_OPENERS = (TokenType.TD_OPEN, TokenType.TH_OPEN)

_STRUCTURE_CLOSERS = (
    TokenType.TABLE_CLOSE,
    TokenType.THEAD_CLOSE,
    TokenType.TBODY_CLOSE,
    TokenType.TFOOT_CLOSE,
    TokenType.TR_CLOSE,
)


class TableParsingMixin:
    """Mixin for ``<table>`` blocks.

    Required Host Methods:
        - TokenNavigationMixin and InlineParsingMixin methods
    """

    def _parse_table(self) -> Table:
        open_token = self._advance()
        children: list[TableSection] = []

        while not self._at_end() and not self._check(TokenType.TABLE_CLOSE):
            kind = self._current.type
            if kind in _SECTIONS:
                children.append(self._parse_table_section())
            elif kind is TokenType.TR_OPEN:
                children.append(self._parse_table_row())
            elif kind in _CELL_OPENERS:
                children.append(self._parse_implicit_row())
            else:
                self._advance()

        self._expect_close(TokenType.TABLE_CLOSE, "</table>", open_token)
        self._consume_block_end()
        return Table(open_token.location, tuple(children), open_token.attributes or {})

    def _parse_table_section(self) -> TableHead | TableBody | TableFoot:
        open_token = self._advance()
        close_kind, node_class, close_markup = _SECTIONS[open_token.type]
        rows: list[TableRow] = []

        while not self._at_end() and not self._check(close_kind, TokenType.TABLE_CLOSE):
            kind = self._current.type
            if kind is TokenType.TR_OPEN:
                rows.append(self._parse_table_row())
            elif kind in _CELL_OPENERS:
                rows.append(self._parse_implicit_row())
            else:
                self._advance()

        self._expect_close(close_kind, close_markup, open_token)
        return node_class(open_token.location, tuple(rows), open_token.attributes or {})

    def _parse_table_row(self) -> TableRow:
        open_token = self._advance()
        cells: list[TableCell | TableHeaderCell] = []

        while not self._at_end() and not self._check(*_STRUCTURE_CLOSERS):
            if self._check(*_CELL_OPENERS):
                cells.append(self._parse_table_cell())
            else:
                self._advance()

        self._expect_close(TokenType.TR_CLOSE, "</tr>", open_token)
        return TableRow(open_token.location, tuple(cells), open_token.attributes or {})

    def _parse_implicit_row(self) -> TableRow:
        location = self._current.location
        cells: list[TableCell | TableHeaderCell] = []
        while not self._at_end() and not self._check(TokenType.TR_OPEN, *_STRUCTURE_CLOSERS):
            if self._check(*_CELL_OPENERS):
                cells.append(self._parse_table_cell())
            elif self._current.type in _SECTIONS:
                break
            else:
                self._advance()
        return TableRow(location, tuple(cells))

    def _parse_table_cell(self) -> TableCell | TableHeaderCell:
        open_token = self._advance()
        if open_token.type is TokenType.TH_OPEN:
            close_kind, node_class, close_markup = TokenType.TH_CLOSE, TableHeaderCell, "</th>"
        else:
            close_kind, node_class, close_markup = TokenType.TD_CLOSE, TableCell, "</td>"

        children, closed = self._parse_enclosed(close_kind)
        if not closed:
            raise self._unclosed(close_markup, open_token)
        return node_class(
            open_token.location,
            tuple(trim_inline(children)),
            open_token.attributes or {},
        )

    def _expect_close(self, kind: TokenType, markup: str, open_token: Token) -> None:
        if not self._match(kind):
            raise self._unclosed(markup, open_token)

    def _unclosed(self, markup: str, open_token: Token) -> ParseError:
        return self._error(
            f"Expected '{markup}' to close '{open_token.value.strip()}' from line {open_token.lineno}"
        )
