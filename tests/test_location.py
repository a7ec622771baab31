"""Tests for SourceLocation and Token helpers."""

from lawe.location import SourceLocation
from lawe.tokens import Token, TokenType


class TestSourceLocation:
    def test_format(self) -> None:
        assert str(SourceLocation(3, 7)) == "3:7"
        assert SourceLocation(1, 1, source_file="pages/start.txt").format() == "pages/start.txt:1:1"


class TestToken:
    def test_repr_truncates_long_values(self) -> None:
        token = Token(TokenType.TEXT, "x" * 30, SourceLocation(2, 4))
        assert repr(token) == f"Token(TEXT, {'x' * 17 + '...'!r}, 2:4)"

    def test_attr(self) -> None:
        token = Token(TokenType.TD_OPEN, "<td>", SourceLocation(1, 1), attributes={"class": "c"})
        assert token.attr("class") == "c"
        assert token.attr("align") == ""
        assert Token(TokenType.TEXT, "a", SourceLocation(1, 1)).attr("x", "d") == "d"
