"""Property-based tests for lexer and pipeline invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

import html

from hypothesis import given, settings
from hypothesis import strategies as st

from lawe.lexer import Lexer
from lawe.location import SourceLocation
from lawe.nodes import Text
from lawe.parser import Parser
from lawe.parsing.inline import decide_markers
from lawe.renderers import HtmlRenderer
from lawe.tokens import TokenType

# Characters that start or end wiki constructs, plus filler
markup_text = st.text(alphabet="*/_=[]|{}()\\- \nab", max_size=200)

_MARKUP = {
    TokenType.BOLD_OPEN: "**",
    TokenType.ITALIC_OPEN: "//",
    TokenType.UNDERLINE_OPEN: "__",
}


class TestBasicInvariants:
    """Test basic invariants that should always hold."""

    @given(st.text(max_size=1000))
    @settings(max_examples=200)
    def test_always_ends_with_eof(self, source: str) -> None:
        """Every tokenization must end with exactly one EOF token."""
        tokens = Lexer().tokenise(source)

        assert tokens[-1].type == TokenType.EOF, "Last token must be EOF"
        eof_count = sum(1 for t in tokens if t.type == TokenType.EOF)
        assert eof_count == 1, "Must have exactly one EOF token"

    @given(st.text(max_size=500))
    @settings(max_examples=100)
    def test_position_never_below_one(self, source: str) -> None:
        for token in Lexer().tokenise(source):
            loc = token.location
            assert loc.lineno >= 1, f"Line number must be >= 1, got {loc.lineno}"
            assert loc.col_offset >= 1, f"Column must be >= 1, got {loc.col_offset}"
            assert loc.offset >= 0, f"Offset must be >= 0, got {loc.offset}"

    @given(st.text(max_size=500))
    @settings(max_examples=100)
    def test_tokenization_is_deterministic(self, source: str) -> None:
        assert Lexer().tokenise(source) == Lexer().tokenise(source)

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_token_values_reassemble_source(self, source: str) -> None:
        """No character is dropped or duplicated."""
        tokens = Lexer().tokenise(source)
        assert "".join(t.value for t in tokens) == source

    @given(markup_text)
    @settings(max_examples=200)
    def test_token_offsets_are_contiguous(self, source: str) -> None:
        tokens = Lexer().tokenise(source)
        expected = 0
        for token in tokens:
            assert token.location.offset == expected
            expected += len(token.value)


class TestPipelineInvariants:
    """Lexing, parsing and rendering never fail on markup-heavy input."""

    @given(markup_text)
    @settings(max_examples=300)
    def test_parse_and_render_never_raise(self, source: str) -> None:
        doc = Parser().parse(Lexer().tokenise(source))
        assert isinstance(HtmlRenderer().render(doc), str)

    @given(markup_text)
    @settings(max_examples=100)
    def test_parse_is_repeatable_on_one_parser(self, source: str) -> None:
        tokens = Lexer().tokenise(source)
        parser = Parser()
        assert parser.parse(tokens) == parser.parse(tokens)


class TestEscaping:
    @given(st.text(max_size=200))
    @settings(max_examples=200)
    def test_text_round_trips_through_escaping(self, content: str) -> None:
        rendered = HtmlRenderer().render(Text(SourceLocation(1, 1), content))
        assert "<" not in rendered
        assert html.unescape(rendered) == content


class TestMarkerBalance:
    """Formatting close markers never outnumber their opens."""

    @given(st.text(alphabet="*/_ ab\n", max_size=200))
    @settings(max_examples=200)
    def test_close_never_precedes_open(self, source: str) -> None:
        pairs = {
            TokenType.BOLD_OPEN: TokenType.BOLD_CLOSE,
            TokenType.ITALIC_OPEN: TokenType.ITALIC_CLOSE,
            TokenType.UNDERLINE_OPEN: TokenType.UNDERLINE_CLOSE,
        }
        depth = dict.fromkeys(pairs, 0)
        closes = {close: open_kind for open_kind, close in pairs.items()}
        for token in Lexer().tokenise(source):
            if token.type in pairs:
                depth[token.type] += 1
            elif token.type in closes:
                depth[closes[token.type]] -= 1
                assert depth[closes[token.type]] >= 0, source

    @given(st.lists(st.sampled_from(["**", "//", "__"]), max_size=6))
    def test_paired_runs_balance(self, markers: list[str]) -> None:
        source = "".join(f"{m}x" for m in markers) + "".join(f"y{m}" for m in reversed(markers))
        types = [t.type for t in Lexer().tokenise(source)]
        for open_kind, close_kind in (
            (TokenType.BOLD_OPEN, TokenType.BOLD_CLOSE),
            (TokenType.ITALIC_OPEN, TokenType.ITALIC_CLOSE),
            (TokenType.UNDERLINE_OPEN, TokenType.UNDERLINE_CLOSE),
        ):
            assert types.count(open_kind) == types.count(close_kind)

    @given(
        st.text(alphabet="*/_ ab", max_size=40),
        st.lists(st.sampled_from(["**", "//", "__"]), min_size=1, max_size=6),
    )
    @settings(max_examples=200)
    def test_stray_markers_do_not_leak_into_later_lines(
        self, stray: str, markers: list[str]
    ) -> None:
        balanced = "".join(f"{m}x" for m in markers) + "".join(f"y{m}" for m in reversed(markers))
        tokens = Lexer().tokenise(f"{stray}\n{balanced}")
        for stream in (tokens, decide_markers(tokens)):
            kinds = [t.type for t in stream]
            last_line = kinds[kinds.index(TokenType.NEWLINE) + 1 :]
            for open_kind, close_kind in (
                (TokenType.BOLD_OPEN, TokenType.BOLD_CLOSE),
                (TokenType.ITALIC_OPEN, TokenType.ITALIC_CLOSE),
                (TokenType.UNDERLINE_OPEN, TokenType.UNDERLINE_CLOSE),
            ):
                assert last_line.count(open_kind) == last_line.count(close_kind)
                assert last_line.count(open_kind) == markers.count(_MARKUP[open_kind])
