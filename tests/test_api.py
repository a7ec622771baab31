"""Tests for the top-level pipeline functions."""

import pytest

import lawe
from lawe import LaweConfig, config_context, convert, parse, render, tokenise
from lawe.errors import ParseError
from lawe.lexer import Lexer, LexerContext
from lawe.tokens import Token, TokenType


class TestPipeline:
    def test_convert(self) -> None:
        assert convert("**Bold**, //italic//, __underline__") == (
            "<p><strong>Bold</strong>, <em>italic</em>, <u>underline</u></p>"
        )

    def test_stages_compose(self) -> None:
        doc = parse(tokenise("====== Title ======"))
        assert doc.children[0].id == "title"
        assert render(doc).startswith('<div id="lawe-heading-1-div"')

    def test_tokenise_records_source_file(self) -> None:
        tokens = tokenise("a", source_file="pages/a.txt")
        assert tokens[0].location.source_file == "pages/a.txt"
        assert str(tokens[0].location) == "pages/a.txt:1:1"

    def test_tokenize_alias(self) -> None:
        assert Lexer().tokenize("a") == Lexer().tokenise("a")

    def test_strict_defaults_to_config(self) -> None:
        tokens = tokenise("== **x** ==")
        assert parse(tokens).children == ()
        with config_context(LaweConfig(strict=True)):
            with pytest.raises(ParseError):
                parse(tokens)
        assert parse(tokens, strict=False).children == ()

    def test_render_with_config(self) -> None:
        doc = parse(tokenise("[[start]]"))
        assert 'href="/docs/start"' in render(doc, config=LaweConfig(wiki_base="/docs/"))

    def test_version(self) -> None:
        assert lawe.__version__ == "0.4.0"

    def test_all_exports_resolve(self) -> None:
        for name in lawe.__all__:
            assert hasattr(lawe, name), name


class ShoutHandler:
    """Turns ``!`` into a TEXT token before any built-in handler sees it."""

    priority = 200

    def can_handle(self, ctx: LexerContext) -> bool:
        return ctx.peek() == "!"

    def handle(self, ctx: LexerContext, tokens: list[Token], stack: list[TokenType]) -> bool:
        ctx.advance()
        tokens.append(ctx.create_token(TokenType.TEXT, "!"))
        return True


class TestHandlerRegistration:
    def test_register_handler_sorts_by_priority(self) -> None:
        lexer = Lexer()
        handler = ShoutHandler()
        lexer.register_handler(handler)
        assert lexer.handlers[0] is handler

    def test_default_priority_order(self) -> None:
        assert [h.priority for h in Lexer().handlers] == [111, 110, 105, 100, 95, 90, 85, 80, 10, 1]

    def test_registered_handler_runs(self) -> None:
        lexer = Lexer()
        lexer.register_handler(ShoutHandler())
        assert [t.value for t in lexer.tokenise("!a")] == ["!", "a", ""]

    def test_equal_priority_keeps_registration_order(self) -> None:
        first, second = ShoutHandler(), ShoutHandler()
        lexer = Lexer(handlers=[first, second])
        assert lexer.handlers == (first, second)
