"""Tests for single-page and batch processing."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from lawe.cache import DictPageCache
from lawe.config import LaweConfig
from lawe.errors import LexerError, PageProcessingError, ParseError, RenderError
from lawe.location import SourceLocation
from lawe.nodes import Document
from lawe.processor import (
    RawPage,
    TocItem,
    extract_title,
    load_pages,
    process_all_pages,
    process_page,
    truncate_words,
    validate_html,
)

HOME = "====== Home ======\nWelcome to the **wiki**.\n"


def make_page(content: str, slug: tuple[str, ...] = ("home",)) -> RawPage:
    return RawPage(
        slug=slug,
        file_path="/".join(slug) + ".txt",
        content=content,
        last_modified=datetime(2024, 5, 1, tzinfo=UTC),
        size=len(content.encode()),
    )


class TestProcessPage:
    def test_metadata(self) -> None:
        page = process_page(make_page(HOME))
        assert page.title == "Home"
        assert page.excerpt == "Welcome to the wiki."
        assert page.toc == (TocItem(level=1, title="Home", anchor="home"),)
        assert page.metadata.word_count == 5
        assert page.metadata.size == len(HOME)
        assert page.html.startswith('<div id="lawe-heading-1-div"')
        assert page.raw_content == HOME

    def test_toc_disabled(self) -> None:
        page = process_page(make_page(HOME), LaweConfig(generate_toc=False))
        assert page.toc is None

    def test_toc_lists_every_heading(self) -> None:
        page = process_page(make_page("====== A ======\n==== B ====\n== C =="))
        assert page.toc == (
            TocItem(1, "A", "a"),
            TocItem(3, "B", "b"),
            TocItem(5, "C", "c"),
        )

    def test_blank_lines_are_stripped_before_lexing(self) -> None:
        content = "====== T ======\n\n   \n\ntext"
        page = process_page(make_page(content))
        assert page.html.endswith("<p>text</p>")
        assert page.raw_content == content

    def test_title_falls_back_to_slug(self) -> None:
        config = LaweConfig(validate_output=False)
        page = process_page(make_page("just text", ("setting", "red_winter")), config)
        assert page.title == "Red Winter"

    def test_validation_failure(self) -> None:
        with pytest.raises(PageProcessingError) as exc_info:
            process_page(make_page("no heading here"))
        assert exc_info.value.stage == "validation"
        assert exc_info.value.file_path == "home.txt"

    def test_validation_can_be_disabled(self) -> None:
        page = process_page(make_page("no heading here"), LaweConfig(validate_output=False))
        assert page.html == "<p>no heading here</p>"

    def test_rendering_failure_keeps_cause(self) -> None:
        with pytest.raises(PageProcessingError) as exc_info:
            process_page(make_page('====== T ======\n<callout type="bogus">x</callout>'))
        error = exc_info.value
        assert error.stage == "rendering"
        assert isinstance(error.cause, RenderError)
        assert error.__cause__ is error.cause

    def test_strict_parsing_failure(self) -> None:
        with pytest.raises(PageProcessingError) as exc_info:
            process_page(make_page("====== **T** ======"), LaweConfig(strict=True))
        assert exc_info.value.stage == "parsing"
        assert isinstance(exc_info.value.cause, ParseError)

    def test_lexing_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class BrokenLexer:
            def tokenise(self, text: str, source_file: str | None = None) -> list:
                raise LexerError("boom", lineno=1, col_offset=1)

        monkeypatch.setattr("lawe.processor.Lexer", BrokenLexer)
        with pytest.raises(PageProcessingError) as exc_info:
            process_page(make_page(HOME))
        assert exc_info.value.stage == "lexing"
        assert "home.txt [lexing]" in str(exc_info.value)

    def test_slow_page_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="lawe"):
            process_page(make_page(HOME), LaweConfig(max_processing_time=0.0))
        assert "home.txt took" in caplog.text


class TestHelpers:
    def test_validate_html_accepts_heading(self) -> None:
        validate_html('<div id="x"><h1 id="t">T</h1></div>', "p.txt")

    def test_validate_html_rejects_empty(self) -> None:
        with pytest.raises(PageProcessingError, match="empty"):
            validate_html("   ", "p.txt")

    def test_validate_html_warns_on_imbalance(self, caplog: pytest.LogCaptureFixture) -> None:
        html = '<div id="x"><h1>T</h1></div>' + "<p>" * 10
        with caplog.at_level(logging.WARNING, logger="lawe"):
            validate_html(html, "p.txt")
        assert "structure issues in p.txt" in caplog.text

    def test_truncate_words(self) -> None:
        assert truncate_words("short", 200) == "short"
        assert truncate_words("alpha beta gamma", 12) == "alpha beta..."

    def test_long_excerpt_is_truncated(self) -> None:
        body = " ".join(["word"] * 100)
        page = process_page(make_page(f"====== T ======\n{body}"))
        assert len(page.excerpt) <= 203
        assert page.excerpt.endswith("word...")

    def test_untitled(self) -> None:
        assert extract_title(Document(SourceLocation(1, 1), ()), ()) == "Untitled"


class TestProcessAllPages:
    def test_failures_are_isolated(self) -> None:
        pages = [make_page(HOME, ("a",)), make_page("no heading", ("b",)), make_page(HOME, ("c",))]
        processed, stats = process_all_pages(pages, LaweConfig(max_workers=2))
        assert [p.slug for p in processed] == [("a",), ("c",)]
        assert stats.total_pages == 3
        assert stats.successful_pages == 2
        assert stats.failed_pages == 1
        (failure,) = stats.errors
        assert failure.slug == ("b",)
        assert failure.stage == "validation"
        assert failure.file_path == "b.txt"

    def test_empty_batch(self) -> None:
        processed, stats = process_all_pages([])
        assert processed == []
        assert stats.total_pages == 0
        assert stats.average_processing_time == 0.0

    def test_cache_hits(self) -> None:
        cache = DictPageCache()
        first, stats = process_all_pages([make_page(HOME)], cache=cache)
        assert stats.cache_hits == 0
        assert len(cache) == 1

        second, stats = process_all_pages([make_page(HOME)], cache=cache)
        assert stats.cache_hits == 1
        assert stats.average_processing_time == 0.0
        assert second[0].html == first[0].html

    def test_cache_hit_keeps_page_identity(self) -> None:
        cache = DictPageCache()
        process_all_pages([make_page(HOME, ("a",))], cache=cache)
        (page,), _ = process_all_pages([make_page(HOME, ("b",))], cache=cache)
        assert page.slug == ("b",)
        assert page.file_path == "b.txt"

    def test_cache_keyed_by_config(self) -> None:
        cache = DictPageCache()
        process_all_pages([make_page(HOME)], cache=cache)
        _, stats = process_all_pages([make_page(HOME)], LaweConfig(wiki_base="/w/"), cache=cache)
        assert stats.cache_hits == 0
        assert len(cache) == 2

    def test_optimizer_bypasses_cache(self) -> None:
        cache = DictPageCache()
        config = LaweConfig(image_optimizer=lambda src, image: "<img />")
        process_all_pages([make_page(HOME)], config, cache=cache)
        assert len(cache) == 0

    def test_failures_are_not_cached(self) -> None:
        cache = DictPageCache()
        process_all_pages([make_page("no heading")], cache=cache)
        assert len(cache) == 0


class TestLoadPages:
    def test_slugs_and_metadata(self, tmp_path: Path) -> None:
        (tmp_path / "setting").mkdir()
        (tmp_path / "setting" / "abydos.txt").write_text("====== Abydos ======\n", encoding="utf-8")
        (tmp_path / "start.txt").write_text("====== Start ======\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")

        pages = load_pages(tmp_path)
        assert [p.slug for p in pages] == [("setting", "abydos"), ("start",)]
        assert pages[1].content == "====== Start ======\n"
        assert pages[1].size == len("====== Start ======\n")
        assert pages[1].last_modified.tzinfo is UTC

    def test_loaded_pages_process(self, tmp_path: Path) -> None:
        (tmp_path / "start.txt").write_text(HOME, encoding="utf-8")
        processed, stats = process_all_pages(load_pages(tmp_path))
        assert stats.failed_pages == 0
        assert processed[0].title == "Home"
