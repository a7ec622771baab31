"""Batch page processing: lex, parse, render and validate wiki pages.

Each page runs through its own Lexer, Parser and HtmlRenderer, so pages can
be processed on a thread pool without sharing mutable state. A failure in
any stage is wrapped in PageProcessingError carrying the stage name; in a
batch it is recorded as a ProcessingFailure and the other pages continue.

Usage:
    from lawe.processor import load_pages, process_all_pages

    pages, stats = process_all_pages(load_pages("wiki/"))
    print(f"{stats.successful_pages}/{stats.total_pages} pages")

"""

from __future__ import annotations

import re
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from lawe.cache import PageCache, hash_config, hash_content
from lawe.config import LaweConfig, get_config
from lawe.errors import PageProcessingError, Stage
from lawe.lexer import Lexer
from lawe.nodes import Document, Heading, Paragraph
from lawe.parser import Parser
from lawe.renderers.html import HtmlRenderer
from lawe.utils.logger import get_logger
from lawe.visitor import BaseVisitor, extract_text

logger = get_logger(__name__)

EXCERPT_LENGTH = 200
MAX_TAG_IMBALANCE = 5

_BLANK_LINES = re.compile(r"^[ \t\r\f\v]*\n", re.MULTILINE)
_OPEN_TAG = re.compile(r"<[^/][^>]*>")
_CLOSE_TAG = re.compile(r"</[^>]*>")
_SELF_CLOSING_TAG = re.compile(r"<[^>]*/>")
_LEADING_H1 = re.compile(r"^<div[^>]*><h1[^>]*>", re.IGNORECASE)
_TRAILING_PARTIAL_WORD = re.compile(r"\s+\S*$")


@dataclass(frozen=True, slots=True)
class RawPage:
    """Wiki source as supplied by the content loader.

    Attributes:
        slug: Route segments, e.g. ``("setting", "academies", "abydos")``
        file_path: Source path, used in messages
        content: Wiki markup
        last_modified: Modification time of the source
        size: Source size in bytes
    """

    slug: tuple[str, ...]
    file_path: str
    content: str
    last_modified: datetime
    size: int


@dataclass(frozen=True, slots=True)
class TocItem:
    level: int
    title: str
    anchor: str


@dataclass(frozen=True, slots=True)
class PageMetadata:
    last_modified: datetime
    size: int
    processing_time: float
    word_count: int


@dataclass(frozen=True, slots=True)
class ProcessedPage:
    """A rendered page with the metadata the site needs to list it.

    Attributes:
        html: Rendered page body
        title: First level-1 heading, or the humanised slug
        excerpt: Opening paragraph text, at most 200 characters plus ``...``
        toc: Table of contents, or None when generation is disabled
    """

    slug: tuple[str, ...]
    file_path: str
    raw_content: str
    html: str
    title: str
    excerpt: str
    toc: tuple[TocItem, ...] | None
    metadata: PageMetadata


@dataclass(frozen=True, slots=True)
class ProcessingFailure:
    file_path: str
    slug: tuple[str, ...]
    error: PageProcessingError
    stage: Stage


@dataclass(frozen=True, slots=True)
class ProcessingStats:
    """Outcome of a batch run. Times are in seconds."""

    total_pages: int
    successful_pages: int
    failed_pages: int
    total_processing_time: float
    average_processing_time: float
    cache_hits: int = 0
    errors: tuple[ProcessingFailure, ...] = ()


class _HeadingCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.headings: list[Heading] = []

    def visit_heading(self, node: Heading) -> None:
        self.headings.append(node)


def collect_headings(doc: Document) -> list[Heading]:
    collector = _HeadingCollector()
    collector.visit(doc)
    return collector.headings


def generate_toc(doc: Document) -> tuple[TocItem, ...]:
    """Table of contents entries for every heading, in document order."""
    return tuple(
        TocItem(level=heading.level, title=extract_text(heading.children), anchor=heading.id)
        for heading in collect_headings(doc)
    )


def extract_title(doc: Document, slug: Sequence[str]) -> str:
    """First level-1 heading text, else the last slug segment humanised.

    Example:
        >>> from lawe.location import SourceLocation
        >>> extract_title(Document(SourceLocation(1, 1), ()), ("setting", "red_winter"))
        'Red Winter'
    """
    for heading in collect_headings(doc):
        if heading.level == 1:
            title = extract_text(heading.children)
            if title:
                return title
    last = slug[-1] if slug else "Untitled"
    words = re.split(r"[-_]+", last)
    return " ".join(word[:1].upper() + word[1:] for word in words if word) or "Untitled"


def extract_excerpt(doc: Document, max_length: int = EXCERPT_LENGTH) -> str:
    """Text of the first non-empty paragraph, truncated at a word boundary."""
    for block in doc.children:
        if isinstance(block, Paragraph):
            text = extract_text(block)
            if text:
                return truncate_words(text, max_length)
    return ""


def truncate_words(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` without splitting a word.

    Example:
        >>> truncate_words("alpha beta gamma", 12)
        'alpha beta...'
    """
    if len(text) <= max_length:
        return text
    return _TRAILING_PARTIAL_WORD.sub("", text[:max_length]) + "..."


def count_words(text: str) -> int:
    return len(text.split())


def validate_html(html: str, file_path: str) -> None:
    """Check the rendered page has content and opens with an h1 heading.

    A large open/close tag imbalance only logs a warning.

    Raises:
        PageProcessingError: With stage ``validation``
    """
    opened = len(_OPEN_TAG.findall(html))
    closed = len(_CLOSE_TAG.findall(html))
    self_closed = len(_SELF_CLOSING_TAG.findall(html))
    if abs(opened - closed - self_closed) > MAX_TAG_IMBALANCE:
        logger.warning("Potential HTML structure issues in %s", file_path)

    trimmed = html.strip()
    if not trimmed:
        raise PageProcessingError("Generated HTML is empty", "validation", file_path)
    if not _LEADING_H1.match(trimmed):
        raise PageProcessingError("HTML must begin with an h1 heading", "validation", file_path)


def process_page(raw_page: RawPage, config: LaweConfig | None = None) -> ProcessedPage:
    """Run one page through lexing, parsing, rendering and validation.

    Args:
        raw_page: Page source
        config: Configuration; the active context config when None

    Raises:
        PageProcessingError: With the failing stage and the original cause
    """
    config = config or get_config()
    file_path = raw_page.file_path
    start = time.perf_counter()

    content = raw_page.content
    if config.strip_empty_lines:
        content = _BLANK_LINES.sub("", content)

    try:
        tokens = Lexer().tokenise(content, source_file=file_path)
    except Exception as e:
        raise PageProcessingError("Lexical analysis failed", "lexing", file_path, e) from e

    try:
        doc = Parser(strict=config.strict).parse(tokens, source_file=file_path)
    except Exception as e:
        raise PageProcessingError("Parsing failed", "parsing", file_path, e) from e

    try:
        html = HtmlRenderer(config).render(doc)
    except Exception as e:
        raise PageProcessingError("Rendering failed", "rendering", file_path, e) from e

    if config.validate_output:
        validate_html(html, file_path)

    try:
        title = extract_title(doc, raw_page.slug)
        excerpt = extract_excerpt(doc)
        word_count = count_words(extract_text(doc))
        toc = generate_toc(doc) if config.generate_toc else None
    except Exception as e:
        raise PageProcessingError("Metadata extraction failed", "unknown", file_path, e) from e

    elapsed = time.perf_counter() - start
    if elapsed > config.max_processing_time:
        logger.warning("Page %s took %.2fs to process", file_path, elapsed)

    return ProcessedPage(
        slug=raw_page.slug,
        file_path=file_path,
        raw_content=raw_page.content,
        html=html,
        title=title,
        excerpt=excerpt,
        toc=toc,
        metadata=PageMetadata(
            last_modified=raw_page.last_modified,
            size=raw_page.size,
            processing_time=elapsed,
            word_count=word_count,
        ),
    )


def process_all_pages(
    pages: Sequence[RawPage],
    config: LaweConfig | None = None,
    cache: PageCache | None = None,
) -> tuple[list[ProcessedPage], ProcessingStats]:
    """Process pages on a thread pool, isolating failures per page.

    Args:
        pages: Pages to process
        config: Configuration; the active context config when None
        cache: Optional content-addressed cache consulted before processing

    Returns:
        Processed pages in input order (failures omitted) and batch stats
    """
    config = config or get_config()
    start = time.perf_counter()
    logger.info("Processing %d wiki pages", len(pages))

    config_hash = hash_config(config) if cache is not None else ""
    results: list[ProcessedPage | None] = [None] * len(pages)
    pending: list[int] = []
    for index, page in enumerate(pages):
        cached = (
            cache.get(hash_content(page.content), config_hash)
            if cache is not None and config_hash
            else None
        )
        if cached is not None:
            results[index] = replace(cached, slug=page.slug, file_path=page.file_path)
        else:
            pending.append(index)
    cache_hits = len(pages) - len(pending)
    if cache is not None:
        logger.info("Cache stats: %d hits, %d misses", cache_hits, len(pending))

    failures: list[ProcessingFailure] = []
    if pending:
        with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as executor:
            futures = [(i, executor.submit(process_page, pages[i], config)) for i in pending]
            for index, future in futures:
                page = pages[index]
                try:
                    processed = future.result()
                except PageProcessingError as e:
                    logger.error("Failed to process %s: %s", page.file_path, e)
                    failures.append(ProcessingFailure(page.file_path, page.slug, e, e.stage))
                    continue
                results[index] = processed
                if cache is not None and config_hash:
                    cache.put(hash_content(page.content), config_hash, processed)

    processed_pages = [page for page in results if page is not None]
    total_time = time.perf_counter() - start
    fresh_times = [
        done.metadata.processing_time for i in pending if (done := results[i]) is not None
    ]
    stats = ProcessingStats(
        total_pages=len(pages),
        successful_pages=len(processed_pages),
        failed_pages=len(failures),
        total_processing_time=total_time,
        average_processing_time=sum(fresh_times) / len(fresh_times) if fresh_times else 0.0,
        cache_hits=cache_hits,
        errors=tuple(failures),
    )

    logger.info(
        "Processing complete: %d/%d pages successful in %.2fs",
        stats.successful_pages,
        stats.total_pages,
        total_time,
    )
    if failures:
        logger.warning("%d pages failed to process", len(failures))
    return processed_pages, stats


def load_pages(root: str | Path, pattern: str = "*.txt") -> list[RawPage]:
    """Read every wiki source file under ``root``, sorted by path.

    The slug is the path relative to ``root`` without the extension.
    """
    root = Path(root)
    pages: list[RawPage] = []
    for path in sorted(root.rglob(pattern)):
        if not path.is_file():
            continue
        stat = path.stat()
        pages.append(
            RawPage(
                slug=path.relative_to(root).with_suffix("").parts,
                file_path=str(path),
                content=path.read_text(encoding="utf-8"),
                last_modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                size=stat.st_size,
            )
        )
    return pages


__all__ = [
    "PageMetadata",
    "ProcessedPage",
    "ProcessingFailure",
    "ProcessingStats",
    "RawPage",
    "TocItem",
    "count_words",
    "extract_excerpt",
    "extract_title",
    "generate_toc",
    "load_pages",
    "process_all_pages",
    "process_page",
    "truncate_words",
    "validate_html",
]
