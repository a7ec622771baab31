"""Content-addressed cache of processed pages.

Maps (content_hash, config_hash) to a ProcessedPage so unchanged pages are
not lexed, parsed and rendered again on the next batch run.

Thread Safety:
    DictPageCache is not thread-safe. ``process_all_pages`` only touches the
    cache from the calling thread, before and after the worker pool runs.

Example:
    from lawe.cache import DictPageCache
    from lawe.processor import process_all_pages

    cache = DictPageCache()
    pages, stats = process_all_pages(raw_pages, cache=cache)
    pages, stats = process_all_pages(raw_pages, cache=cache)  # all hits
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from lawe.utils.hashing import hash_fields, hash_str

if TYPE_CHECKING:
    from lawe.config import LaweConfig
    from lawe.processor import ProcessedPage


class PageCache(Protocol):
    """Protocol for content-addressed page caches."""

    def get(self, content_hash: str, config_hash: str) -> ProcessedPage | None:
        """Return the cached page if present, else None."""
        ...

    def put(self, content_hash: str, config_hash: str, page: ProcessedPage) -> None:
        """Store a processed page."""
        ...


class DictPageCache:
    """In-memory page cache using a dict."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], ProcessedPage] = {}

    def get(self, content_hash: str, config_hash: str) -> ProcessedPage | None:
        return self._data.get((content_hash, config_hash))

    def put(self, content_hash: str, config_hash: str, page: ProcessedPage) -> None:
        self._data[(content_hash, config_hash)] = page

    def __len__(self) -> int:
        return len(self._data)


def hash_content(source: str) -> str:
    """SHA256 hex digest of page source."""
    return hash_str(source)


def hash_config(config: LaweConfig) -> str:
    """Hash of the output-affecting config, or ``""`` to bypass the cache.

    An image optimizer changes output in a way that cannot be hashed, so
    configs that carry one are never cached.
    """
    if config.image_optimizer is not None:
        return ""
    return hash_fields(config)


__all__ = [
    "DictPageCache",
    "PageCache",
    "hash_config",
    "hash_content",
]
