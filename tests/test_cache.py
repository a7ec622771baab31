"""Tests for the content-addressed page cache."""

from datetime import UTC, datetime

from lawe.cache import DictPageCache, hash_config, hash_content
from lawe.config import LaweConfig
from lawe.processor import RawPage, process_page


def _processed():
    return process_page(
        RawPage(
            slug=("home",),
            file_path="home.txt",
            content="====== Home ======\n",
            last_modified=datetime(2024, 1, 1, tzinfo=UTC),
            size=19,
        )
    )


class TestHashing:
    def test_content_hash_is_stable(self) -> None:
        assert hash_content("abc") == hash_content("abc")
        assert hash_content("abc") != hash_content("abd")
        assert len(hash_content("abc")) == 64

    def test_config_hash_tracks_fields(self) -> None:
        assert hash_config(LaweConfig()) == hash_config(LaweConfig())
        assert hash_config(LaweConfig()) != hash_config(LaweConfig(wiki_base="/w/"))

    def test_optimizer_disables_caching(self) -> None:
        assert hash_config(LaweConfig(image_optimizer=lambda src, image: "")) == ""


class TestDictPageCache:
    def test_get_put(self) -> None:
        cache = DictPageCache()
        page = _processed()
        assert cache.get("c", "k") is None
        cache.put("c", "k", page)
        assert cache.get("c", "k") is page
        assert cache.get("c", "other") is None
        assert len(cache) == 1
