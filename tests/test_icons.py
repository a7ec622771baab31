"""Tests for icon lookup and markup decoration."""

from collections.abc import Iterator

import pytest

from lawe.icons import (
    BUILTIN_ICONS,
    get_icon,
    get_markup,
    has_icon_resolver,
    set_icon_resolver,
)


@pytest.fixture(autouse=True)
def _reset_resolver() -> Iterator[None]:
    yield
    set_icon_resolver(None)


class TestBuiltinIcons:
    @pytest.mark.parametrize("kind", ["default", "info", "success", "warning", "danger"])
    def test_every_callout_type_has_an_icon(self, kind: str) -> None:
        assert get_icon(f"{kind}-calloutIcon") is not None

    def test_notice_icons(self) -> None:
        assert "globe2" in BUILTIN_ICONS
        assert "document-text" in BUILTIN_ICONS

    def test_unknown(self) -> None:
        assert get_icon("nope") is None
        assert get_markup("nope") == ""


class TestMarkup:
    def test_decorates_root_tag(self) -> None:
        markup = get_markup("globe2", size=28, class_name="mb-2", color="black")
        assert markup.startswith(
            '<svg id="lawe-icon-svg" class="mb-2" width="28" height="28" fill="black" xmlns='
        )
        assert markup.count("<svg") == 1

    def test_defaults(self) -> None:
        assert get_markup("globe2").startswith(
            '<svg id="lawe-icon-svg" class="" width="24" height="24" fill="none" '
        )


class TestResolver:
    def test_resolver_overrides_builtin(self) -> None:
        set_icon_resolver(lambda name: "<svg ><circle/></svg>" if name == "globe2" else None)
        assert has_icon_resolver()
        assert get_markup("globe2", class_name="x") == (
            '<svg id="lawe-icon-svg" class="x" width="24" height="24" fill="none" ><circle/></svg>'
        )

    def test_falls_back_to_builtin(self) -> None:
        set_icon_resolver(lambda name: None)
        assert get_icon("info-calloutIcon") == BUILTIN_ICONS["info-calloutIcon"]

    def test_clear(self) -> None:
        set_icon_resolver(lambda name: None)
        set_icon_resolver(None)
        assert not has_icon_resolver()
