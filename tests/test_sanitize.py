"""Tests for HTML escaping and pseudo-HTML attribute filtering."""

import pytest

from lawe.sanitize import (
    escape_attribute,
    filter_attributes,
    html_escape,
    is_dangerous_value,
    sanitize_value,
)


class TestHtmlEscape:
    def test_escapes_all_special_characters(self) -> None:
        assert html_escape("<a href='x'>&\"") == "&lt;a href=&#039;x&#039;&gt;&amp;&quot;"

    def test_plain_text_unchanged(self) -> None:
        assert html_escape("Abydos High School") == "Abydos High School"

    def test_escape_attribute_is_idempotent(self) -> None:
        once = escape_attribute('a<b & "c"')
        assert once == "a&lt;b &amp; &quot;c&quot;"
        assert escape_attribute(once) == once


class TestDangerousValues:
    @pytest.mark.parametrize(
        "value",
        [
            "javascript:alert(1)",
            "JavaScript:alert(1)",
            "java\u200bscript:alert(1)",
            "java script:alert(1)",
            "&#106;avascript:alert(1)",
            "x javascript:y",
            "vbscript:msgbox",
            "data:text/html;base64,AAAA",
        ],
    )
    def test_detected(self, value: str) -> None:
        assert is_dangerous_value(value)
        assert sanitize_value(value) == ""

    @pytest.mark.parametrize("value", ["https://example.com", "wide", "metadata:x", "50%"])
    def test_safe(self, value: str) -> None:
        assert not is_dangerous_value(value)


class TestFilterAttributes:
    def test_keeps_allowed_attributes(self) -> None:
        raw = {"class": "c", "colspan": "2", "rowspan": "3", "align": "left", "style": "x"}
        assert filter_attributes("td", raw) == {
            "class": "c",
            "colspan": "2",
            "rowspan": "3",
            "align": "left",
        }

    def test_callout(self) -> None:
        assert filter_attributes("callout", {"type": "info", "title": "T", "id": "x"}) == {
            "type": "info",
            "title": "T",
        }

    def test_sub_keeps_nothing(self) -> None:
        assert filter_attributes("sub", {"class": "x"}) == {}

    def test_unknown_tag_keeps_nothing(self) -> None:
        assert filter_attributes("div", {"class": "x"}) == {}

    def test_values_are_escaped(self) -> None:
        assert filter_attributes("table", {"class": '"><script>'}) == {
            "class": "&quot;&gt;&lt;script&gt;"
        }

    def test_affili_attribute_names_are_case_sensitive(self) -> None:
        assert filter_attributes("affili", {"fAppear": "1", "fappear": "2"}) == {"fAppear": "1"}
