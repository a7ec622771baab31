"""Tests for HtmlRenderer."""

from __future__ import annotations

import logging

import pytest

from lawe import convert, parse, tokenise
from lawe.config import LaweConfig
from lawe.errors import RenderError
from lawe.location import SourceLocation
from lawe.nodes import Document, Heading, Image, InfoTableAffili, Node, Text, TripleParentheses
from lawe.renderers import HeadingInfo, HtmlRenderer, render_attributes

LOC = SourceLocation(1, 1)


def render(source: str, config: LaweConfig | None = None) -> str:
    return HtmlRenderer(config).render(parse(tokenise(source)))


class TestInlineRendering:
    def test_formatting(self) -> None:
        assert render("**b** //i// __u__") == (
            "<p><strong>b</strong> <em>i</em> <u>u</u></p>"
        )

    def test_sub_and_sup(self) -> None:
        assert render("H<sub>2</sub>O x<sup>2</sup>") == "<p>H<sub>2</sub>O x<sup>2</sup></p>"

    def test_text_is_escaped(self) -> None:
        assert render("<script>alert('x')</script>") == (
            "<p>&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;</p>"
        )

    def test_ampersand(self) -> None:
        assert render("Tom & Jerry") == "<p>Tom &amp; Jerry</p>"

    def test_line_break(self) -> None:
        assert render("a\\\\ b") == "<p>a<br /> b</p>"

    def test_citation_needed(self) -> None:
        assert render("x((cn))") == (
            '<p>x<sup class="citation-needed" title="Citation needed">'
            "[<em>citation needed</em>]</sup></p>"
        )


class TestBlockRendering:
    def test_heading(self) -> None:
        assert render("== Hello ==") == (
            '<div id="lawe-heading-5-div" class="lawe-heading-div">'
            '<h5 id="hello" class="lawe-heading-5"><span class="lawe-heading">Hello</span></h5></div>'
        )

    def test_heading_level_is_clamped(self) -> None:
        doc = Document(LOC, (Heading(LOC, level=9, children=(Text(LOC, "x"),), id="x"),))
        assert "<h6 " in HtmlRenderer().render(doc)

    def test_rule(self) -> None:
        assert render("----") == '<div id="horiz_rule"><hr /></div>'

    def test_paragraphs(self) -> None:
        assert render("a\nb") == "<p>a</p><p>b</p>"

    def test_headings_are_collected(self) -> None:
        renderer = HtmlRenderer()
        renderer.render(parse(tokenise("====== Top ======\n== Sub ==")))
        assert renderer.headings == [
            HeadingInfo(level=1, text="Top", id="top"),
            HeadingInfo(level=5, text="Sub", id="sub"),
        ]


class TestCallouts:
    def test_callout_with_title(self) -> None:
        html = render('<callout type="warning" title="Heads up">Body</callout>')
        assert html.startswith(
            '<div id="lawe-callout-warning" class="lawe-callout"><div id="lawe-callout-inner">'
            '<div id="lawe-callout-icon"><span id="lawe-callout-icon-span-warning">'
            '<svg id="lawe-icon-svg" class="mb-2" width="24" height="24" fill="none" '
        )
        assert '<span id="lawe-callout-title-span"><h4>Heads up</h4></span>' in html
        assert html.endswith('<span id="lawe-callout-span-body">Body</span></div></div>')

    def test_default_callout_has_no_title(self) -> None:
        html = render("<callout>Body</callout>")
        assert 'id="lawe-callout-default"' in html
        assert "lawe-callout-title-span" not in html

    def test_info_icon_is_larger(self) -> None:
        assert 'width="28" height="28"' in render('<callout type="info">x</callout>')

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(RenderError, match="bogus"):
            render('<callout type="bogus">x</callout>')

    def test_title_is_escaped_once(self) -> None:
        html = render('<callout title="a<b & c">x</callout>')
        assert "<h4>a&lt;b &amp; c</h4>" in html


class TestTables:
    def test_default_ids_and_merged_class(self) -> None:
        assert render('<table class="wide"><tr><th>H</th><td>x</td></tr></table>') == (
            '<table id="lawe-table" class="wide"><tr>'
            '<th id="lawe-table-header-cell">H</th><td>x</td></tr></table>'
        )

    def test_cell_attributes(self) -> None:
        html = render('<table><tbody><tr><td colspan="2" class="c">x</td></tr></tbody></table>')
        assert '<tbody><tr><td colspan="2" class="c">x</td></tr></tbody>' in html

    def test_render_attributes(self) -> None:
        assert render_attributes({"class": "wide", "width": ""}, {"id": "t", "class": "base"}) == (
            'id="t" class="base wide"'
        )
        assert render_attributes(None, None) == ""
        assert render_attributes({"title": "a&lt;b"}) == 'title="a&lt;b"'


class TestImages:
    def test_default_markup(self) -> None:
        assert render("{{/img/a.png?200|A cap}}") == (
            '<figure id="lawe-figure" class="lawe-figure-right">'
            '<a id="lawe-figure-a" class="a-no-style" '
            'href="https://github.com/lorearchive/law-content/tree/main/images/img/a.png">'
            '<img src="https://raw.githubusercontent.com/lorearchive/law-content/main/images/img/a.png" '
            'width="200" alt="A cap" loading="lazy" /></a>'
            "<figcaption>A cap</figcaption></figure>"
        )

    def test_relative_path_gets_slash(self) -> None:
        config = LaweConfig(image_base_url="https://cdn/", image_link_base_url="https://repo")
        html = render("{{ a.png?50%}}", config)
        assert 'src="https://cdn/a.png"' in html
        assert 'href="https://repo/a.png"' in html
        assert 'class="lawe-figure-left"' in html

    def test_optimizer_hook(self) -> None:
        seen: list[Image] = []

        def optimize(src: str, image: Image) -> str:
            seen.append(image)
            return f"<picture>{src}</picture>"

        config = LaweConfig(image_base_url="https://cdn", image_optimizer=optimize)
        html = render("{{/a.png?200|cap}}", config)
        assert "<picture>https://cdn/a.png</picture>" in html
        assert "<img" not in html
        assert seen[0].width == "200"


class TestLinks:
    def test_internal(self) -> None:
        assert render("[[a/b_c]]") == (
            '<p><a href="/wiki/a/b_c" title="b c" id="lawe-link" class="internal">b c</a></p>'
        )

    def test_internal_uses_wiki_base(self) -> None:
        html = render("[[start|Home]]", LaweConfig(wiki_base="/docs"))
        assert html == '<p><a href="/docs/start" title="Home" id="lawe-link" class="internal">Home</a></p>'

    def test_external(self) -> None:
        assert render("[[https://example.com]]") == (
            '<p><a href="https://example.com" title="https://example.com" '
            'id="lawe-link" class="external">https://example.com</a></p>'
        )

    def test_interwiki(self) -> None:
        assert render("[[wp>Python]]") == (
            '<p><a href="https://en.wikipedia.org/wiki/Python" title="Python" '
            'id="lawe-link" class="external interwiki">Python</a></p>'
        )

    def test_anchor(self) -> None:
        assert render("[[#my_sec]]") == (
            '<p><a href="#my_sec" title="my sec" id="lawe-link" class="anchor">my sec</a></p>'
        )

    def test_formatted_text(self) -> None:
        assert render("[[start|Go **now**]]") == (
            '<p><a href="/wiki/start" title="Go now" id="lawe-link" class="internal">'
            "Go <strong>now</strong></a></p>"
        )

    def test_invalid_link_is_escaped_text(self) -> None:
        assert render("[[bad target]]") == "<p>[[bad target]]</p>"


class TestFootnotes:
    def test_numbering_and_notes_section(self) -> None:
        html = render("a((one)) b((two))")
        assert html.startswith(
            '<p>a<sup id="fn_anchor-1" class="footnote">'
            '<a href="#fn-1" id="fnref-1" class="footnote-link">[1]</a></sup> b'
            '<sup id="fn_anchor-2" class="footnote">'
            '<a href="#fn-2" id="fnref-2" class="footnote-link">[2]</a></sup></p>'
        )
        assert '<h2 id="notes" class="lawe-heading-2"><span class="lawe-heading">Notes</span></h2>' in html
        assert (
            '<li id="fn-1" class="mb-4"><div class="footnote-content">1. '
            '<a href="#fnref-1" class="footnote-backref mr-2">⇈</a> one</div></li>'
        ) in html
        assert html.endswith("two</div></li></ol></div>")

    def test_no_notes_without_footnotes(self) -> None:
        assert "footnotes-section" not in render("plain")

    def test_nested_footnote_numbered_after_parent(self) -> None:
        html = render("x((a((b))))")
        assert 'id="fnref-1"' in html
        assert html.count('class="footnote"') == 2
        first_note = html.split('<li id="fn-1"')[1].split("</li>")[0]
        assert 'href="#fn-2"' in first_note

    def test_three_footnotes_in_encounter_order(self) -> None:
        renderer = HtmlRenderer()
        html = renderer.render(parse(tokenise("a((one)) b((two)) c((three))")))
        positions = [html.index(f">[{n}]</a>") for n in (1, 2, 3)]
        assert positions == sorted(positions)
        assert html.count('<li id="fn-') == 3

        other = renderer.render(parse(tokenise("z((only))")))
        assert ">[1]</a>" in other
        assert ">[2]</a>" not in other

    def test_numbering_restarts_per_document(self) -> None:
        renderer = HtmlRenderer()
        doc = parse(tokenise("a((one))"))
        assert renderer.render(doc) == renderer.render(doc)

    def test_fragments_share_numbering_until_reset(self) -> None:
        renderer = HtmlRenderer()
        paragraph = parse(tokenise("a((one))")).children[0]
        assert "[1]" in renderer.render(paragraph)
        assert "[2]" in renderer.render(paragraph)
        assert "fn-2" in renderer.footnote_definitions()
        renderer.reset_footnotes()
        assert renderer.footnote_definitions() == ""
        assert "[1]" in renderer.render(paragraph)


class TestNotices:
    def test_unfinished(self) -> None:
        html = render("(((unfinished|2024-05-01)))")
        assert html.startswith(
            '<div id="lawe-alertnotif" class="alert alert-warning alertnotif" role="alert">'
            '<svg id="lawe-icon-svg" class="mb-2"'
        )
        assert "<strong>unfinished</strong>" in html
        assert '(2024-05-01) &middot; <a href="/wiki/alert_notifications">' in html

    def test_external(self) -> None:
        html = render("(((external|2023-12-24)))")
        assert 'fill="black"' in html
        assert "This article is for an external media." in html
        assert "(2023-12-24) &middot;" in html

    def test_contextwarn(self) -> None:
        assert "needs more context" in render("(((contextwarn|2024)))")

    def test_inline_notice(self) -> None:
        html = render("see (((external|2024)))")
        assert html.startswith('<p>see <div id="lawe-alertnotif"')

    def test_unknown_command_renders_nothing(self, caplog: pytest.LogCaptureFixture) -> None:
        notice = TripleParentheses(LOC, command="bogus", date="2024")  # type: ignore[arg-type]
        with caplog.at_level(logging.WARNING, logger="lawe"):
            assert HtmlRenderer().render(notice) == ""
        assert "bogus" in caplog.text


class TestAffili:
    def test_card(self) -> None:
        html = render('<affili name="hina" school="gehenna" />')
        assert html.startswith('<table id="lawe-infoTable" class="affili">')
        assert '<a href="/wiki/setting/gehenna">Gehenna Academy</a>' in html
        assert 'href="/wiki/setting/academies/gehenna"' in html
        assert 'alt="The logo of Gehenna Academy."' in html
        assert "<h3>prefect</h3>" in html
        assert '<li class="border-b p-2"><a>Sorasaki Hina</a></li>' in html

    def test_missing_school(self) -> None:
        with pytest.raises(RenderError, match="name and school"):
            HtmlRenderer().render(InfoTableAffili(LOC, {"name": "hina"}))

    def test_unknown_student(self) -> None:
        with pytest.raises(RenderError, match="nobody"):
            render('<affili name="nobody" school="gehenna" />')


class TestFallbacks:
    def test_unknown_node_renders_nothing(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="lawe"):
            assert HtmlRenderer().render(Node(LOC)) == ""
        assert "Unknown node type Node" in caplog.text

    def test_convert_matches_stages(self) -> None:
        source = "== T ==\n**x** [[a]]"
        assert convert(source) == render(source)
