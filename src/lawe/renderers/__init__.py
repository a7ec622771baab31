"""Lawe renderers.

- HtmlRenderer: renders the AST to HTML using the StringBuilder pattern
- render_affili_table: the affiliation info-box card

Thread Safety:
Each render() of a Document starts its own RenderContext.

"""

from lawe.renderers.html import HeadingInfo, HtmlRenderer, RenderContext, render_attributes
from lawe.renderers.infobox import render_affili_table

__all__ = [
    "HeadingInfo",
    "HtmlRenderer",
    "RenderContext",
    "render_affili_table",
    "render_attributes",
]
