"""Token handlers, one per syntax construct.

| Handler                   | Priority | Construct                        |
|---------------------------|----------|----------------------------------|
| TripleParenthesesHandler  | 111      | ``(((command|date)))``           |
| PseudoHTMLHandler         | 110      | ``<callout>``, tables, ``<affili/>`` |
| FootnoteHandler           | 105      | ``((...))``, ``((cn))``          |
| FormattingHandler         | 100      | ``**``, ``//``, ``__``           |
| MiscHandler               | 95       | ``\\\\``, ``----``               |
| HeadingHandler            | 90       | ``== Title ==``                  |
| LinkHandler               | 85       | ``[[target|text]]``              |
| ImageHandler              | 80       | ``{{path?200|caption}}``         |
| WhitespaceHandler         | 10       | newlines and spaces              |
| TextHandler               | 1        | everything else                  |

"""

from lawe.lexer.handlers.base import (
    TokenHandler,
    find_last_unclosed,
    innermost,
    remove_last_unclosed,
)
from lawe.lexer.handlers.directives import FootnoteHandler, TripleParenthesesHandler
from lawe.lexer.handlers.formatting import FormattingHandler
from lawe.lexer.handlers.heading import HeadingHandler
from lawe.lexer.handlers.links import ImageHandler, LinkHandler
from lawe.lexer.handlers.misc import MiscHandler
from lawe.lexer.handlers.pseudo_html import PseudoHTMLHandler
from lawe.lexer.handlers.text import TextHandler, WhitespaceHandler


def default_handlers() -> list[TokenHandler]:
    """Fresh instances of the built-in handlers, in registration order."""
    return [
        FormattingHandler(),
        HeadingHandler(),
        WhitespaceHandler(),
        TextHandler(),
        PseudoHTMLHandler(),
        ImageHandler(),
        MiscHandler(),
        LinkHandler(),
        FootnoteHandler(),
        TripleParenthesesHandler(),
    ]


__all__ = [
    "FootnoteHandler",
    "FormattingHandler",
    "HeadingHandler",
    "ImageHandler",
    "LinkHandler",
    "MiscHandler",
    "PseudoHTMLHandler",
    "TextHandler",
    "TokenHandler",
    "TripleParenthesesHandler",
    "WhitespaceHandler",
    "default_handlers",
    "find_last_unclosed",
    "innermost",
    "remove_last_unclosed",
]
