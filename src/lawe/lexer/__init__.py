"""Handler-based lexer for Lawe wiki markup.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerContext
├── core.py              # Lexer (priority dispatch loop)
├── context.py           # LexerContext (read cursor, token construction)
└── handlers/            # One recognizer per construct
    ├── base.py          # TokenHandler protocol, open-tag stack helpers
    ├── formatting.py    # ** // __
    ├── heading.py       # = runs
    ├── misc.py          # line breaks, rules
    ├── links.py         # [[...]] and {{...}}
    ├── pseudo_html.py   # <callout>, <table> family, <sub>, <sup>, <affili/>
    ├── directives.py    # (((notice))), ((footnote)), ((cn))
    └── text.py          # whitespace and text fallback

Usage:
    >>> from lawe.lexer import Lexer
    >>> for token in Lexer().tokenise("== Hi =="):
    ...     print(token)
    Token(HEADING_OPEN, '==', 1:1)
    Token(WHITESPACE, ' ', 1:3)
    Token(TEXT, 'Hi', 1:4)
    Token(WHITESPACE, ' ', 1:6)
    Token(HEADING_CLOSE, '==', 1:7)
    Token(EOF, '', 1:9)

"""

from lawe.lexer.context import LexerContext
from lawe.lexer.core import Lexer

__all__ = ["Lexer", "LexerContext"]
