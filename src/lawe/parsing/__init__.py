"""Parser mixins for Lawe.

parsing/
├── token_nav.py   # TokenNavigationMixin: cursor over the token list
├── inline.py      # InlineParsingMixin, balance_formatting
├── blocks.py      # BlockParsingMixin: headings, callouts, images, paragraphs
├── table.py       # TableParsingMixin: <table> family
└── infobox.py     # InfoBoxParsingMixin: <affili />
"""

from lawe.parsing.blocks import BlockParsingMixin
from lawe.parsing.infobox import InfoBoxParsingMixin
from lawe.parsing.inline import InlineParsingMixin, balance_formatting
from lawe.parsing.table import TableParsingMixin
from lawe.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "BlockParsingMixin",
    "InfoBoxParsingMixin",
    "InlineParsingMixin",
    "TableParsingMixin",
    "TokenNavigationMixin",
    "balance_formatting",
]
