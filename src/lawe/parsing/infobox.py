"""Info-box directives.

``<affili name="..." school="..." />`` is a void tag whose sanitized
attributes become an InfoTableAffili node; the roster lookup happens at
render time.
"""

from __future__ import annotations

from lawe.nodes import InfoTableAffili
from lawe.tokens import TokenType


class InfoBoxParsingMixin:
    """Mixin for info-box directives."""

    def _parse_info_table(self) -> InfoTableAffili:
        token = self._current
        if token.type is not TokenType.AFFILI:
            raise self._error(f"Unrecognized info-box token {token.type.name}")
        self._advance()
        self._consume_block_end()
        return InfoTableAffili(token.location, dict(token.attributes or {}))
