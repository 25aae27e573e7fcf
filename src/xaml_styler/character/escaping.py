"""Reversible neutralization of entity-like ampersand sequences.

XAML documents routinely contain references such as ``&nbsp;`` that are not
declared XML entities and make a strict parser reject the document. Before
parsing, every ``&`` followed by 4-8 non-``;`` characters and a ``;`` is
replaced with a placeholder carrying the run verbatim; after formatting the
placeholders are turned back into the original references.
"""

import re
from typing import Pattern

AMPERSAND_MARKER = "__amp__"
SEMICOLON_MARKER = "__scln__"

# Length bounds of the run between "&" and ";"
MIN_RUN_LENGTH = 4
MAX_RUN_LENGTH = 8


class EntityEscaper:
    """Escape and unescape ambiguous entity references.

    ``unescape(escape(text)) == text`` for every input that does not already
    contain the placeholder markers. Input without matching sequences passes
    through both directions unchanged.
    """

    def __init__(self) -> None:
        self._escape_pattern: Pattern[str] = re.compile(
            rf"&([^;]{{{MIN_RUN_LENGTH},{MAX_RUN_LENGTH}}});"
        )
        self._restore_pattern: Pattern[str] = re.compile(
            rf"{AMPERSAND_MARKER}([^;]{{{MIN_RUN_LENGTH},{MAX_RUN_LENGTH}}}?)"
            rf"{SEMICOLON_MARKER}"
        )

    def escape(self, text: str) -> str:
        """Replace entity-like sequences with placeholders."""
        return self._escape_pattern.sub(
            lambda match: f"{AMPERSAND_MARKER}{match.group(1)}{SEMICOLON_MARKER}",
            text,
        )

    def unescape(self, text: str) -> str:
        """Restore placeholders produced by :meth:`escape`."""
        return self._restore_pattern.sub(lambda match: f"&{match.group(1)};", text)
