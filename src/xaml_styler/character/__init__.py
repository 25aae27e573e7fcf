"""Character-level preprocessing applied before and after parsing."""

from .escaping import AMPERSAND_MARKER, SEMICOLON_MARKER, EntityEscaper

__all__ = [
    "AMPERSAND_MARKER",
    "SEMICOLON_MARKER",
    "EntityEscaper",
]
