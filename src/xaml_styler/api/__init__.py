"""Public styling API."""

from .styler import StylerService, format_file, format_string

__all__ = [
    "StylerService",
    "format_file",
    "format_string",
]
