"""XAML Styler.

A deterministic formatter for XAML markup: it orders attributes by a
configurable rule table, lays them out within line-length and count limits,
reorders Grid, Canvas and Setter children, and re-indents the document.

Progressive API Disclosure:
- Level 1: Simple functions - format_string(), format_file()
- Level 2: Configured service - StylerService class
"""

__version__ = "0.1.0"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured service
from .api import StylerService, format_file, format_string

# Configuration classes for advanced usage
from .shared.config import LineBreakRule, ReorderSettersBy, StylerConfig

# Errors and result objects
from .shared.errors import MarkupSyntaxError, StylerError
from .shared.result import FormatMetrics, FormatResult

__all__ = [
    # Version and metadata
    "__version__",

    # Level 1: Simple formatting functions
    "format_string",
    "format_file",

    # Level 2: Configured service
    "StylerService",

    # Configuration
    "StylerConfig",
    "LineBreakRule",
    "ReorderSettersBy",

    # Errors and results
    "StylerError",
    "MarkupSyntaxError",
    "FormatResult",
    "FormatMetrics",
]
