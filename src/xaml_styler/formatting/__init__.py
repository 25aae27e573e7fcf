"""Formatting layer: attribute ordering, attribute layout and the streaming formatter."""

from .attributes import (
    AttributeInfo,
    AttributeOrderRule,
    AttributeOrderRules,
    AttributeTokenType,
    sort_attributes,
)
from .formatter import ContentType, ElementFrame, OutputBuffer, StreamingFormatter
from .layout import AttributeLayout, AttributeLayoutEngine, tabify_indent
from .markup import (
    MarkupExtensionInfo,
    format_markup_extension,
    parse_markup_extension,
    split_arguments,
)

__all__ = [
    "AttributeInfo",
    "AttributeOrderRule",
    "AttributeOrderRules",
    "AttributeTokenType",
    "sort_attributes",
    "ContentType",
    "ElementFrame",
    "OutputBuffer",
    "StreamingFormatter",
    "AttributeLayout",
    "AttributeLayoutEngine",
    "tabify_indent",
    "MarkupExtensionInfo",
    "format_markup_extension",
    "parse_markup_extension",
    "split_arguments",
]
