"""Tree layer: lxml document adapter and structural reordering."""

from .document import MarkupDocument, is_element, parse_document
from .reorder import (
    NameMatch,
    NodeReorderEngine,
    ReorderRule,
    SortAttribute,
    WPF_PRESENTATION_NAMESPACE,
    build_reorder_rules,
    create_canvas_children_rule,
    create_grid_children_rule,
    create_setters_rule,
)

__all__ = [
    "MarkupDocument",
    "is_element",
    "parse_document",
    "NameMatch",
    "NodeReorderEngine",
    "ReorderRule",
    "SortAttribute",
    "WPF_PRESENTATION_NAMESPACE",
    "build_reorder_rules",
    "create_canvas_children_rule",
    "create_grid_children_rule",
    "create_setters_rule",
]
