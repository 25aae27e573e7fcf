"""Reordering of sibling elements by composite attribute sort keys.

A :class:`ReorderRule` names the parents whose children it reorders, the
children that take part, and the attributes forming the sort key. The
:class:`NodeReorderEngine` walks a tree post-order and applies every enabled
rule to every element, so subtrees are settled before their parent's direct
children are reordered. Reordering never recurses into grandchildren and never
moves children that do not match the rule.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from lxml import etree

from xaml_styler.shared.config import ConfigValidationError, ReorderSettersBy, StylerConfig
from xaml_styler.shared.logging import get_logger

from .document import is_element

WPF_PRESENTATION_NAMESPACE = "http://schemas.microsoft.com/winfx/2006/xaml/presentation"

FallbackFunction = Callable[[etree._Element], str]
SortKey = Tuple[int, float, str]


@dataclass(frozen=True)
class NameMatch:
    """Pattern for element identity; ``None`` in either part is a wildcard."""

    name: Optional[str] = None
    namespace: Optional[str] = None

    def is_match(self, element: etree._Element) -> bool:
        """Check whether ``element`` has a matching local name and namespace."""
        qname = etree.QName(element)
        return (
            (self.name is None or self.name == qname.localname)
            and (self.namespace is None or self.namespace == qname.namespace)
        )


@dataclass(frozen=True)
class SortAttribute:
    """One component of a composite sort key.

    Attributes:
        name: Local name of the attribute to sort by
        namespace: Namespace of the attribute, ``None`` for unqualified names
        ascending: Sort direction of this component
        numeric: Compare values that parse as numbers numerically
        fallback: Supplies a value when the attribute is absent
    """

    name: str
    namespace: Optional[str] = None
    ascending: bool = True
    numeric: bool = False
    fallback: Optional[FallbackFunction] = None

    def get_value(self, element: etree._Element) -> str:
        """Return the attribute value, or the fallback value when absent."""
        key = self.name if self.namespace is None else f"{{{self.namespace}}}{self.name}"
        value = element.get(key)
        if value is None:
            return self.fallback(element) if self.fallback is not None else ""
        return value

    def sort_key(self, element: etree._Element) -> SortKey:
        """Return a comparable key for ``element`` on this component.

        Numeric components order every number before any non-numeric value;
        non-numeric values fall back to ordinal string comparison.
        """
        value = self.get_value(element)
        if self.numeric:
            try:
                number = float(value)
            except ValueError:
                return (1, 0.0, value)
            if math.isfinite(number):
                return (0, number, "")
            return (1, 0.0, value)
        return (0, 0.0, value)


@dataclass
class ReorderRule:
    """Parent/child name patterns plus the composite key ordering the children."""

    enabled: bool = True
    parent_names: List[NameMatch] = field(default_factory=list)
    child_names: List[NameMatch] = field(default_factory=list)
    sort_attributes: List[SortAttribute] = field(default_factory=list)
    name: str = "reorder"

    def matches_parent(self, element: etree._Element) -> bool:
        """Check whether ``element`` is a parent this rule reorders."""
        return any(match.is_match(element) for match in self.parent_names)

    def matches_child(self, element: etree._Element) -> bool:
        """Check whether ``element`` takes part in the reordering."""
        return is_element(element) and any(
            match.is_match(element) for match in self.child_names
        )

    def handle_element(self, element: etree._Element) -> bool:
        """Reorder the matching direct children of ``element`` in place.

        Sorted children are spliced back into the positions the matching
        children occupied. Text following a child belongs to the position,
        so the whitespace layout between siblings is unchanged.

        Returns:
            True if the order of the children changed
        """
        if not self.enabled or not self.sort_attributes:
            return False
        if not self.matches_parent(element):
            return False

        children = list(element)
        slots = [index for index, child in enumerate(children) if self.matches_child(child)]
        if len(slots) < 2:
            return False

        matching = [children[index] for index in slots]
        ordered = list(matching)
        # Stable sorts from the last key component to the first
        for attribute in reversed(self.sort_attributes):
            ordered.sort(key=attribute.sort_key, reverse=not attribute.ascending)

        if all(a is b for a, b in zip(ordered, matching)):
            return False

        tails = [child.tail for child in matching]
        for slot, child, tail in zip(slots, ordered, tails):
            child.tail = tail
            children[slot] = child

        for child in list(element):
            element.remove(child)
        element.extend(children)
        return True


class NodeReorderEngine:
    """Applies a fixed sequence of reorder rules to a whole tree.

    The engine is a pure function of the tree and its rules: identical input
    always yields identical child orderings.
    """

    def __init__(
        self,
        rules: Sequence[ReorderRule],
        correlation_id: Optional[str] = None
    ) -> None:
        self.rules = list(rules)
        self.logger = get_logger(__name__, correlation_id, "node_reorder_engine")

    @property
    def is_active(self) -> bool:
        """True when at least one rule can change the tree."""
        return any(rule.enabled and rule.sort_attributes for rule in self.rules)

    def apply(self, root: etree._Element) -> int:
        """Reorder ``root`` and all its descendants in place.

        Returns:
            Number of sibling groups whose order changed
        """
        if not self.is_active:
            return 0
        return self._handle_node(root)

    def _handle_node(self, element: etree._Element) -> int:
        reordered = 0
        for child in element:
            if is_element(child):
                reordered += self._handle_node(child)

        if any(is_element(child) for child in element):
            for rule in self.rules:
                if rule.handle_element(element):
                    reordered += 1
                    self.logger.debug(
                        "Reordered children",
                        extra={"rule": rule.name, "parent": etree.QName(element).localname},
                    )
        return reordered


def _grid_row_fallback(element: etree._Element) -> str:
    # Property elements such as Grid.RowDefinitions go first
    return "-2" if "." in etree.QName(element).localname else "-1"


def _unpositioned(element: etree._Element) -> str:
    return "-1"


def create_grid_children_rule(enabled: bool) -> ReorderRule:
    """Order children of a Grid by row, then column."""
    return ReorderRule(
        enabled=enabled,
        parent_names=[NameMatch("Grid")],
        child_names=[NameMatch()],
        sort_attributes=[
            SortAttribute("Grid.Row", numeric=True, fallback=_grid_row_fallback),
            SortAttribute("Grid.Column", numeric=True, fallback=_unpositioned),
        ],
        name="grid_children",
    )


def create_canvas_children_rule(enabled: bool) -> ReorderRule:
    """Order children of a Canvas by left, top, right, then bottom offset."""
    return ReorderRule(
        enabled=enabled,
        parent_names=[NameMatch("Canvas")],
        child_names=[NameMatch()],
        sort_attributes=[
            SortAttribute(name, numeric=True, fallback=_unpositioned)
            for name in ("Canvas.Left", "Canvas.Top", "Canvas.Right", "Canvas.Bottom")
        ],
        name="canvas_children",
    )


def create_setters_rule(mode: ReorderSettersBy) -> ReorderRule:
    """Order Setter elements of styles and triggers according to ``mode``.

    Raises:
        ConfigValidationError: If ``mode`` is not a supported sort mode
    """
    rule = ReorderRule(
        parent_names=[
            NameMatch(name)
            for name in ("DataTrigger", "MultiDataTrigger", "MultiTrigger", "Style", "Trigger")
        ],
        child_names=[NameMatch("Setter", WPF_PRESENTATION_NAMESPACE)],
        name="setters",
    )

    if mode is ReorderSettersBy.NONE:
        rule.enabled = False
    elif mode is ReorderSettersBy.PROPERTY:
        rule.sort_attributes.append(SortAttribute("Property"))
    elif mode is ReorderSettersBy.TARGET_NAME:
        rule.sort_attributes.append(SortAttribute("TargetName"))
    elif mode is ReorderSettersBy.TARGET_NAME_THEN_PROPERTY:
        rule.sort_attributes.append(SortAttribute("TargetName"))
        rule.sort_attributes.append(SortAttribute("Property"))
    else:
        raise ConfigValidationError(
            f"Unsupported setter reorder mode: {mode!r}", field_name="reorder_setters"
        )
    return rule


def build_reorder_rules(config: StylerConfig) -> List[ReorderRule]:
    """Build the rule sequence for a run: Grid, then Canvas, then Setters."""
    return [
        create_grid_children_rule(config.reorder_grid_children),
        create_canvas_children_rule(config.reorder_canvas_children),
        create_setters_rule(config.reorder_setters),
    ]
