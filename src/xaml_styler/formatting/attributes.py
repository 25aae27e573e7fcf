"""Attribute classification and ordering.

The order rule table sorts attribute names into a small number of ordered
groups (namespace declarations, keys, names, layout, ...). Within a group an
attribute's position in the configured list is its priority; names the table
does not know fall into the OTHER group with priority 0, so a stable sort keeps
them in document order.
"""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Pattern, Tuple

from xaml_styler.shared.config import StylerConfig, split_name_list

_MARKUP_EXTENSION_PATTERN: Pattern[str] = re.compile(r"^\{(?!\}).*\}$", re.DOTALL)


class AttributeTokenType(IntEnum):
    """Attribute groups, in output order."""

    WPF_NAMESPACE = 10
    KEY = 20
    NAME = 30
    ATTACHED_LAYOUT = 40
    CORE_LAYOUT = 50
    ALIGNMENT_LAYOUT = 60
    OTHER = 70
    BLEND_RELATED = 80


@dataclass(frozen=True)
class AttributeOrderRule:
    """Classification of one attribute name: its group and in-group priority."""

    token_type: AttributeTokenType
    name: str
    priority: int = 0

    @property
    def sort_key(self) -> Tuple[int, int]:
        """Group first, then priority inside the group."""
        return (int(self.token_type), self.priority)


class AttributeOrderRules:
    """Configuration-driven table mapping attribute names to order rules.

    Configured names may use ``*`` as a wildcard. When several entries match
    a name the longest entry wins; among entries of equal length the one
    declared first wins.
    """

    def __init__(self, config: StylerConfig) -> None:
        self._rules: List[Tuple[Pattern[str], AttributeOrderRule]] = []
        self._cache: Dict[str, AttributeOrderRule] = {}

        self._populate(config.attribute_order_wpf_namespace, AttributeTokenType.WPF_NAMESPACE)
        self._populate(config.attribute_order_key, AttributeTokenType.KEY)
        self._populate(config.attribute_order_name, AttributeTokenType.NAME)
        self._populate(config.attribute_order_attached_layout, AttributeTokenType.ATTACHED_LAYOUT)
        self._populate(config.attribute_order_core_layout, AttributeTokenType.CORE_LAYOUT)
        self._populate(config.attribute_order_alignment_layout, AttributeTokenType.ALIGNMENT_LAYOUT)
        self._populate(config.attribute_order_others, AttributeTokenType.OTHER)
        self._populate(config.attribute_order_blend_related, AttributeTokenType.BLEND_RELATED)

    def _populate(self, option: str, token_type: AttributeTokenType) -> None:
        for priority, name in enumerate(split_name_list(option), start=1):
            pattern = re.compile(re.escape(name).replace(r"\*", ".*"))
            self._rules.append((pattern, AttributeOrderRule(token_type, name, priority)))

    def __len__(self) -> int:
        return len(self._rules)

    def classify(self, attribute_name: str) -> AttributeOrderRule:
        """Return the order rule for ``attribute_name``."""
        cached = self._cache.get(attribute_name)
        if cached is not None:
            return cached

        best = None
        for pattern, rule in self._rules:
            if pattern.fullmatch(attribute_name) and (
                best is None or len(rule.name) > len(best.name)
            ):
                best = rule
        if best is None:
            best = AttributeOrderRule(AttributeTokenType.OTHER, attribute_name, 0)

        self._cache[attribute_name] = best
        return best


@dataclass
class AttributeInfo:
    """An attribute of the start tag being formatted.

    ``value`` is kept in its serialized, escaped form so it can be written
    back between double quotes unchanged.
    """

    name: str
    value: str
    order_rule: AttributeOrderRule
    is_markup_extension: bool = field(init=False)

    def __post_init__(self) -> None:
        self.is_markup_extension = bool(_MARKUP_EXTENSION_PATTERN.match(self.value))

    def to_single_line_string(self) -> str:
        return f'{self.name}="{self.value}"'

    def sort_key(self, by_name: bool) -> Tuple:
        """Key ordering attributes by group, priority and optionally name."""
        if by_name:
            return (*self.order_rule.sort_key, self.name)
        return self.order_rule.sort_key


def sort_attributes(attributes: List[AttributeInfo], by_name: bool) -> List[AttributeInfo]:
    """Stable sort of attributes by their order rules."""
    return sorted(attributes, key=lambda attribute: attribute.sort_key(by_name))
