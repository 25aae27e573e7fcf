"""Attribute layout for start tags.

Decides whether a start tag's attributes stay on the tag's own line or are
wrapped, packs wrapped attributes greedily into lines, and gives markup
extensions their own block. The engine never splits an attribute value of
its own accord and always emits attributes in sorted order.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from xaml_styler.shared.config import LineBreakRule, StylerConfig

from .attributes import AttributeInfo, AttributeOrderRules, sort_attributes
from .markup import format_markup_extension, parse_markup_extension


def tabify_indent(indent: str, config: StylerConfig) -> str:
    """Reconcile a column width into whole tabs plus remaining spaces.

    Only applies when indenting with tabs; otherwise ``indent`` is returned
    unchanged.
    """
    if not config.indent_with_tabs:
        return indent
    width = len(indent.replace("\t", " " * config.indent_size))
    tabs, spaces = divmod(width, config.indent_size)
    return "\t" * tabs + " " * spaces


@dataclass
class AttributeLayout:
    """Attribute lines of one start tag.

    Attributes:
        lines: Attribute text per output line, in sorted order
        is_multiline: Whether the start tag spans more than one line
        indent: Indentation of every line written on a new line
        first_line_inline: Whether the first line follows the element name
    """

    lines: List[str] = field(default_factory=list)
    is_multiline: bool = False
    indent: str = ""
    first_line_inline: bool = True

    def render(self, newline: str) -> str:
        """Return the text written between the element name and the bracket."""
        parts = []
        for index, line in enumerate(self.lines):
            if index == 0 and self.first_line_inline:
                parts.append(" " + line)
            else:
                parts.append(newline + self.indent + line)
        return "".join(parts)


class AttributeLayoutEngine:
    """Lays out the attributes of start tags according to a configuration."""

    def __init__(
        self,
        config: StylerConfig,
        order_rules: Optional[AttributeOrderRules] = None
    ) -> None:
        self.config = config
        self.order_rules = order_rules or AttributeOrderRules(config)
        self._no_line_break_elements = frozenset(config.no_newline_element_names)

    def create_attributes(self, attributes: Sequence[Tuple[str, str]]) -> List[AttributeInfo]:
        """Classify raw ``(name, value)`` pairs and sort them."""
        infos = [
            AttributeInfo(name, value, self.order_rules.classify(name))
            for name, value in attributes
        ]
        return sort_attributes(infos, self.config.order_attributes_by_name)

    def is_no_line_break_element(self, element_name: str) -> bool:
        return element_name in self._no_line_break_elements

    def keeps_line(self, attribute_count: int, element_name: str, is_root: bool) -> bool:
        """Decide whether all attributes stay on the start tag's line."""
        keep = (
            attribute_count <= self.config.attributes_tolerance
            or self.is_no_line_break_element(element_name)
        )
        if is_root:
            rule = self.config.root_element_line_break_rule
            if rule is LineBreakRule.ALWAYS:
                keep = False
            elif rule is LineBreakRule.NEVER:
                keep = True
        return keep

    def layout(
        self,
        attributes: Sequence[Tuple[str, str]],
        element_name: str,
        depth: int,
        is_root: bool = False,
    ) -> AttributeLayout:
        """Lay out the attributes of the element ``element_name`` at ``depth``."""
        infos = self.create_attributes(attributes)
        if not infos:
            return AttributeLayout()

        if self.keeps_line(len(infos), element_name, is_root):
            return AttributeLayout(
                lines=[" ".join(info.to_single_line_string() for info in infos)],
                is_multiline=False,
                indent=self.config.indent(depth + 1),
            )

        if self.config.keep_first_attribute_on_same_line:
            # Align under the first attribute: "<" + name + " "
            indent = tabify_indent(
                self.config.indent(depth) + " " * (len(element_name) + 2), self.config
            )
        else:
            indent = self.config.indent(depth + 1)

        return AttributeLayout(
            lines=self._pack_lines(infos, indent),
            is_multiline=True,
            indent=indent,
            first_line_inline=self.config.keep_first_attribute_on_same_line,
        )

    def _pack_lines(self, infos: List[AttributeInfo], indent: str) -> List[str]:
        config = self.config
        lines: List[str] = []
        buffer: List[str] = []
        buffer_length = 0
        last: Optional[AttributeInfo] = None

        def flush() -> None:
            nonlocal buffer, buffer_length
            if buffer:
                lines.append(" ".join(buffer))
            buffer = []
            buffer_length = 0

        for info in infos:
            if info.is_markup_extension and config.format_markup_extension:
                flush()
                lines.append(self._markup_extension_block(info, indent))
            else:
                pending = info.to_single_line_string()
                is_length_exceeded = (
                    len(buffer) > 0
                    and config.max_attribute_characters_per_line > 0
                    and buffer_length + len(pending) > config.max_attribute_characters_per_line
                )
                is_count_exceeded = (
                    config.max_attributes_per_line > 0
                    and len(buffer) + 1 > config.max_attributes_per_line
                )
                is_group_changed = (
                    config.put_attribute_order_rule_groups_on_separate_lines
                    and last is not None
                    and last.order_rule.token_type != info.order_rule.token_type
                )
                if is_length_exceeded or is_count_exceeded or is_group_changed:
                    flush()
                buffer.append(pending)
                buffer_length += len(pending) + 1
            last = info

        flush()
        return lines

    def _keeps_markup_extension_inline(self, info: AttributeInfo) -> bool:
        return self.config.keep_bindings_on_same_line or (
            self.config.keep_x_bind_on_same_line and "x:bind " in info.value.lower()
        )

    def _markup_extension_block(self, info: AttributeInfo, base_indent: str) -> str:
        if self._keeps_markup_extension_inline(info):
            return info.to_single_line_string()

        extension = parse_markup_extension(info.value)
        if not extension.is_expandable:
            return info.to_single_line_string()

        # Column of the first argument: name + '="{' + type name + ' '
        argument_indent = tabify_indent(
            base_indent + " " * (len(info.name) + len(extension.type_name) + 4),
            self.config,
        )
        value = format_markup_extension(extension, argument_indent, self.config.newline)
        return f'{info.name}="{value}"'
