"""Configuration for XAML styling runs.

This module provides the immutable configuration object shared read-only by
every component of a formatting run, together with the enumerated options it
accepts and helpers for loading it from dictionaries, JSON and files.
"""

import difflib
import json
import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

_EnumT = TypeVar("_EnumT", bound=Enum)


class LineBreakRule(Enum):
    """Line-break rule applied to the attributes of the root element."""

    DEFAULT = "Default"   # Follow the attribute tolerance
    ALWAYS = "Always"     # Always put attributes on separate lines
    NEVER = "Never"       # Always keep attributes on the start tag line


class ReorderSettersBy(Enum):
    """Sort key used when reordering Setter elements."""

    NONE = "None"
    PROPERTY = "Property"
    TARGET_NAME = "TargetName"
    TARGET_NAME_THEN_PROPERTY = "TargetNameThenProperty"


DEFAULT_NO_NEWLINE_ELEMENTS = (
    "RadialGradientBrush, GradientStop, LinearGradientBrush, ScaleTransform, "
    "SkewTransform, RotateTransform, TranslateTransform, Trigger, Condition, Setter"
)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _normalize_enum_token(value: str) -> str:
    return value.replace("_", "").replace("-", "").replace(" ", "").lower()


def coerce_enum(enum_cls: Type[_EnumT], value: Any, field_name: str) -> _EnumT:
    """Resolve ``value`` to a member of ``enum_cls``.

    Members are matched by identity, by name or by value. String matching
    ignores case, underscores and dashes, so ``"TargetNameThenProperty"`` and
    ``"target_name_then_property"`` both resolve.

    Raises:
        ConfigValidationError: If the value names no member of the enum
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        token = _normalize_enum_token(value)
        for member in enum_cls:
            if token in (_normalize_enum_token(member.name),
                         _normalize_enum_token(str(member.value))):
                return member
    choices = [member.value for member in enum_cls]
    raise ConfigValidationError(
        f"{field_name} must be one of {choices}, got {value!r}",
        field_name=field_name,
        suggestions=[str(choice) for choice in choices],
    )


def split_name_list(option: str) -> Tuple[str, ...]:
    """Split a comma or whitespace separated option into its non-empty names."""
    return tuple(
        name for name in option.replace(",", " ").split() if name
    )


@dataclass(frozen=True)
class StylerConfig:
    """Immutable configuration for one or more formatting runs.

    Every field maps to a styling option. Enumerated fields accept either the
    enum member or its name/value as a string; strings are resolved during
    validation so an unknown value fails before any formatting begins.
    """

    # Indentation
    indent_size: int = 4
    indent_with_tabs: bool = False

    # Attribute layout
    attributes_tolerance: int = 2
    max_attributes_per_line: int = 1
    max_attribute_characters_per_line: int = 0
    put_attribute_order_rule_groups_on_separate_lines: bool = False
    format_markup_extension: bool = True
    keep_first_attribute_on_same_line: bool = False
    keep_bindings_on_same_line: bool = False
    keep_x_bind_on_same_line: bool = False
    order_attributes_by_name: bool = True
    root_element_line_break_rule: LineBreakRule = LineBreakRule.DEFAULT
    no_newline_elements: str = DEFAULT_NO_NEWLINE_ELEMENTS

    # Element layout
    remove_ending_tag_of_empty_element: bool = True
    put_ending_bracket_on_new_line: bool = False
    space_before_closing_slash: bool = True
    inline_elements: str = "Run"

    # Attribute ordering groups
    attribute_order_wpf_namespace: str = "x:Class, xmlns, xmlns:x, xmlns:*"
    attribute_order_key: str = "Key, x:Key, Uid, x:Uid"
    attribute_order_name: str = "Name, x:Name, Title"
    attribute_order_attached_layout: str = (
        "Grid.Column, Grid.ColumnSpan, Grid.Row, Grid.RowSpan, "
        "Canvas.Right, Canvas.Bottom, Canvas.Left, Canvas.Top"
    )
    attribute_order_core_layout: str = (
        "MinWidth, Width, MaxWidth, MinHeight, Height, MaxHeight, Margin"
    )
    attribute_order_alignment_layout: str = (
        "HorizontalAlignment, VerticalAlignment, HorizontalContentAlignment, "
        "VerticalContentAlignment, Panel.ZIndex"
    )
    attribute_order_others: str = (
        "PageSource, PageIndex, Offset, Color, TargetName, Property, Value, "
        "StartPoint, EndPoint"
    )
    attribute_order_blend_related: str = (
        "mc:Ignorable, d:IsDataSource, d:LayoutOverrides, d:IsStaticText"
    )

    # Element reordering
    reorder_grid_children: bool = False
    reorder_canvas_children: bool = False
    reorder_setters: ReorderSettersBy = ReorderSettersBy.NONE

    # Output
    newline: str = os.linesep

    # Metadata
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the configuration and resolve enumerated options."""
        object.__setattr__(
            self,
            "root_element_line_break_rule",
            coerce_enum(
                LineBreakRule,
                self.root_element_line_break_rule,
                "root_element_line_break_rule",
            ),
        )
        object.__setattr__(
            self,
            "reorder_setters",
            coerce_enum(ReorderSettersBy, self.reorder_setters, "reorder_setters"),
        )

        if self.indent_size <= 0:
            raise ConfigValidationError(
                "indent_size must be > 0", field_name="indent_size"
            )
        for name in (
            "attributes_tolerance",
            "max_attributes_per_line",
            "max_attribute_characters_per_line",
        ):
            if getattr(self, name) < 0:
                raise ConfigValidationError(f"{name} must be >= 0", field_name=name)
        if self.newline not in ("\n", "\r\n", "\r"):
            raise ConfigValidationError(
                "newline must be one of '\\n', '\\r\\n' or '\\r'",
                field_name="newline",
            )

    @property
    def no_newline_element_names(self) -> Tuple[str, ...]:
        """Element names whose attributes are never wrapped."""
        return tuple(
            name.strip() for name in self.no_newline_elements.split(",") if name.strip()
        )

    @property
    def inline_element_names(self) -> Tuple[str, ...]:
        """Element names that never receive a leading line break."""
        return split_name_list(self.inline_elements)

    def indent(self, depth: int) -> str:
        """Return the indentation string for a structural depth."""
        if depth < 0:
            depth = 0
        if self.indent_with_tabs:
            return "\t" * depth
        return " " * (depth * self.indent_size)

    def override(self, **kwargs: Any) -> "StylerConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = StylerConfig()
            >>> config.override(indent_size=2).indent_size
            2
        """
        unknown = [key for key in kwargs if key not in _field_names()]
        if unknown:
            raise _unknown_fields_error(unknown)
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format, enums by value."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            result[config_field.name] = value.value if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StylerConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: On unknown keys or invalid values
        """
        unknown = [key for key in data if key not in _field_names()]
        if unknown:
            raise _unknown_fields_error(unknown)
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "StylerConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "StylerConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def default(cls) -> "StylerConfig":
        """Create the default configuration."""
        return cls()

    @classmethod
    def compact(cls) -> "StylerConfig":
        """Create a preset that keeps more attributes per line."""
        return cls(
            attributes_tolerance=4,
            max_attributes_per_line=3,
            max_attribute_characters_per_line=120,
            keep_bindings_on_same_line=True,
        )

    @classmethod
    def tabs(cls) -> "StylerConfig":
        """Create a preset indenting with tabs."""
        return cls(indent_with_tabs=True)


def _field_names() -> List[str]:
    return [config_field.name for config_field in fields(StylerConfig)]


def _unknown_fields_error(unknown: List[str]) -> ConfigValidationError:
    suggestions: List[str] = []
    for key in unknown:
        suggestions.extend(difflib.get_close_matches(key, _field_names(), n=1))
    return ConfigValidationError(
        f"Unknown configuration option(s): {', '.join(sorted(unknown))}",
        field_name=unknown[0],
        suggestions=suggestions,
    )
