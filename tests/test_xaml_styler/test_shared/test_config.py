"""Tests for the styling configuration."""

import json

import pytest

from xaml_styler.shared.config import (
    ConfigError,
    ConfigValidationError,
    LineBreakRule,
    ReorderSettersBy,
    StylerConfig,
    coerce_enum,
    split_name_list,
)


class TestStylerConfigDefaults:
    """Test default option values."""

    def test_default_configuration(self):
        """Test default values of the most used options."""
        config = StylerConfig()

        assert config.indent_size == 4
        assert config.indent_with_tabs is False
        assert config.attributes_tolerance == 2
        assert config.max_attributes_per_line == 1
        assert config.max_attribute_characters_per_line == 0
        assert config.order_attributes_by_name is True
        assert config.remove_ending_tag_of_empty_element is True
        assert config.space_before_closing_slash is True
        assert config.root_element_line_break_rule is LineBreakRule.DEFAULT
        assert config.reorder_setters is ReorderSettersBy.NONE
        assert config.reorder_grid_children is False
        assert config.reorder_canvas_children is False

    def test_config_is_immutable(self):
        """Test that fields cannot be reassigned."""
        config = StylerConfig()
        with pytest.raises(AttributeError):
            config.indent_size = 2

    def test_no_newline_element_names(self):
        """Test parsing of the no-line-break element list."""
        names = StylerConfig().no_newline_element_names
        assert "Setter" in names
        assert "GradientStop" in names
        assert all(name == name.strip() for name in names)

    def test_indent_with_spaces_and_tabs(self):
        """Test indentation strings for a depth."""
        assert StylerConfig().indent(2) == " " * 8
        assert StylerConfig(indent_size=2).indent(3) == " " * 6
        assert StylerConfig(indent_with_tabs=True).indent(2) == "\t\t"
        assert StylerConfig().indent(-1) == ""


class TestStylerConfigValidation:
    """Test validation performed on construction."""

    def test_enum_values_resolved_from_strings(self):
        """Test that enum options accept names and values."""
        config = StylerConfig(
            reorder_setters="TargetNameThenProperty",
            root_element_line_break_rule="always",
        )
        assert config.reorder_setters is ReorderSettersBy.TARGET_NAME_THEN_PROPERTY
        assert config.root_element_line_break_rule is LineBreakRule.ALWAYS

        config = StylerConfig(reorder_setters="target_name_then_property")
        assert config.reorder_setters is ReorderSettersBy.TARGET_NAME_THEN_PROPERTY

    def test_unknown_enum_value_rejected(self):
        """Test that an undefined setter mode fails before formatting."""
        with pytest.raises(ConfigValidationError) as exc_info:
            StylerConfig(reorder_setters="ByColor")
        assert exc_info.value.field_name == "reorder_setters"
        assert "TargetName" in exc_info.value.suggestions

    def test_invalid_sizes_rejected(self):
        """Test range validation of numeric options."""
        with pytest.raises(ValueError, match="indent_size must be > 0"):
            StylerConfig(indent_size=0)
        with pytest.raises(ValueError, match="attributes_tolerance must be >= 0"):
            StylerConfig(attributes_tolerance=-1)
        with pytest.raises(ValueError, match="max_attributes_per_line must be >= 0"):
            StylerConfig(max_attributes_per_line=-2)

    def test_invalid_newline_rejected(self):
        """Test that only real line break sequences are accepted."""
        with pytest.raises(ConfigValidationError):
            StylerConfig(newline="\t")


class TestStylerConfigSerialization:
    """Test overrides, dictionaries, JSON and files."""

    def test_override(self):
        """Test that override returns a modified copy."""
        config = StylerConfig()
        changed = config.override(indent_size=2, reorder_setters="Property")

        assert changed.indent_size == 2
        assert changed.reorder_setters is ReorderSettersBy.PROPERTY
        assert config.indent_size == 4

    def test_override_unknown_option(self):
        """Test that misspelled options come with a suggestion."""
        with pytest.raises(ConfigValidationError) as exc_info:
            StylerConfig().override(indent_sise=2)
        assert exc_info.value.suggestions == ["indent_size"]

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries."""
        config = StylerConfig(
            indent_size=2,
            reorder_setters=ReorderSettersBy.TARGET_NAME,
            newline="\n",
        )
        data = config.to_dict()

        assert data["reorder_setters"] == "TargetName"
        assert data["root_element_line_break_rule"] == "Default"
        assert StylerConfig.from_dict(data) == config

    def test_json_round_trip(self):
        """Test conversion to and from JSON."""
        config = StylerConfig(attributes_tolerance=5, newline="\n")
        assert StylerConfig.from_json(config.to_json()) == config

    def test_from_json_rejects_non_object(self):
        """Test that a JSON document must be an object."""
        with pytest.raises(ConfigValidationError):
            StylerConfig.from_json("[1, 2]")
        with pytest.raises(ConfigValidationError):
            StylerConfig.from_json("{not json")

    def test_from_dict_unknown_key(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration option"):
            StylerConfig.from_dict({"indent": 4})

    def test_from_file(self, tmp_path):
        """Test loading a configuration file."""
        path = tmp_path / "styler.json"
        path.write_text(json.dumps({"indent_with_tabs": True, "reorder_grid_children": True}))

        config = StylerConfig.from_file(path)
        assert config.indent_with_tabs is True
        assert config.reorder_grid_children is True

    def test_from_missing_file(self, tmp_path):
        """Test that an unreadable file is a configuration error."""
        with pytest.raises(ConfigError, match="Could not read configuration file"):
            StylerConfig.from_file(tmp_path / "missing.json")


class TestStylerConfigPresets:
    """Test preset factory methods."""

    def test_default_preset(self):
        """Test that the default preset equals a plain instance."""
        assert StylerConfig.default() == StylerConfig()

    def test_compact_preset(self):
        """Test that the compact preset keeps more on each line."""
        config = StylerConfig.compact()
        assert config.attributes_tolerance == 4
        assert config.max_attributes_per_line == 3
        assert config.keep_bindings_on_same_line is True

    def test_tabs_preset(self):
        """Test that the tabs preset indents with tabs."""
        assert StylerConfig.tabs().indent(1) == "\t"


class TestHelpers:
    """Test module-level helpers."""

    def test_coerce_enum_member_passthrough(self):
        """Test that members resolve to themselves."""
        assert coerce_enum(LineBreakRule, LineBreakRule.NEVER, "rule") is LineBreakRule.NEVER

    def test_coerce_enum_rejects_non_string(self):
        """Test that unrelated types are rejected."""
        with pytest.raises(ConfigValidationError):
            coerce_enum(LineBreakRule, 3, "rule")

    def test_split_name_list(self):
        """Test splitting of comma separated options."""
        assert split_name_list("Key, x:Key,,Uid  x:Uid") == ("Key", "x:Key", "Uid", "x:Uid")
        assert split_name_list("") == ()
