"""Tests for start tag attribute layout."""

from xaml_styler.formatting import AttributeLayout, AttributeLayoutEngine, tabify_indent
from xaml_styler.shared.config import LineBreakRule, StylerConfig

THREE = [("Content", "OK"), ("Height", "20"), ("Width", "10")]


def engine(**options):
    options.setdefault("newline", "\n")
    return AttributeLayoutEngine(StylerConfig(**options))


class TestLineDecision:
    """Test whether attributes stay on the start tag line."""

    def test_within_tolerance(self):
        """Test that attributes up to the tolerance stay on one line."""
        layout = engine().layout([("Width", "10"), ("Content", "OK")], "Button", 0)

        assert not layout.is_multiline
        assert layout.lines == ['Width="10" Content="OK"']
        assert layout.render("\n") == ' Width="10" Content="OK"'

    def test_over_tolerance(self):
        """Test one attribute per line beyond the tolerance."""
        layout = engine().layout(THREE, "Button", 0)

        assert layout.is_multiline
        assert layout.lines == ['Width="10"', 'Height="20"', 'Content="OK"']
        assert layout.render("\n") == '\n    Width="10"\n    Height="20"\n    Content="OK"'

    def test_indent_follows_depth(self):
        """Test the attribute indent one level below the element."""
        assert engine().layout(THREE, "Button", 2).indent == " " * 12

    def test_no_line_break_elements(self):
        """Test that exempt elements never wrap."""
        layout = engine().layout(
            [("Property", "Width"), ("Value", "10"), ("TargetName", "b")], "Setter", 1
        )
        assert not layout.is_multiline
        assert layout.lines == ['TargetName="b" Property="Width" Value="10"']

    def test_root_rule_always(self):
        """Test forcing a line break on the root element."""
        layout = engine(root_element_line_break_rule=LineBreakRule.ALWAYS).layout(
            [("Title", "Main")], "Window", 0, is_root=True
        )
        assert layout.is_multiline

    def test_root_rule_never(self):
        """Test keeping all root attributes on one line."""
        layout = engine(root_element_line_break_rule="Never").layout(
            THREE, "Window", 0, is_root=True
        )
        assert not layout.is_multiline

    def test_root_rule_ignored_for_children(self):
        """Test that the root rule applies to the root only."""
        layout = engine(root_element_line_break_rule="Never").layout(THREE, "Button", 1)
        assert layout.is_multiline

    def test_no_attributes(self):
        """Test the empty layout."""
        assert engine().layout([], "Grid", 0) == AttributeLayout()


class TestLinePacking:
    """Test greedy packing of wrapped attributes."""

    def test_max_attributes_per_line(self):
        """Test the attribute count limit."""
        layout = engine(max_attributes_per_line=2).layout(THREE, "Button", 0)
        assert layout.lines == ['Width="10" Height="20"', 'Content="OK"']

    def test_max_characters_per_line(self):
        """Test the character limit."""
        layout = engine(
            max_attributes_per_line=0, max_attribute_characters_per_line=24
        ).layout(THREE, "Button", 0)
        assert layout.lines == ['Width="10" Height="20"', 'Content="OK"']

    def test_long_attribute_never_split(self):
        """Test that an attribute longer than the limit gets a line of its own."""
        layout = engine(
            max_attributes_per_line=0, max_attribute_characters_per_line=5
        ).layout(THREE, "Button", 0)
        assert layout.lines == ['Width="10"', 'Height="20"', 'Content="OK"']

    def test_group_separation(self):
        """Test that order groups start new lines."""
        layout = engine(
            max_attributes_per_line=0,
            put_attribute_order_rule_groups_on_separate_lines=True,
        ).layout(THREE + [("x:Name", "ok")], "Button", 0)
        assert layout.lines == ['x:Name="ok"', 'Width="10" Height="20"', 'Content="OK"']


class TestKeepFirstAttribute:
    """Test alignment under the first attribute."""

    def test_alignment_with_spaces(self):
        """Test that continuation lines align after the element name."""
        layout = engine(keep_first_attribute_on_same_line=True).layout(THREE, "Button", 0)

        assert layout.first_line_inline
        assert layout.render("\n") == (
            ' Width="10"\n        Height="20"\n        Content="OK"'
        )

    def test_alignment_with_tabs(self):
        """Test that the alignment column is converted to tabs and spaces."""
        layout = engine(
            keep_first_attribute_on_same_line=True, indent_with_tabs=True
        ).layout(THREE, "Button", 1)
        assert layout.indent == "\t\t\t"

        layout = engine(
            keep_first_attribute_on_same_line=True, indent_with_tabs=True
        ).layout(THREE, "Grid", 0)
        assert layout.indent == "\t  "


class TestMarkupExtensions:
    """Test layout of markup extension values."""

    BOUND = [("Text", "{Binding Path=Name, Mode=TwoWay}"), ("Width", "10"), ("Height", "20")]

    def test_expanded_and_aligned(self):
        """Test multi-line expansion aligned under the first argument."""
        layout = engine().layout(self.BOUND, "TextBox", 0)

        assert layout.lines[:2] == ['Width="10"', 'Height="20"']
        assert layout.lines[2] == (
            'Text="{Binding Path=Name,\n' + " " * 19 + 'Mode=TwoWay}"'
        )

    def test_extension_flushes_pending_line(self):
        """Test that an extension never shares a line with other attributes."""
        layout = engine(max_attributes_per_line=0).layout(self.BOUND, "TextBox", 0)
        assert layout.lines[0] == 'Width="10" Height="20"'
        assert layout.lines[1].startswith('Text="{Binding')

    def test_keep_bindings_on_same_line(self):
        """Test that bindings can stay on a single line."""
        layout = engine(keep_bindings_on_same_line=True).layout(self.BOUND, "TextBox", 0)
        assert layout.lines[2] == 'Text="{Binding Path=Name, Mode=TwoWay}"'

    def test_keep_x_bind_on_same_line(self):
        """Test that compiled bindings can stay on a single line."""
        attributes = [("Text", "{x:Bind Name, Mode=OneWay}"), ("Width", "10"), ("Height", "20")]
        layout = engine(keep_x_bind_on_same_line=True).layout(attributes, "TextBox", 0)
        assert layout.lines[2] == 'Text="{x:Bind Name, Mode=OneWay}"'

    def test_short_extension_single_line(self):
        """Test that an extension with one argument is not expanded."""
        attributes = [("Style", "{StaticResource Primary}"), ("Width", "10"), ("Height", "20")]
        layout = engine().layout(attributes, "Button", 0)
        assert layout.lines[2] == 'Style="{StaticResource Primary}"'

    def test_formatting_disabled(self):
        """Test that extensions pack like other attributes when disabled."""
        layout = engine(format_markup_extension=False, max_attributes_per_line=0).layout(
            self.BOUND, "TextBox", 0
        )
        assert layout.lines == [
            'Width="10" Height="20" Text="{Binding Path=Name, Mode=TwoWay}"'
        ]


class TestTabifyIndent:
    """Test column to tab conversion."""

    def test_spaces_unchanged(self):
        """Test that space indentation is returned as is."""
        assert tabify_indent("      ", StylerConfig()) == "      "

    def test_tabs_and_remainder(self):
        """Test whole tabs plus remaining spaces."""
        config = StylerConfig(indent_with_tabs=True)
        assert tabify_indent("\t      ", config) == "\t\t  "
        assert tabify_indent("", config) == ""
