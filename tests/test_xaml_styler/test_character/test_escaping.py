"""Tests for entity escaping and unescaping."""

import pytest

from xaml_styler.character import AMPERSAND_MARKER, SEMICOLON_MARKER, EntityEscaper


@pytest.fixture
def escaper():
    return EntityEscaper()


class TestEscape:
    """Test neutralization of entity-like sequences."""

    def test_escapes_entity_like_sequence(self, escaper):
        """Test that a 4-8 character run is wrapped in markers."""
        assert escaper.escape("a&nbsp;b") == f"a{AMPERSAND_MARKER}nbsp{SEMICOLON_MARKER}b"

    def test_short_references_untouched(self, escaper):
        """Test that standard short entities are left for the parser."""
        assert escaper.escape("&lt;&gt;&amp;") == "&lt;&gt;&amp;"

    def test_long_runs_untouched(self, escaper):
        """Test that runs longer than eight characters are not escaped."""
        text = "&abcdefghi;"
        assert escaper.escape(text) == text

    def test_bounds(self, escaper):
        """Test the run length boundaries."""
        assert escaper.escape("&abcd;") != "&abcd;"
        assert escaper.escape("&abcdefgh;") != "&abcdefgh;"
        assert escaper.escape("&abc;") == "&abc;"

    def test_text_without_matches_unchanged(self, escaper):
        """Test passthrough of plain text."""
        text = '<Grid Tag="a and b" />'
        assert escaper.escape(text) == text
        assert escaper.unescape(text) == text


class TestUnescape:
    """Test restoration of escaped sequences."""

    @pytest.mark.parametrize("text", [
        "&nbsp;",
        "x &quot; y &#x2014; z",
        '<TextBlock Text="&copy; 2024&trade;" />',
        "&amp;&nbsp;&amp;",
    ])
    def test_inverse_of_escape(self, escaper, text):
        """Test that unescape restores the original text."""
        assert escaper.unescape(escaper.escape(text)) == text

    def test_escaped_text_has_no_ampersand_runs(self, escaper):
        """Test that escaped output contains no entity-like sequences."""
        escaped = escaper.escape("&nbsp;&ensp;")
        assert "&" not in escaped
