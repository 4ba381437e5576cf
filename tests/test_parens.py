# =============================================================================
# test_parens.py - Parenthesis Matcher Unit Tests
# =============================================================================
# Tests for the single-pass parenthesis matcher used by the expression
# parser.
#
# Test coverage includes:
#   - Flat and nested pairs
#   - Offsets relative to a non-zero range start
#   - Unmatched '(' and ')' detection
#   - Read-only match table
# =============================================================================

import pytest

from natc.errors import SourceLocation
from natc.compiler.errors import MismatchedParenthesesError
from natc.compiler.parens import ParenMatchTable, match_parentheses


LOC = SourceLocation("test.nc", 1, 1)


def tokens_of(text: str) -> list[str]:
    """Split a space-separated expression into token texts."""
    return text.split()


# =============================================================================
# Matching Tests
# =============================================================================

class TestMatching:
    """Test pairing of parentheses."""

    def test_no_parentheses(self):
        """A range without parentheses gives an empty table."""
        table = match_parentheses(tokens_of("a + b"), 0, 3)
        assert len(table) == 0
        assert table.as_dict() == {}

    def test_single_pair(self):
        """A single pair maps closer offset to opener offset."""
        tokens = tokens_of("( a + b ) * c")
        table = match_parentheses(tokens, 0, len(tokens))
        assert table.as_dict() == {4: 0}

    def test_nested_pairs(self):
        """Inner pairs close before outer pairs."""
        tokens = tokens_of("( ( a ) + ( b ) )")
        table = match_parentheses(tokens, 0, len(tokens))
        assert table.as_dict() == {2: 1, 6: 4, 7: 0}

    def test_sibling_pairs(self):
        """Adjacent pairs are matched independently."""
        tokens = tokens_of("( a ) + ( b )")
        table = match_parentheses(tokens, 0, len(tokens))
        assert table.as_dict() == {2: 0, 6: 4}

    def test_offsets_relative_to_start(self):
        """Stored offsets are relative to the range start."""
        tokens = tokens_of("int x = ( 1 + 2 )")
        table = match_parentheses(tokens, 1, len(tokens))
        assert table.as_dict() == {6: 2}

    def test_opener_of_absolute(self):
        """opener_of() works in absolute statement indices."""
        tokens = tokens_of("int x = ( 1 + 2 )")
        table = match_parentheses(tokens, 1, len(tokens))
        assert table.opener_of(7) == 3
        with pytest.raises(KeyError):
            table.opener_of(3)

    def test_tokens_outside_range_ignored(self):
        """Parentheses outside [start, end) are not scanned."""
        tokens = tokens_of(") a + b (")
        table = match_parentheses(tokens, 1, 4)
        assert len(table) == 0


# =============================================================================
# Error Tests
# =============================================================================

class TestMismatch:
    """Test detection of unbalanced parentheses."""

    def test_unclosed_opener(self):
        """An opener left open at the end of the range is an error."""
        tokens = tokens_of("( a + b")
        with pytest.raises(MismatchedParenthesesError) as exc_info:
            match_parentheses(tokens, 0, len(tokens), LOC, "(a + b")
        assert exc_info.value.unmatched == "("
        assert "mismatched parentheses" in str(exc_info.value)

    def test_stray_closer(self):
        """A closer with no pending opener is an error."""
        tokens = tokens_of("a + b )")
        with pytest.raises(MismatchedParenthesesError) as exc_info:
            match_parentheses(tokens, 0, len(tokens), LOC)
        assert exc_info.value.unmatched == ")"

    def test_closer_before_opener(self):
        """Counts balance but order is wrong."""
        tokens = tokens_of(") a (")
        with pytest.raises(MismatchedParenthesesError):
            match_parentheses(tokens, 0, len(tokens))

    def test_error_carries_location(self):
        """The statement location appears in the message."""
        tokens = tokens_of("( a")
        with pytest.raises(MismatchedParenthesesError) as exc_info:
            match_parentheses(tokens, 0, len(tokens), LOC, "(a")
        assert str(exc_info.value).startswith("test.nc:1:1: error:")


# =============================================================================
# Table Tests
# =============================================================================

class TestParenMatchTable:
    """Test the match table container."""

    def test_table_is_read_only(self):
        """The underlying mapping cannot be modified."""
        table = ParenMatchTable(0, {2: 0})
        with pytest.raises(TypeError):
            table._matches[3] = 1

    def test_as_dict_returns_copy(self):
        """Mutating as_dict() output leaves the table unchanged."""
        table = ParenMatchTable(0, {2: 0})
        copy = table.as_dict()
        copy[5] = 4
        assert len(table) == 1

    def test_missing_closer_raises_key_error(self):
        """opener_of() on an index that is not a closer raises KeyError."""
        table = ParenMatchTable(0, {2: 0})
        with pytest.raises(KeyError):
            table.opener_of(1)
