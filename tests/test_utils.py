"""Tests for utility functions."""

import pytest

from livasense.errors import InvalidPositionError
from livasense.utils import LineIndex, check_position, parse_position, split_lines


class TestSplitLines:
    def test_crlf(self):
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]

    def test_trailing_newline(self):
        assert split_lines("a\n") == ["a", ""]


class TestLineIndex:
    def test_position_and_offset(self):
        index = LineIndex("ab\ncd\n\nef")
        assert index.position(0) == (0, 0)
        assert index.position(4) == (1, 1)
        assert index.position(6) == (2, 0)
        assert index.offset(3, 1) == 8

    def test_offsets_are_clamped(self):
        index = LineIndex("ab")
        assert index.position(99) == (0, 2)
        assert index.position(-5) == (0, 0)

    def test_end_of_document(self):
        assert LineIndex("a\nbc").end_of_document() == (1, 2)
        assert LineIndex("a\n").end_of_document() == (1, 0)


class TestParsePosition:
    def test_line_and_column(self):
        assert parse_position("12:5") == (11, 4)

    def test_line_only(self):
        assert parse_position("3") == (2, 0)

    @pytest.mark.parametrize("value", ["", "a:b", "1:2:3", "0:1", "1:0", "-1"])
    def test_invalid(self, value):
        with pytest.raises(InvalidPositionError):
            parse_position(value)


class TestCheckPosition:
    def test_valid(self):
        check_position(["abc", ""], 0, 3)
        check_position(["abc", ""], 1, 0)

    def test_line_out_of_range(self):
        with pytest.raises(InvalidPositionError, match="document has 2 line"):
            check_position(["abc", ""], 2, 0)

    def test_character_out_of_range(self):
        with pytest.raises(InvalidPositionError, match="line 1 has 3 character"):
            check_position(["abc"], 0, 4)
