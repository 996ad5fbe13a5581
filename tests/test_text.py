"""Unit tests for the text helpers.

WHY: Every builder leans on these helpers; a wrong trim or integer parse
changes the dump silently.

HOW: Table-style tests per helper, including the intentional comment
truncation inside quotes.
"""

import pytest

from snapshot_dump.core.text import (
    is_absolute_path,
    join_comma_list,
    join_path,
    normalize_path,
    parse_unsigned,
    split_comma_list,
    strip_comment,
    strip_quotes,
    trim,
)


class TestTrimAndQuotes:

    def test_trim_whitespace(self):
        assert trim(" \tvalue \r\n") == "value"

    def test_strip_matching_double_quotes(self):
        assert strip_quotes('"0x10"') == "0x10"

    def test_strip_matching_single_quotes(self):
        assert strip_quotes("  'EL1N'  ") == "EL1N"

    def test_mismatched_quotes_left_alone(self):
        assert strip_quotes("\"abc'") == "\"abc'"

    def test_lone_quote_left_alone(self):
        assert strip_quotes('"') == '"'

    def test_only_one_pair_removed(self):
        assert strip_quotes("\"'x'\"") == "'x'"

    def test_unquoted_unchanged(self):
        assert strip_quotes("plain") == "plain"


class TestStripComment:

    def test_semicolon(self):
        assert strip_comment("key = value ; note") == "key = value "

    def test_hash(self):
        assert strip_comment("key = value # note") == "key = value "

    def test_carriage_return(self):
        assert strip_comment("key = value\r") == "key = value"

    def test_first_marker_wins(self):
        assert strip_comment("a # b ; c") == "a "

    def test_quoted_semicolon_still_truncates(self):
        """Known limitation of the dialect: comments ignore quoting."""
        assert strip_comment('name = "a;b"') == 'name = "a'

    def test_no_comment(self):
        assert strip_comment("key = value") == "key = value"


class TestParseUnsigned:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("10", 10),
        ("0x1000", 0x1000),
        ("0XfF", 255),
        ("017", 15),
        ("18446744073709551615", (1 << 64) - 1),
    ])
    def test_valid(self, text, expected):
        assert parse_unsigned(text) == expected

    @pytest.mark.parametrize("text", [
        "",
        "0x",
        "-1",
        "+1",
        " 1",
        "1 ",
        "12abc",
        "08",
        "0x1g",
        "1.5",
        "18446744073709551616",
    ])
    def test_invalid(self, text):
        assert parse_unsigned(text) is None


class TestCommaLists:

    def test_split_trims_and_drops_empty(self):
        assert split_comma_list(" a, b ,,c , ") == ["a", "b", "c"]

    def test_split_empty(self):
        assert split_comma_list(" , ") == []

    def test_join_has_no_spaces(self):
        assert join_comma_list(["a", "b"]) == "a,b"


class TestPaths:

    def test_normalize_backslashes(self):
        assert normalize_path("sub\\dir\\core0.ini") == "sub/dir/core0.ini"

    def test_normalize_strips_trailing_only_when_asked(self):
        assert normalize_path("snap\\\\") == "snap//"
        assert normalize_path("snap\\\\", strip_trailing=True) == "snap"

    @pytest.mark.parametrize("path", ["/abs/x.ini", "\\x.ini", "\\\\host\\share\\x.ini", "C:\\x.ini", "c:x.ini"])
    def test_absolute(self, path):
        assert is_absolute_path(path)

    @pytest.mark.parametrize("path", ["", "x.ini", "sub/x.ini", "1:x", ".\\x.ini"])
    def test_relative(self, path):
        assert not is_absolute_path(path)

    def test_join_inserts_separator(self):
        assert join_path("snap", "core0.ini", "/") == "snap/core0.ini"
        assert join_path("snap", "core0.ini", "\\") == "snap\\core0.ini"

    def test_join_keeps_existing_trailing_separator(self):
        assert join_path("snap/", "core0.ini", "\\") == "snap/core0.ini"
        assert join_path("snap\\", "core0.ini", "/") == "snap\\core0.ini"

    def test_join_absolute_rel_wins(self):
        assert join_path("snap", "/abs/core0.ini", "/") == "/abs/core0.ini"
        assert join_path("snap", "D:\\core0.ini", "/") == "D:\\core0.ini"

    def test_join_empty_parts(self):
        assert join_path("snap", "", "/") == "snap"
        assert join_path("", "core0.ini", "/") == "core0.ini"
