from __future__ import annotations

import pytest

from awstoolbox.auth.properties import parse_properties


@pytest.mark.parametrize(
    "line",
    [
        "accessKey=AKIA",
        "accessKey = AKIA",
        "accessKey:AKIA",
        "accessKey : AKIA",
        "accessKey AKIA",
        "accessKey\tAKIA",
        "   accessKey=AKIA",
    ],
)
def test_separators(line: str) -> None:
    assert parse_properties(line) == {"accessKey": "AKIA"}


def test_comments_and_blank_lines_skipped() -> None:
    text = "# header\n\n  ! bang comment\naccessKey=AKIA\n   \n"
    assert parse_properties(text) == {"accessKey": "AKIA"}


def test_comment_marker_inside_value_kept() -> None:
    assert parse_properties("secretKey=abc#def!") == {"secretKey": "abc#def!"}


def test_continuation_lines_joined() -> None:
    text = "secretKey=abc\\\n    def\\\n\tghi\naccessKey=AKIA\n"
    assert parse_properties(text) == {"secretKey": "abcdefghi", "accessKey": "AKIA"}


def test_continuation_line_starting_with_hash_is_not_a_comment() -> None:
    assert parse_properties("key=a\\\n#b") == {"key": "a#b"}


def test_escaped_backslash_does_not_continue() -> None:
    assert parse_properties("key=a\\\\\nother=b") == {"key": "a\\", "other": "b"}


def test_escapes_in_values() -> None:
    text = "key=tab\\there\\nnl\\u0041\\q"
    assert parse_properties(text) == {"key": "tab\there\nnlAq"}


def test_escaped_separators_in_key() -> None:
    assert parse_properties("a\\=b\\ c=d") == {"a=b c": "d"}


def test_crlf_and_cr_line_endings() -> None:
    text = "accessKey=AKIA\r\nsecretKey=s\rprofile=p"
    assert parse_properties(text) == {"accessKey": "AKIA", "secretKey": "s", "profile": "p"}


def test_key_without_value() -> None:
    assert parse_properties("empty\nalso=") == {"empty": "", "also": ""}


def test_later_entries_win() -> None:
    assert parse_properties("k=1\nk=2") == {"k": "2"}


@pytest.mark.parametrize("bad", ["key=\\u12", "key=\\uZZZZ"])
def test_malformed_unicode_escape(bad: str) -> None:
    with pytest.raises(ValueError, match="Malformed"):
        parse_properties(bad)
