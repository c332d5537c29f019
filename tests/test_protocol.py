import pytest

from udpboard.protocol import (
    BUFFER_SIZE,
    END_OF_TRANSMISSION,
    MessageTooLongError,
    SEPARATOR,
    format_entry,
    format_request,
    parse_count,
    strip_newline,
)


def test_format_request_joins_fields():
    assert format_request("PUSH", "bob", "password", "hello") == "PUSH;bob;password;hello"


def test_format_request_round_trip_split():
    fields = ("PULL", "alice", "vide", "3")
    assert tuple(format_request(*fields).split(SEPARATOR)) == fields


def test_format_request_empty_fields():
    assert format_request("MODIFY", "carol", "", "").split(SEPARATOR) == ["MODIFY", "carol", "", ""]


def test_format_request_at_limit_is_rejected():
    filler = "x" * (BUFFER_SIZE - len("PUSH;u;p;"))
    with pytest.raises(MessageTooLongError):
        format_request("PUSH", "u", "p", filler)


def test_format_request_just_below_limit_is_accepted():
    filler = "x" * (BUFFER_SIZE - 1 - len("PUSH;u;p;"))
    assert len(format_request("PUSH", "u", "p", filler)) == BUFFER_SIZE - 1


def test_too_long_error_is_value_error():
    with pytest.raises(ValueError):
        format_request("PUSH", "u", "p", "y" * BUFFER_SIZE)


def test_format_entry():
    assert format_entry("alice", "hi") == "@alice : hi\n"


def test_format_entry_never_contains_end_marker_alone():
    entry = format_entry("bob", "text")
    assert entry.startswith("@bob") and entry.endswith("text\n")
    assert entry != END_OF_TRANSMISSION


@pytest.mark.parametrize(
    "raw, expected",
    [("abc\n", "abc"), ("abc", "abc"), ("a\nb\n", "a"), ("\n", ""), ("", "")],
)
def test_strip_newline(raw, expected):
    assert strip_newline(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("5\n", 5), ("  12abc", 12), ("abc", 0), ("", 0), ("-3", -3), ("+7", 7)],
)
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected