"""Wire format shared by the message board client and server."""

from __future__ import annotations

import re

SIZE_MESSAGE = 100
SIZE_USER = 20
BUFFER_SIZE = 1024
DEFAULT_PORT = 8080
DEFAULT_HOST = "127.0.0.1"

SEPARATOR = ";"
END_OF_TRANSMISSION = "END_OF_TRANSMISSION"
QUIT_COMMAND = "SERVER:QUIT"
NO_MATCH = "NULL"
EMPTY_FIELD = "vide"

REGISTER = "REGISTER"
CONNECT = "CONNECT"
PUSH = "PUSH"
PULL = "PULL"
MODIFY = "MODIFY"
DELETE = "DELETE"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class MessageTooLongError(ValueError):
    """Raised when a request does not fit in one datagram buffer."""


def format_request(key: str, user: str, password: str, message: str) -> str:
    """Join the four request fields with the separator.

    Raises MessageTooLongError when the encoded request would not fit
    in ``BUFFER_SIZE`` bytes including its terminator.
    """
    request = SEPARATOR.join((key, user, password, message))
    if len(request.encode("utf-8")) >= BUFFER_SIZE:
        raise MessageTooLongError(
            f"request of {len(request.encode('utf-8'))} bytes exceeds "
            f"the {BUFFER_SIZE - 1}-byte limit"
        )
    return request


def format_entry(pseudo: str, text: str) -> str:
    """Render one stored message the way the server sends it."""
    return f"@{pseudo} : {text}\n"


def strip_newline(text: str) -> str:
    """Cut the text at its first newline, if any."""
    return text.split("\n", 1)[0]


def parse_count(text: str) -> int:
    """Read a leading integer the lenient way: junk or nothing gives 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0