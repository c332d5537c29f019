"""In-memory message board kept newest first."""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass

from udpboard.protocol import strip_newline


@dataclass
class Message:
    """A published message and the credentials of its author."""

    id: int
    pseudo: str
    password: str
    text: str


class MessageBoard:
    """Messages stacked so that the most recent one comes first."""

    def __init__(self) -> None:
        self._messages: list[Message] = []  # oldest first internally
        self._ids = itertools.count()

    def __iter__(self) -> Iterator[Message]:
        return reversed(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def push(self, pseudo: str, password: str, text: str) -> Message:
        """Store a new message on top with the next unique id."""
        message = Message(next(self._ids), pseudo, password, text)
        self._messages.append(message)
        return message

    def has_user(self, pseudo: str) -> bool:
        """Whether any stored message was written under this pseudo."""
        return any(message.pseudo == pseudo for message in self)

    def authenticate(self, pseudo: str, password: str) -> bool:
        """Whether a stored message carries this pseudo and password."""
        password = strip_newline(password)
        return any(
            message.pseudo == pseudo and message.password == password
            for message in self
        )

    def latest(self, limit: int | None = None) -> list[Message]:
        """The newest messages, all of them when limit is None."""
        messages = list(self)
        if limit is None:
            return messages
        return messages[: max(limit, 0)]

    def from_user(self, pseudo: str, limit: int | None = None) -> list[Message]:
        """Messages from the pseudo's most recent one downwards.

        Listing starts at that message and continues through everything
        older on the board. Raises KeyError if the pseudo is unknown.
        """
        messages = list(self)
        for start, message in enumerate(messages):
            if message.pseudo == pseudo:
                tail = messages[start:]
                return tail if limit is None else tail[: max(limit, 0)]
        raise KeyError(pseudo)

    def messages_of(self, pseudo: str) -> list[Message]:
        """Every message written under the pseudo, newest first."""
        return [message for message in self if message.pseudo == pseudo]

    def _find(self, message_id: int) -> Message:
        for message in self._messages:
            if message.id == message_id:
                return message
        raise KeyError(message_id)

    def modify(self, message_id: int, text: str) -> Message:
        """Replace a message's text. Raises KeyError if the id is unknown."""
        message = self._find(message_id)
        message.text = text
        return message

    def delete(self, message_id: int) -> Message:
        """Remove a message. Raises KeyError if the id is unknown."""
        message = self._find(message_id)
        self._messages.remove(message)
        return message