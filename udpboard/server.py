"""UDP message board server."""

from __future__ import annotations

import argparse
import re
import socket
import sys
from collections.abc import Callable
from typing import TextIO

from udpboard.protocol import (
    BUFFER_SIZE,
    CONNECT,
    DEFAULT_PORT,
    DELETE,
    EMPTY_FIELD,
    END_OF_TRANSMISSION,
    MODIFY,
    NO_MATCH,
    PULL,
    PUSH,
    QUIT_COMMAND,
    REGISTER,
    SEPARATOR,
    format_entry,
    parse_count,
)
from udpboard.store import Message, MessageBoard

MODIFIED = "Le message a ete modifie avec succes"
DELETED = "Le message a ete supprime avec succes"
NOT_FOUND_ID = "Aucun message trouve avec l'id specifie"
NOT_FOUND_PSEUDO = "Pseudo non trouve"
ALL_MESSAGES = "All messages will be read\n\n"

# A message id sent for deletion is read from a datagram this short.
_DELETE_ID_SIZE = 3

_OPERATION = re.compile(r"\s*([+-]?\d+)")

Address = tuple[str, int]
_Pending = Callable[[bytes], list[str]]


def _decode(datagram: bytes | str) -> str:
    if isinstance(datagram, str):
        return datagram
    return datagram.decode("utf-8", errors="replace")


def _tokens(text: str) -> list[str]:
    """Split on the separator, dropping empty fields between separators."""
    return [token for token in text.split(SEPARATOR) if token]


class BoardServer:
    """Serves a message board to clients over UDP."""

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        host: str = "",
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self.board = MessageBoard()
        self._input = input_stream
        self._output = output_stream
        self._clients = 0
        self._pending: _Pending | None = None
        self._stopped = False
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind((host, port))
        except OSError:
            self._sock.close()
            raise
        self.address: Address = self._sock.getsockname()
        self._handlers: dict[str, Callable[[list[str]], list[str]]] = {
            REGISTER: self._register,
            CONNECT: self._connect,
            PUSH: self._push,
            PULL: self._pull,
            MODIFY: self._modify,
            DELETE: self._delete,
        }

    def _log(self, text: str) -> None:
        print(text, file=self._output if self._output is not None else sys.stdout)

    def _send(self, text: str, address: Address) -> None:
        self._sock.sendto(text.encode("utf-8"), address)
        self._log(f"Message sent to client : {text}")

    def handle(self, datagram: bytes | str, address: Address) -> list[str]:
        """Process one datagram, send the replies to address and return them.

        After a MODIFY or DELETE listing, the next datagram handled is
        taken as the answer naming the message to change.
        """
        raw = datagram.encode("utf-8") if isinstance(datagram, str) else datagram
        quitting = False
        if self._pending is not None:
            action, self._pending = self._pending, None
            replies = action(raw)
        else:
            text = _decode(raw)
            self._log(f"Received from :{address[0]}:{address[1]} ")
            self._log(f"Message : {text}")
            replies = self._dispatch(text)
            quitting = text.split(SEPARATOR, 1)[0] == QUIT_COMMAND
        for reply in replies:
            self._send(reply, address)
        if quitting:
            self._on_quit()
        return replies

    def _dispatch(self, text: str) -> list[str]:
        tokens = _tokens(text)
        if not tokens:
            return []
        handler = self._handlers.get(tokens[0])
        return handler(tokens[1:]) if handler is not None else []

    @staticmethod
    def _arg(args: list[str], index: int) -> str:
        return args[index] if index < len(args) else ""

    def _register(self, args: list[str]) -> list[str]:
        pseudo = self._arg(args, 0)
        if self.board.has_user(pseudo):
            return [pseudo]
        self._clients += 1
        return [NO_MATCH]

    def _connect(self, args: list[str]) -> list[str]:
        pseudo, password = self._arg(args, 0), self._arg(args, 1)
        if self.board.has_user(pseudo):
            self._log("Pseudo")
        if self.board.authenticate(pseudo, password):
            self._clients += 1
            return [pseudo]
        return [NO_MATCH]

    def _push(self, args: list[str]) -> list[str]:
        self.board.push(self._arg(args, 0), self._arg(args, 1), self._arg(args, 2))
        self._log("Message stocke")
        return []

    @staticmethod
    def _listing(
        count: str, select: Callable[[int | None], list[Message]]
    ) -> list[str]:
        if count == EMPTY_FIELD:
            header, messages = ALL_MESSAGES, select(None)
        else:
            limit = parse_count(count)
            header, messages = f"{limit} messages will be read\n\n", select(limit)
        entries = [format_entry(message.pseudo, message.text) for message in messages]
        return [header, *entries, END_OF_TRANSMISSION]

    def _pull(self, args: list[str]) -> list[str]:
        target, count = self._arg(args, 0), self._arg(args, 1)
        if target == EMPTY_FIELD:
            return self._listing(count, self.board.latest)
        if not self.board.has_user(target):
            return [NOT_FOUND_PSEUDO, END_OF_TRANSMISSION]
        return self._listing(count, lambda limit: self.board.from_user(target, limit))

    def _owned(self, pseudo: str) -> list[str]:
        listing = [
            f"{message.id} : {message.text}"
            for message in self.board.messages_of(pseudo)
        ]
        return [*listing, END_OF_TRANSMISSION]

    def _missing(self) -> list[str]:
        return [NOT_FOUND_ID] if len(self.board) else []

    def _modify(self, args: list[str]) -> list[str]:
        self._pending = self._finish_modify
        return self._owned(self._arg(args, 0))

    def _finish_modify(self, raw: bytes) -> list[str]:
        tokens = _tokens(_decode(raw[:BUFFER_SIZE]))
        message_id = parse_count(self._arg(tokens, 0))
        try:
            self.board.modify(message_id, self._arg(tokens, 1))
        except KeyError:
            return [*self._missing(), END_OF_TRANSMISSION]
        return [MODIFIED, END_OF_TRANSMISSION]

    def _delete(self, args: list[str]) -> list[str]:
        self._pending = self._finish_delete
        return self._owned(self._arg(args, 0))

    def _finish_delete(self, raw: bytes) -> list[str]:
        message_id = parse_count(_decode(raw[:_DELETE_ID_SIZE]))
        try:
            self.board.delete(message_id)
        except KeyError:
            return [*self._missing(), END_OF_TRANSMISSION]
        return [DELETED, END_OF_TRANSMISSION]

    def _read_operation(self) -> int | None:
        stream = self._input if self._input is not None else sys.stdin
        line = stream.readline()
        if not line:
            return None
        match = _OPERATION.match(line)
        return int(match.group(1)) if match else 1

    def _on_quit(self) -> None:
        if self._clients > 0:
            self._log(f"\nClient number {self._clients} has quit.")
            self._clients -= 1
        if self._clients == 0:
            self._log(
                "Aucun client n'est connecte au serveur.\nEn attente de connexion..."
            )
            self._log(
                "Pressez enter pour rester en attente ou 0 pour arreter le serveur..."
            )
            operation = self._read_operation()
            if operation is None or operation == 0:
                self._stopped = True

    def serve_forever(self) -> None:
        """Handle datagrams until the operator stops the server."""
        self._stopped = False
        while not self._stopped:
            datagram, address = self._sock.recvfrom(BUFFER_SIZE)
            self.handle(datagram, address)

    def close(self) -> None:
        """Release the socket."""
        self._sock.close()

    def __enter__(self) -> BoardServer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    """Run the board server from the command line."""
    parser = argparse.ArgumentParser(description="UDP message board server")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        server = BoardServer(port=args.port)
    except OSError as error:
        print(f"Bind failed: {error}", file=sys.stderr)
        return 1
    with server:
        print("*** UDP server ***")
        print(" Creating new socket")
        print(f"   Socket {server._sock.fileno()} opened")
        print(f"Server listening on port {server.address[1]}...\n")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())