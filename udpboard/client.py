"""Interactive UDP client for the message board."""

from __future__ import annotations

import argparse
import re
import socket
import sys
from typing import TextIO

from udpboard.protocol import (
    BUFFER_SIZE,
    CONNECT,
    DEFAULT_HOST,
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
    SIZE_MESSAGE,
    SIZE_USER,
    format_request,
    strip_newline,
)

# Size of the line buffer used for menu choices and counts.
_CHOICE_SIZE = 7

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _decode(datagram: bytes) -> str:
    return datagram.decode("utf-8", errors="replace")


class BoardClient:
    """Talks to a board server over UDP."""

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        host: str = DEFAULT_HOST,
        timeout: float | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self.server: tuple[str, int] = (host, port)
        self._output = output_stream
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.settimeout(timeout)

    def _write(self, text: str) -> None:
        stream = self._output if self._output is not None else sys.stdout
        stream.write(text)
        stream.flush()

    def _log(self, text: str) -> None:
        self._write(f"{text}\n")

    def _receive(self) -> str:
        datagram, _ = self._sock.recvfrom(BUFFER_SIZE)
        return _decode(datagram)

    def send_raw(self, text: str) -> None:
        """Send text to the server as one datagram, unchanged."""
        self._sock.sendto(text.encode("utf-8"), self.server)
        self._log(f"Message sent to server : {text}")

    def send_request(self, key: str, user: str, password: str, message: str) -> str:
        """Send a four-field request and return the text that went out.

        Raises MessageTooLongError when the request does not fit.
        """
        request = format_request(key, user, password, message)
        self.send_raw(request)
        return request

    def receive_until_end(self) -> list[str]:
        """Collect and echo server datagrams up to the end marker."""
        chunks: list[str] = []
        while True:
            chunk = self._receive()
            if chunk == END_OF_TRANSMISSION:
                return chunks
            self._write(chunk)
            chunks.append(chunk)

    def register(self, pseudo: str) -> bool:
        """Ask whether the pseudo is free; False when it is already taken."""
        self.send_raw(f"{REGISTER}{SEPARATOR}{pseudo}")
        reply = self._receive()
        self._log(f"Message recv from server : {reply}")
        return reply != pseudo

    def connect(self, pseudo: str, password: str) -> bool:
        """Check the credentials with the server."""
        self.send_raw(f"{CONNECT}{SEPARATOR}{pseudo}{SEPARATOR}{password}")
        reply = self._receive()
        self._log(f"Message recv from server : {reply}")
        return reply == pseudo

    def close(self) -> None:
        """Release the socket."""
        self._sock.close()

    def __enter__(self) -> BoardClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class _InputEnded(Exception):
    """The user's input stream has no more lines."""


class _Console:
    def __init__(self, input_stream: TextIO, output_stream: TextIO) -> None:
        self._input = input_stream
        self._output = output_stream

    def say(self, text: str, end: str = "\n") -> None:
        self._output.write(text + end)
        self._output.flush()

    def line(self, size: int) -> str:
        """Read one line, keeping at most size - 1 characters of it."""
        text = self._input.readline()
        if not text:
            raise _InputEnded
        return text[: size - 1]

    def field(self, size: int) -> str:
        return strip_newline(self.line(size))

    def choice(self, previous: int) -> int:
        match = _LEADING_INT.match(self.line(_CHOICE_SIZE))
        return int(match.group(1)) if match else previous

    def pseudo(self) -> str:
        self.say("Entrez votre pseudo : ", end="")
        return self.field(SIZE_USER)

    def password(self) -> str:
        self.say("Entrez votre mot de passe: ", end="")
        return self.field(SIZE_USER)

    def menu(self) -> None:
        self.say("\nQue souhaitez-vous faire?")
        self.say("1. Lire")
        self.say("2. Publier")
        self.say("3. Modifier")
        self.say("4. Supprimer")
        self.say("0. Quitter")
        self.say("Choix : ", end="")


def _log_in(client: BoardClient, console: _Console) -> tuple[str, str]:
    console.say("1. Premiere connextion ? ")
    console.say("2. Se connecter ? ")
    console.say("Choix : ", end="")
    operation = console.choice(0)

    if operation == 1:
        pseudo = console.pseudo()
        while not client.register(pseudo):
            console.say("Pseudo deja pris; choisi un autre")
            pseudo = console.pseudo()
        return pseudo, console.password()
    if operation == 2:
        pseudo, secret = console.pseudo(), console.password()
        while not client.connect(pseudo, secret):
            console.say("Pseudo ou mot de passe incorrect")
            pseudo, secret = console.pseudo(), console.password()
        return pseudo, secret
    return "", ""


def _read(client: BoardClient, console: _Console, operation: int) -> None:
    console.say("\nQue souhaitez-vous?")
    console.say("1. Acceder aux messages de tous les utilisateurs")
    console.say("0. Acceder aux messages d'un utilisateur particulier")
    console.say("Choix : ", end="")
    operation = console.choice(operation)

    if operation:
        console.say(
            "Entrez 1 si vous voulez acceder a tous les messages et 0 sinon : ", end=""
        )
        operation = console.choice(operation)
        if operation:
            client.send_request(PULL, "", EMPTY_FIELD, EMPTY_FIELD)
        else:
            console.say("Entrez le nombre de message que vous voulez afficher : ", end="")
            client.send_request(PULL, "", EMPTY_FIELD, console.line(_CHOICE_SIZE))
    else:
        console.say("Entrez le pseudo de l'utilisateurs : ", end="")
        target = console.field(SIZE_USER)
        console.say(
            "Entrez 1 si vous voulez acceder a tous les messages et 0 sinon : ", end=""
        )
        operation = console.choice(operation)
        if operation == 1:
            client.send_request(PULL, target, "", EMPTY_FIELD)
        else:
            console.say("Entrez le nombre de message que vous voulez afficher : ", end="")
            client.send_request(PULL, target, "", console.line(_CHOICE_SIZE))
    client.receive_until_end()


def _modify(client: BoardClient, console: _Console, pseudo: str) -> None:
    client.send_request(MODIFY, pseudo, "", "")
    client.receive_until_end()
    console.say("\nChoisissez l'ID du message que vous voulez modifier : ", end="")
    chosen = console.field(_CHOICE_SIZE)
    console.say("\nEntrez le nouveau message : ", end="")
    new_text = console.field(BUFFER_SIZE)
    client.send_request(f"{chosen}{SEPARATOR}{new_text}", "", "", "")
    client.receive_until_end()


def _delete(client: BoardClient, console: _Console, pseudo: str, operation: int) -> None:
    client.send_request(DELETE, pseudo, "", "")
    client.receive_until_end()
    console.say("\nChoisissez l'ID du message que vous voulez supprimer : ", end="")
    chosen = console.choice(operation)
    client.send_request(str(chosen), "", "", "")
    client.receive_until_end()


def run_session(
    client: BoardClient,
    input_stream: TextIO | None = None,
    output_stream: TextIO | None = None,
) -> None:
    """Drive the interactive menu until the user quits or input runs out.

    Leaving always tells the server that this client has quit.
    """
    console = _Console(
        input_stream if input_stream is not None else sys.stdin,
        output_stream if output_stream is not None else sys.stdout,
    )
    try:
        pseudo, secret = _log_in(client, console)
        operation = 0
        while True:
            console.menu()
            operation = console.choice(operation)
            if operation == 2:
                console.say("\nEntrez le message a publier : ", end="")
                text = console.line(SIZE_MESSAGE)
                client.send_request(PUSH, pseudo, secret, text)
            elif operation == 1:
                _read(client, console, operation)
            elif operation == 3:
                _modify(client, console, pseudo)
            elif operation == 4:
                _delete(client, console, pseudo, operation)
            elif operation == 0:
                break
    except _InputEnded:
        pass
    client.send_raw(QUIT_COMMAND)


def main(argv: list[str] | None = None) -> int:
    """Run the interactive board client from the command line."""
    parser = argparse.ArgumentParser(description="UDP message board client")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        client = BoardClient(port=args.port)
    except OSError as error:
        print(f"Socket creation failed: {error}", file=sys.stderr)
        return 1
    with client:
        print("*** UDP client ***")
        print(" Creating new socket")
        print(f"   Socket {client._sock.fileno()} opened")
        print(f"Trying to send data on port {args.port}...\n")
        try:
            run_session(client)
        except KeyboardInterrupt:
            pass
        except OSError as error:
            print(f"Recvfrom failed : {error}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())