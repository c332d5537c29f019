# udpboard

udpboard is a small message board that runs over UDP. The server keeps every
post in memory, with the newest post first. The client is interactive. You
register or log in with a pseudo and a password, then read, publish, edit or
delete messages.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
udpboard-server [PORT]
```

The server listens for UDP on every interface. The default port is 8080. It
logs each datagram it receives and each reply it sends. When a client quits
and no connected clients remain, the server asks on its console whether to go
on. Press Enter to keep waiting for clients. Type `0`, or end the input, to
stop it. Ctrl+C also stops the server.

## Running the client

```
udpboard-client [PORT]
```

The client sends to `127.0.0.1` on the given port. The default port is 8080.

At start-up you choose one of two options:

1. First connection. You pick a pseudo. If the server already knows that
   pseudo, you are asked for another one. You then choose a password.
2. Log in with a pseudo and a password. You are asked again until the server
   accepts them.

Next comes the main menu:

- `1` Read. You choose between every user and one pseudo, then between all
  messages and only the first N.
- `2` Publish a message.
- `3` Modify a message. The server lists your messages with their IDs. You
  give an ID and the new text.
- `4` Delete a message, chosen by its ID from the same kind of list.
- `0` Quit.

When you quit, or when the input runs out, the client sends `SERVER:QUIT` to
the server.

## Wire format

Requests are plain text. Fields are separated by `;`, and the server ignores
empty fields:

```
REGISTER;<pseudo>                  -> "NULL" if free, else the pseudo
CONNECT;<pseudo>;<password>        -> the pseudo if accepted, else "NULL"
PUSH;<pseudo>;<password>;<text>    -> no reply
PULL;;vide;<count or vide>         -> newest messages of all users
PULL;<pseudo>;;<count or vide>     -> listing starting at that pseudo
MODIFY;<pseudo>;;                  -> "<id> : <text>" lines, then expects "<id>;<text>"
DELETE;<pseudo>;;                  -> "<id> : <text>" lines, then expects "<id>"
SERVER:QUIT
```

Each listing starts with a header line and has one `@pseudo : text` entry per
message. Every multi-part reply ends with a datagram that holds only
`END_OF_TRANSMISSION`. When you list by pseudo, the listing starts at that
pseudo's newest message. It then goes on through every older message on the
board, whoever wrote it. For a deletion the server reads the ID from the first
three characters of the follow-up datagram only.

`udpboard.protocol.format_request` joins the four fields. It raises
`MessageTooLongError` when the request would take 1024 bytes or more.

## Using it from Python

```python
from udpboard.store import MessageBoard

board = MessageBoard()
board.push("alice", "password", "hello")
for message in board.latest(10):
    print(message.id, message.pseudo, message.text)
```

`MessageBoard` also provides `has_user`, `authenticate`, `from_user`,
`messages_of`, `modify` and `delete`. `modify` and `delete` raise `KeyError`
for an unknown ID.

`udpboard.server.BoardServer` and `udpboard.client.BoardClient` each wrap a
UDP socket and are context managers. `BoardServer.handle` processes one
datagram and returns the replies it sent. `udpboard.client.run_session` runs
the interactive menu against a `BoardClient`, using any text streams you give
it.

## What it does not do

- Nothing is written to disk. Every message is lost when the server stops.
- There is no separate account list. Registering only checks that a pseudo is
  free. A pseudo and its password become known to the server only through the
  messages published under them. Until you publish, `CONNECT` will not accept
  your pseudo.
- Modify and delete requests are not checked against their author. Any ID
  sent after a listing is acted on.
- Nothing is encrypted, and the client has no timeouts or retries for lost
  datagrams.