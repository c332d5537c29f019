import io
import socket
import threading

import pytest

from udpboard.client import BoardClient, run_session
from udpboard.protocol import MessageTooLongError
from udpboard.server import BoardServer


@pytest.fixture
def peer():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2)
    yield sock
    sock.close()


@pytest.fixture
def client(peer):
    out = io.StringIO()
    with BoardClient(
        port=peer.getsockname()[1], host="127.0.0.1", timeout=2, output_stream=out
    ) as board_client:
        yield board_client


@pytest.fixture
def server():
    board_server = BoardServer(
        port=0,
        host="127.0.0.1",
        input_stream=io.StringIO("0\n"),
        output_stream=io.StringIO(),
    )
    thread = threading.Thread(target=board_server.serve_forever, daemon=True)
    thread.start()
    yield board_server, thread
    for _ in range(5):
        if not thread.is_alive():
            break
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as stopper:
            stopper.sendto(b"SERVER:QUIT", board_server.address)
        thread.join(0.5)
    board_server.close()


def _reply(peer, texts):
    datagram, address = peer.recvfrom(1024)
    for text in texts:
        peer.sendto(text.encode("utf-8"), address)
    return datagram


def _answer_in_background(peer, texts):
    received = []
    thread = threading.Thread(
        target=lambda: received.append(_reply(peer, texts)), daemon=True
    )
    thread.start()
    return thread, received


def _session(board_server, script):
    out = io.StringIO()
    with BoardClient(
        port=board_server.address[1], host="127.0.0.1", timeout=5, output_stream=out
    ) as board_client:
        run_session(board_client, io.StringIO(script), out)
    return out.getvalue()


def test_send_request_wire_format(client, peer):
    password = "password"
    sent = client.send_request("PUSH", "alice", password, "hello")
    datagram, _ = peer.recvfrom(1024)
    assert datagram == b"PUSH;alice;password;hello"
    assert sent == "PUSH;alice;password;hello"


def test_send_request_too_long_raises(client, peer):
    with pytest.raises(MessageTooLongError):
        client.send_request("PUSH", "alice", "", "x" * 1024)
    peer.settimeout(0.2)
    with pytest.raises(TimeoutError):
        peer.recvfrom(1024)


def test_send_raw_quit(client, peer):
    client.send_raw("SERVER:QUIT")
    datagram = _reply(peer, ["bye", "END_OF_TRANSMISSION"])
    assert datagram == b"SERVER:QUIT"
    assert client.receive_until_end() == ["bye"]


def test_receive_until_end_collects_chunks(client, peer):
    client.send_raw("PULL;;vide;vide")
    _reply(peer, ["first", "second", "END_OF_TRANSMISSION"])
    assert client.receive_until_end() == ["first", "second"]


def test_register_accepted(client, peer):
    thread, received = _answer_in_background(peer, ["NULL"])
    accepted = client.register("alice")
    thread.join(5)
    assert accepted is True
    assert received == [b"REGISTER;alice"]


def test_register_taken(client, peer):
    thread, received = _answer_in_background(peer, ["alice"])
    accepted = client.register("alice")
    thread.join(5)
    assert accepted is False
    assert received == [b"REGISTER;alice"]


def test_connect_wire_and_success(client, peer):
    password = "password"
    thread, received = _answer_in_background(peer, ["alice"])
    connected = client.connect("alice", password)
    thread.join(5)
    assert connected is True
    assert received == [b"CONNECT;alice;password"]


def test_connect_rejected(client, peer):
    password = "password"
    thread, received = _answer_in_background(peer, ["NULL"])
    connected = client.connect("alice", password)
    thread.join(5)
    assert connected is False
    assert received == [b"CONNECT;alice;password"]


def test_session_sends_quit_when_input_ends(client, peer):
    run_session(client, io.StringIO(""), io.StringIO())
    datagram = _reply(peer, ["done", "END_OF_TRANSMISSION"])
    assert datagram == b"SERVER:QUIT"
    assert client.receive_until_end() == ["done"]


def test_session_publish_and_read_all(server):
    board_server, thread = server
    output = _session(
        board_server, "1\nalice\npassword\n2\nhello\n1\n1\n1\n0\n"
    )
    thread.join(5)
    assert not thread.is_alive()
    assert "All messages will be read\n\n" in output
    assert "@alice : hello\n" in output
    assert [message.text for message in board_server.board] == ["hello\n"]


def test_session_delete_message(server):
    board_server, thread = server
    output = _session(
        board_server, "1\nalice\npassword\n2\nfirst\n2\nsecond\n4\n0\n0\n"
    )
    thread.join(5)
    assert "Le message a ete supprime avec succes" in output
    assert [message.text for message in board_server.board] == ["second\n"]


def test_session_modify_message(server):
    board_server, thread = server
    output = _session(
        board_server, "1\nalice\npassword\n2\nfirst\n3\n0\nchanged\n0\n"
    )
    thread.join(5)
    assert "Le message a ete modifie avec succes" in output
    assert [message.text for message in board_server.board] == ["changed"]


def test_session_read_unknown_user(server):
    board_server, thread = server
    output = _session(board_server, "1\nalice\npassword\n1\n0\nbob\n1\n0\n")
    thread.join(5)
    assert "Pseudo non trouve" in output
    assert len(board_server.board) == 0