import socket

import pytest

from packrpc.errors import RpcError
from packrpc.tcp import client_socket, recv_buffer, send_buffer, server_socket


def _read_exactly(sock, size):
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        assert chunk
        data += chunk
    return data


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_wire_format_is_big_endian_length_prefix(pair):
    a, b = pair
    send_buffer(a, b"abc")
    raw = _read_exactly(b, 7)
    assert raw == b"\x00\x00\x00\x03abc"
    b.sendall(b"\x00\x00\x00\x05hello")
    assert recv_buffer(a) == b"hello"


def test_round_trip(pair):
    a, b = pair
    payload = bytes(range(256)) * 10
    send_buffer(a, payload)
    assert recv_buffer(b) == payload


def test_messages_keep_their_order_and_boundaries(pair):
    a, b = pair
    for message in (b"first", b"second", b"third"):
        send_buffer(a, message)
    assert [recv_buffer(b) for _ in range(3)] == [b"first", b"second", b"third"]


def test_recv_after_peer_close_is_empty(pair):
    a, b = pair
    a.close()
    assert recv_buffer(b) == b""


def test_recv_with_truncated_message_is_empty(pair):
    a, b = pair
    a.sendall(b"\x00\x00\x00\x10abc")
    a.close()
    assert recv_buffer(b) == b""


def test_client_socket_rejects_non_ipv4_host():
    with pytest.raises(RpcError, match="inet_pton failed"):
        client_socket("not-an-address", 5555)


def test_client_socket_connect_refused():
    listener = server_socket(0)
    port = listener.getsockname()[1]
    listener.close()
    with pytest.raises(RpcError, match="connect\\(\\) failed"):
        client_socket("127.0.0.1", port)


def test_server_and_client_sockets_exchange_messages():
    listener = server_socket(0)
    try:
        port = listener.getsockname()[1]
        client = client_socket("127.0.0.1", port)
        conn, _ = listener.accept()
        try:
            send_buffer(client, b"ping")
            assert recv_buffer(conn) == b"ping"
            send_buffer(conn, b"pong")
            assert recv_buffer(client) == b"pong"
        finally:
            conn.close()
            client.close()
    finally:
        listener.close()


def test_server_socket_on_busy_port_fails():
    listener = server_socket(0)
    try:
        port = listener.getsockname()[1]
        with pytest.raises(RpcError, match="bind\\(\\) failed"):
            server_socket(port)
    finally:
        listener.close()