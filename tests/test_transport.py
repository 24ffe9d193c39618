import socket

import pytest

from mtproto.mode import NotMultipleError, Variant, new_mode
from mtproto.transport import (
    ErrorCode,
    TCPConnConfig,
    check_msg_size,
    is_packet_encrypted,
    new_tcp,
)


@pytest.fixture
def server():
    srv = socket.create_server(("127.0.0.1", 0))
    yield srv
    srv.close()


def _connect(server, timeout=2.0):
    port = server.getsockname()[1]
    conn = new_tcp(TCPConnConfig(host=f"127.0.0.1:{port}", timeout=timeout))
    peer, _ = server.accept()
    return conn, peer


def test_write_and_read(server):
    conn, peer = _connect(server)
    with conn, peer:
        assert conn.write(b"abc") == 3
        assert peer.recv(3) == b"abc"
        peer.sendall(b"xyz")
        assert conn.read(3) == b"xyz"


def test_read_end_of_stream(server):
    conn, peer = _connect(server)
    with conn:
        peer.close()
        assert conn.read(4) == b""


def test_read_timeout(server):
    conn, peer = _connect(server, timeout=0.1)
    with conn, peer:
        with pytest.raises(TimeoutError, match="reconnect"):
            conn.read(4)


def test_read_after_close(server):
    conn, peer = _connect(server)
    with peer:
        conn.close()
        with pytest.raises(ConnectionAbortedError):
            conn.read(4)


def test_intermediate_mode_over_tcp(server):
    conn, peer = _connect(server)
    with conn, peer:
        mode = new_mode(Variant.INTERMEDIATE, conn)
        mode.write_msg(b"test message")
        expected = bytes(
            [0xEE, 0xEE, 0xEE, 0xEE, 0x0C, 0x00, 0x00, 0x00]
        ) + b"test message"
        received = b""
        while len(received) < len(expected):
            received += peer.recv(64)
        assert received == expected


def test_missing_port():
    with pytest.raises(ConnectionError, match="resolving tcp"):
        new_tcp(TCPConnConfig(host="localhost"))


def test_dial_refused():
    probe = socket.create_server(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(ConnectionError, match="dialing tcp"):
        new_tcp(TCPConnConfig(host=f"127.0.0.1:{port}"))


def test_error_code():
    err = ErrorCode(-404)
    assert str(err) == "code -404"
    assert err.code == -404
    assert int(err) == -404


def test_is_packet_encrypted():
    assert is_packet_encrypted(b"\x00" * 4) is False
    assert is_packet_encrypted(b"\x00" * 8 + b"rest") is False
    assert is_packet_encrypted(b"\x01" + b"\x00" * 7) is True


def test_check_msg_size():
    assert check_msg_size(b"abcd") is None
    with pytest.raises(NotMultipleError) as info:
        check_msg_size(b"abcde")
    assert info.value.length == 5
    assert "(got 5)" in str(info.value)