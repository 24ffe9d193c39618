"""TCP connection and transport-level helpers."""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass

from .mode import NotMultipleError
from .tl.cursor import DOUBLE_LEN, WORD_LEN


@dataclass(frozen=True)
class TCPConnConfig:
    """Where to connect and how long a read may wait (0 waits forever)."""

    host: str
    timeout: float = 0.0


def _split_host(host: str) -> tuple[str, int]:
    name, sep, port = host.rpartition(":")
    if not sep or not name:
        raise ValueError(f"address {host}: missing port in address")
    if name.startswith("[") and name.endswith("]"):
        name = name[1:-1]
    try:
        return name, int(port)
    except ValueError:
        raise ValueError(f"address {host}: invalid port") from None


class TCPConnection:
    """A byte stream over TCP with an optional read timeout."""

    def __init__(self, sock: socket.socket, timeout: float = 0.0) -> None:
        self._sock = sock
        self.timeout = timeout
        self._closed = False

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of stream."""
        if self._closed:
            raise ConnectionAbortedError("connection closed")
        self._sock.settimeout(self.timeout if self.timeout > 0 else None)
        try:
            return self._sock.recv(size)
        except TimeoutError as exc:
            raise TimeoutError(f"required to reconnect!: {exc}") from exc
        except OSError as exc:
            if self._closed:
                raise ConnectionAbortedError("connection closed") from exc
            raise ConnectionError(f"unexpected error: {exc}") from exc

    def write(self, data: bytes) -> int:
        """Send all of ``data`` and return its length."""
        if self._closed:
            raise ConnectionAbortedError("connection closed")
        data = bytes(data)
        self._sock.sendall(data)
        return len(data)

    def close(self) -> None:
        self._closed = True
        self._sock.close()

    def __enter__(self) -> TCPConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_tcp(config: TCPConnConfig) -> TCPConnection:
    """Open a TCP connection to ``config.host`` ("host:port")."""
    try:
        name, port = _split_host(config.host)
        socket.getaddrinfo(name, port, type=socket.SOCK_STREAM)
    except (ValueError, OSError) as exc:
        raise ConnectionError(f"resolving tcp: {exc}") from exc
    try:
        sock = socket.create_connection((name, port))
    except OSError as exc:
        raise ConnectionError(f"dialing tcp: {exc}") from exc
    return TCPConnection(sock, config.timeout)


class ErrorCode(Exception):
    """The server answered with a bare error code instead of a message."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"code {code}")

    def __int__(self) -> int:
        return self.code


def is_packet_encrypted(data: bytes) -> bool:
    """Tell whether a packet starts with a non-zero auth key hash."""
    if len(data) < DOUBLE_LEN:
        return False
    return struct.unpack("<Q", bytes(data[:DOUBLE_LEN]))[0] != 0


def check_msg_size(msg: bytes) -> None:
    """Raise NotMultipleError unless the length is a multiple of the word size."""
    if len(msg) % WORD_LEN:
        raise NotMultipleError(len(msg))