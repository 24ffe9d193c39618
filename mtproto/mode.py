"""Transport modes: how message sizes are announced on a raw byte stream."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .tl.cursor import WORD_LEN

# A length of this many words or more is sent as this marker and three bytes.
_ABRIDGED_LONG_MARKER = 0x7F
_ABRIDGED_MAX_WORDS = 1 << 24


class Variant(enum.IntEnum):
    """Known transport modes."""

    ABRIDGED = 0
    INTERMEDIATE = 1
    PADDED_INTERMEDIATE = 2
    FULL = 3


class ModeError(Exception):
    """Failure while framing or reading framed messages."""


class ModeNotSupportedError(ModeError):
    """The requested or announced mode is not supported."""

    def __init__(self, message: str = "mode is not supported") -> None:
        super().__init__(message)


class AmbiguousModeAnnounceError(ModeError):
    """The announcement started like a known mode but did not match it."""

    def __init__(self) -> None:
        super().__init__("ambiguous mode announce, expected other byte sequence")


class NotMultipleError(ModeError):
    """The message length is not a multiple of the word size."""

    def __init__(self, length: int = 0) -> None:
        self.length = length
        msg = "size of message not multiple of 4"
        if length:
            msg += f" (got {length})"
        super().__init__(msg)


def _read(conn: Any, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early only at end of stream."""
    chunks = bytearray()
    while len(chunks) < size:
        chunk = conn.read(size - len(chunks))
        if not chunk:
            break
        chunks += chunk
    return bytes(chunks)


class Mode(ABC):
    """Frames whole messages on a byte stream that has ``read`` and ``write``."""

    ANNOUNCEMENT: ClassVar[bytes] = b""

    def __init__(self, conn: Any) -> None:
        self.conn = conn

    @abstractmethod
    def write_msg(self, msg: bytes) -> None:
        """Write one framed message."""

    @abstractmethod
    def read_msg(self) -> bytes:
        """Read one framed message; raise EOFError at end of stream."""


class Abridged(Mode):
    """One-byte length in words, or 0x7f followed by a three-byte length."""

    ANNOUNCEMENT = bytes([0xEF])

    def write_msg(self, msg: bytes) -> None:
        msg = bytes(msg)
        if len(msg) % WORD_LEN:
            raise NotMultipleError(len(msg))
        words = len(msg) // WORD_LEN
        if words < _ABRIDGED_LONG_MARKER:
            size = bytes([words])
        elif words < _ABRIDGED_MAX_WORDS:
            size = bytes([_ABRIDGED_LONG_MARKER]) + words.to_bytes(3, "little")
        else:
            raise ModeError(f"message too large: {len(msg)} bytes")
        self.conn.write(size)
        self.conn.write(msg)

    def read_msg(self) -> bytes:
        first = _read(self.conn, 1)
        if not first:
            raise EOFError("connection closed")
        if first[0] == _ABRIDGED_LONG_MARKER:
            raw = _read(self.conn, 3)
            if len(raw) != 3:
                raise ModeError(f"need to read 3 bytes, got {len(raw)}")
            size = int.from_bytes(raw, "little")
        else:
            size = first[0]
        size *= WORD_LEN
        msg = _read(self.conn, size)
        if len(msg) != size:
            raise ModeError(f"expected to read {size} bytes, got {len(msg)}")
        return msg


class Intermediate(Mode):
    """Four-byte little-endian length in bytes before each message."""

    ANNOUNCEMENT = bytes([0xEE, 0xEE, 0xEE, 0xEE])

    def write_msg(self, msg: bytes) -> None:
        msg = bytes(msg)
        self.conn.write(len(msg).to_bytes(WORD_LEN, "little"))
        self.conn.write(msg)

    def read_msg(self) -> bytes:
        raw = _read(self.conn, WORD_LEN)
        if not raw:
            raise EOFError("connection closed")
        if len(raw) != WORD_LEN:
            raise ModeError(
                f"size is not length of int32, expected 4 bytes, got {len(raw)}"
            )
        size = int.from_bytes(raw, "little")
        msg = _read(self.conn, size)
        if len(msg) != size:
            raise ModeError(f"expected to read {size} bytes, got {len(msg)}")
        return msg


def _init_mode(variant: Any, conn: Any) -> Mode:
    try:
        variant = Variant(variant)
    except ValueError:
        raise ModeNotSupportedError() from None
    if variant is Variant.ABRIDGED:
        return Abridged(conn)
    if variant is Variant.INTERMEDIATE:
        return Intermediate(conn)
    raise ModeNotSupportedError(f"mode {variant.name} is not supported yet")


def new_mode(variant: Any, conn: Any) -> Mode:
    """Create a mode on ``conn`` and send its announcement."""
    if conn is None:
        raise ModeError("connection is None")
    mode = _init_mode(variant, conn)
    try:
        conn.write(mode.ANNOUNCEMENT)
    except OSError as exc:
        raise ModeError(f"can't setup connection: {exc}") from exc
    return mode


def detect(conn: Any) -> Mode:
    """Pick the mode from the announcement the other side sent first."""
    if conn is None:
        raise ModeError("connection is None")
    first = _read(conn, 1)
    if not first:
        raise EOFError("connection closed")

    if first == Abridged.ANNOUNCEMENT[:1]:
        return _init_mode(Variant.ABRIDGED, conn)
    if first == Intermediate.ANNOUNCEMENT[:1]:
        announce = first + _read(conn, len(Intermediate.ANNOUNCEMENT) - 1)
        if announce != Intermediate.ANNOUNCEMENT:
            raise AmbiguousModeAnnounceError()
        return _init_mode(Variant.INTERMEDIATE, conn)
    raise ModeNotSupportedError()


def get_variant(mode: Mode) -> Variant:
    """Return the variant of a built-in mode."""
    if isinstance(mode, Abridged):
        return Variant.ABRIDGED
    if isinstance(mode, Intermediate):
        return Variant.INTERMEDIATE
    raise ModeError("using custom mode, can't detect")