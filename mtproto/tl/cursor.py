"""Low level reading and writing of TL primitive values."""

from __future__ import annotations

import io
import struct
from typing import Any, BinaryIO

from .errors import PartialWriteError, TLError

WORD_LEN = 4
LONG_LEN = WORD_LEN * 2
DOUBLE_LEN = WORD_LEN * 2
INT128_LEN = WORD_LEN * 4
INT256_LEN = WORD_LEN * 8

# First byte of a length prefix that announces a three-byte length.
LARGE_MESSAGE_MARKER = 0xFE

CRC_VECTOR = 0x1CB5C415
CRC_FALSE = 0xBC799737
CRC_TRUE = 0x997275B5
CRC_NULL = 0x56730BCC

BITS_IN_BYTE = 8

_MAX_LARGE_MESSAGE = 1 << 24


def _padding(length: int) -> int:
    rest = length % WORD_LEN
    return WORD_LEN - rest if rest else 0


class Encoder:
    """Writes TL primitives into a binary stream."""

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self.stream = stream if stream is not None else io.BytesIO()

    def _write(self, data: bytes) -> None:
        written = self.stream.write(data)
        if written is not None and written != len(data):
            raise PartialWriteError(written, len(data))

    def put_bool(self, v: bool) -> None:
        self.put_uint(CRC_TRUE if v else CRC_FALSE)

    def put_uint(self, v: int) -> None:
        if not 0 <= v < 1 << 32:
            raise ValueError(f"value out of uint32 range: {v}")
        self._write(struct.pack("<I", v))

    def put_crc(self, v: int) -> None:
        self.put_uint(v)

    def put_int(self, v: int) -> None:
        if not -(1 << 31) <= v < 1 << 31:
            raise ValueError(f"value out of int32 range: {v}")
        self._write(struct.pack("<i", v))

    def put_long(self, v: int) -> None:
        if not -(1 << 63) <= v < 1 << 63:
            raise ValueError(f"value out of int64 range: {v}")
        self._write(struct.pack("<q", v))

    def put_double(self, v: float) -> None:
        self._write(struct.pack("<d", v))

    def put_message(self, msg: bytes) -> None:
        msg = bytes(msg)
        if len(msg) < LARGE_MESSAGE_MARKER:
            header = bytes([len(msg)])
        else:
            if len(msg) > _MAX_LARGE_MESSAGE:
                raise TLError(
                    f"message entity too large: expect less than {_MAX_LARGE_MESSAGE}, got {len(msg)}"
                )
            header = bytes([LARGE_MESSAGE_MARKER]) + len(msg).to_bytes(4, "little")[:3]
        body = header + msg
        self._write(body + bytes(_padding(len(body))))

    def put_string(self, msg: str) -> None:
        self.put_message(msg.encode("utf-8"))

    def put_raw_bytes(self, b: bytes) -> None:
        self._write(bytes(b))


class Decoder:
    """Reads TL primitives from a fully buffered message."""

    def __init__(self, data: Any) -> None:
        if hasattr(data, "read"):
            data = data.read()
        self._data = bytes(data)
        self._pos = 0
        self.expected_types: list[Any] = []

    def expect_types_in_interface(self, *args: Any) -> None:
        """Set the types used, in order, to decode vectors met in place of objects."""
        self.expected_types = list(args)

    def _read(self, size: int) -> bytes:
        available = len(self._data) - self._pos
        if size > 0 and available <= 0:
            raise TLError("unexpected end of data")
        if available < size:
            raise TLError(f"buffer weren't fully read: want {size} bytes, got {available}")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def pop_long(self) -> int:
        return struct.unpack("<q", self._read(LONG_LEN))[0]

    def pop_double(self) -> float:
        return struct.unpack("<d", self._read(DOUBLE_LEN))[0]

    def pop_uint(self) -> int:
        return struct.unpack("<I", self._read(WORD_LEN))[0]

    def pop_raw_bytes(self, size: int) -> bytes:
        return self._read(size)

    def pop_bool(self) -> bool:
        crc = self.pop_uint()
        if crc == CRC_TRUE:
            return True
        if crc == CRC_FALSE:
            return False
        raise TLError(f"not a bool value, actually: 0x{crc:x}")

    def pop_null(self) -> None:
        crc = self.pop_uint()
        if crc != CRC_NULL:
            raise TLError(f"not a null value, actually: 0x{crc:x}")

    def pop_crc(self) -> int:
        return self.pop_uint()

    def pop_int(self) -> int:
        return struct.unpack("<i", self._read(WORD_LEN))[0]

    def get_rest_of_message(self) -> bytes:
        rest = self._data[self._pos:]
        self._pos = len(self._data)
        return rest

    def dump_without_read(self) -> bytes:
        return self._data[self._pos:]

    def pop_message(self) -> bytes:
        first = self._read(1)[0]
        if first != LARGE_MESSAGE_MARKER:
            size = first
            prefix_len = 1
        else:
            try:
                raw = self._read(WORD_LEN - 1)
            except TLError as exc:
                raise TLError(f"reading last {WORD_LEN - 1} bytes of message size: {exc}") from exc
            size = int.from_bytes(raw, "little")
            prefix_len = WORD_LEN

        try:
            body = self._read(size)
        except TLError as exc:
            raise TLError(f"reading message data with len of {size}: {exc}") from exc

        pad = _padding(prefix_len + size)
        if pad:
            try:
                void = self._read(pad)
            except TLError as exc:
                raise TLError(f"reading {pad} last void bytes: {exc}") from exc
            if any(void):
                raise TLError(f"some of void bytes doesn't equal zero: {void!r}")
        return body