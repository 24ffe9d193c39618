"""Exceptions raised while encoding and decoding TL data."""

from __future__ import annotations


class TLError(Exception):
    """Base class for every TL encoding or decoding failure."""


class RegisteredObjectNotFoundError(TLError):
    """A constructor code was read that no registered object answers to."""

    def __init__(self, crc: int, data: bytes = b"") -> None:
        self.crc = crc
        self.data = bytes(data)
        super().__init__(f"object with provided crc not registered: 0x{crc:08x}")


class MustParseSlicesExplicitlyError(TLError):
    """A vector was met where an object of unknown type was expected."""

    def __init__(self) -> None:
        super().__init__(
            "got vector CRC code when parsing unknown object: "
            "vectors can't be parsed as predicted objects"
        )


class PartialWriteError(TLError):
    """The underlying writer accepted fewer bytes than it was given."""

    def __init__(self, has: int, want: int) -> None:
        self.has = has
        self.want = want
        super().__init__(f"write failed: writed only {has} bytes, expected {want}")