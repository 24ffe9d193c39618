"""TL object base class, helper types and the constructor registry."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from .cursor import (
    CRC_FALSE,
    CRC_NULL,
    CRC_TRUE,
    CRC_VECTOR,
    INT128_LEN,
    INT256_LEN,
    Decoder,
    Encoder,
)
from .errors import TLError

# Width markers for integer and floating fields. A field annotated with one
# of these aliases is written with the matching fixed size.
KIND_INT32 = "int32"
KIND_INT64 = "int64"
KIND_UINT32 = "uint32"
KIND_DOUBLE = "double"

Int32 = Annotated[int, KIND_INT32]
Int64 = Annotated[int, KIND_INT64]
UInt32 = Annotated[int, KIND_UINT32]
Double = Annotated[float, KIND_DOUBLE]


class TLObject:
    """Base of every TL constructor.

    Subclasses are dataclasses that set ``CRC`` to their constructor code and,
    when they carry a flags word, ``FLAG_INDEX`` to its position among fields.
    Enumerations mix this class into an ``IntEnum``; a member's value is its code.
    """

    CRC: ClassVar[int]
    FLAG_INDEX: ClassVar[int | None] = None

    def crc(self) -> int:
        """Return the constructor code of this object."""
        if isinstance(self, enum.Enum):
            return int(self.value)
        return type(self).CRC


def _put_fixed(encoder: Encoder, value: int, size: int) -> None:
    if not 0 <= value < 1 << (size * 8):
        raise TLError(f"value doesn't fit into {size} bytes: {value}")
    encoder.put_raw_bytes(value.to_bytes(size, "big"))


def _pop_fixed(decoder: Decoder, size: int) -> int:
    return int.from_bytes(decoder.pop_raw_bytes(size), "big")


@dataclass
class Int128:
    """A 128-bit unsigned integer such as a nonce, stored big endian."""

    value: int = 0

    SIZE: ClassVar[int] = INT128_LEN

    def __int__(self) -> int:
        return self.value

    def marshal_tl(self, encoder: Encoder) -> None:
        """Write the value as exactly 16 big-endian bytes."""
        _put_fixed(encoder, self.value, self.SIZE)

    def unmarshal_tl(self, decoder: Decoder) -> None:
        """Read 16 big-endian bytes into this value."""
        self.value = _pop_fixed(decoder, self.SIZE)


@dataclass
class Int256:
    """A 256-bit unsigned integer such as a new nonce, stored big endian."""

    value: int = 0

    SIZE: ClassVar[int] = INT256_LEN

    def __int__(self) -> int:
        return self.value

    def marshal_tl(self, encoder: Encoder) -> None:
        """Write the value as exactly 32 big-endian bytes."""
        _put_fixed(encoder, self.value, self.SIZE)

    def unmarshal_tl(self, decoder: Decoder) -> None:
        """Read 32 big-endian bytes into this value."""
        self.value = _pop_fixed(decoder, self.SIZE)


def random_int128() -> Int128:
    """Return an Int128 filled with random bytes."""
    return Int128(int.from_bytes(os.urandom(INT128_LEN), "big"))


def random_int256() -> Int256:
    """Return an Int256 filled with random bytes."""
    return Int256(int.from_bytes(os.urandom(INT256_LEN), "big"))


@dataclass
class PseudoTrue(TLObject):
    """Bare ``boolTrue`` met where an object was expected."""

    CRC = CRC_TRUE


@dataclass
class PseudoFalse(TLObject):
    """Bare ``boolFalse`` met where an object was expected."""

    CRC = CRC_FALSE


@dataclass
class PseudoNil(TLObject):
    """Bare ``null`` met where an object was expected."""

    CRC = CRC_NULL

    def unwrap(self) -> None:
        return None


@dataclass
class WrappedSlice(TLObject):
    """A vector met where an object was expected."""

    data: Any = None

    CRC = CRC_VECTOR

    def unwrap(self) -> Any:
        return self.data


def unwrap_native_types(obj: Any) -> Any:
    """Turn pseudo objects into their Python values; return others unchanged."""
    if isinstance(obj, PseudoTrue):
        return True
    if isinstance(obj, PseudoFalse):
        return False
    if isinstance(obj, PseudoNil):
        return None
    if isinstance(obj, WrappedSlice):
        return obj.unwrap()
    return obj


_registry: dict[int, Any] = {}
_enum_crcs: set[int] = set()


def _describe(entry: Any) -> str:
    return entry.__qualname__ if isinstance(entry, type) else repr(entry)


def register_objects(*args: Any) -> None:
    """Register TL object classes (or instances of them) by constructor code."""
    for obj in args:
        cls = obj if isinstance(obj, type) else type(obj)
        if not issubclass(cls, TLObject):
            raise TLError(f"{cls.__qualname__} is not a TL object")
        crc = getattr(cls, "CRC", None)
        if not isinstance(crc, int):
            raise TLError(f"{cls.__qualname__} has no constructor code")
        existing = _registry.get(crc)
        if existing is not None and existing is not cls:
            raise TLError(
                f"object with that crc already registered as {_describe(existing)}: 0x{crc:08x}"
            )
        _registry[crc] = cls


def register_enums(*args: Any) -> None:
    """Register enumeration members; each member's value is its code."""
    for member in args:
        if not (isinstance(member, TLObject) and isinstance(member, enum.Enum)):
            raise TLError(f"{member!r} is not a TL enumeration member")
        crc = member.crc()
        existing = _registry.get(crc)
        if existing is not None and existing is not member:
            raise TLError(f"enum with that crc already registered: 0x{crc:08x}")
        _registry[crc] = member
        _enum_crcs.add(crc)


def lookup_object(crc: int) -> Any:
    """Return the class or enumeration member registered for ``crc``, or None."""
    return _registry.get(crc)


def is_registered_enum(crc: int) -> bool:
    """Tell whether ``crc`` belongs to a registered enumeration member."""
    return crc in _enum_crcs