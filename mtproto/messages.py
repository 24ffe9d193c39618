"""Framing of plain and encrypted protocol messages."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Protocol

from .tl.cursor import LONG_LEN, WORD_LEN, Decoder, Encoder
from .tl.errors import TLError

_UNENCRYPTED_HEADER_LEN = LONG_LEN + LONG_LEN + WORD_LEN


class MessageInformator(Protocol):
    """Session details needed to build an encrypted packet."""

    session_id: int
    seq_no: int
    server_salt: int
    auth_key: bytes


def _check_msg_id(msg_id: int) -> None:
    mod = msg_id & 3
    if mod not in (1, 3):
        raise ValueError(f"wrong bits of message_id: {mod}")


@dataclass
class Encrypted:
    """A message exchanged inside an encrypted session."""

    msg: bytes = b""
    msg_id: int = 0
    auth_key_hash: bytes = b""
    salt: int = 0
    session_id: int = 0
    seq_no: int = 0
    msg_key: bytes = b""


@dataclass
class Unencrypted:
    """A plain message, used before an auth key exists."""

    msg: bytes = b""
    msg_id: int = 0

    @property
    def seq_no(self) -> int:
        return 0

    def serialize(self, client: MessageInformator | None = None) -> bytes:
        """Return the wire form: zero key hash, message id, length and body."""
        buf = io.BytesIO()
        encoder = Encoder(buf)
        encoder.put_long(0)
        encoder.put_long(self.msg_id)
        encoder.put_int(len(self.msg))
        encoder.put_raw_bytes(self.msg)
        return buf.getvalue()


def deserialize_unencrypted(data: bytes) -> Unencrypted:
    """Parse a plain message; raise ValueError if it is malformed."""
    data = bytes(data)
    decoder = Decoder(data)
    try:
        decoder.pop_raw_bytes(LONG_LEN)
        msg_id = decoder.pop_long()
    except TLError:
        msg_id = 0
    _check_msg_id(msg_id)

    try:
        message_len = decoder.pop_uint()
    except TLError as exc:
        raise ValueError(f"reading message length: {exc}") from exc
    if len(data) - _UNENCRYPTED_HEADER_LEN != message_len:
        raise ValueError(
            f"message not equal defined size: have {len(data)}, want {message_len}"
        )
    return Unencrypted(msg=decoder.get_rest_of_message(), msg_id=msg_id)


def serialize_packet(
    client: MessageInformator, msg: bytes, message_id: int, require_to_ack: bool
) -> bytes:
    """Build the inner packet of an encrypted message before encryption."""
    msg = bytes(msg)
    buf = io.BytesIO()
    encoder = Encoder(buf)
    encoder.put_raw_bytes(client.server_salt.to_bytes(LONG_LEN, "little", signed=True))
    encoder.put_long(client.session_id)
    encoder.put_long(message_id)
    seq_no = client.seq_no | 1 if require_to_ack else client.seq_no
    encoder.put_int(seq_no)
    encoder.put_int(len(msg))
    encoder.put_raw_bytes(msg)
    return buf.getvalue()