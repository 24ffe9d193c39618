import struct
from dataclasses import dataclass

import pytest

from mtproto.messages import (
    Unencrypted,
    deserialize_unencrypted,
    serialize_packet,
)


@dataclass
class DummyClient:
    session_id: int = 0
    seq_no: int = 0
    server_salt: int = 0
    auth_key: bytes = b""


def hexed(s: str) -> bytes:
    return bytes.fromhex(s)


USUAL = hexed(
    "00000000000000007b000000000000001700000068656c6c6f206d7470726f746f206d65"
    "73736167657321"
)


def test_serialize_unencrypted_usual_message():
    msg = Unencrypted(msg=b"hello mtproto messages!", msg_id=123)
    assert msg.serialize(DummyClient()) == USUAL


def test_deserialize_unencrypted_round_trip():
    got = deserialize_unencrypted(USUAL)
    assert got == Unencrypted(msg=b"hello mtproto messages!", msg_id=123)
    assert got.seq_no == 0


def test_deserialize_unencrypted_wrong_msg_id_bits():
    data = Unencrypted(msg=b"abcd", msg_id=124).serialize()
    with pytest.raises(ValueError, match="message_id"):
        deserialize_unencrypted(data)


def test_deserialize_unencrypted_size_mismatch():
    data = Unencrypted(msg=b"abcd", msg_id=123).serialize() + b"\x00"
    with pytest.raises(ValueError, match="defined size"):
        deserialize_unencrypted(data)


def test_deserialize_unencrypted_truncated():
    with pytest.raises(ValueError):
        deserialize_unencrypted(b"\x00\x00")


@pytest.mark.parametrize("ack", [False, True])
def test_serialize_packet_layout(ack):
    client = DummyClient(session_id=77, seq_no=4, server_salt=-2)
    body = b"payload!"
    packet = serialize_packet(client, body, 123, ack)
    salt, session, msg_id, seq, length = struct.unpack("<qqqii", packet[:32])
    assert salt == -2
    assert session == 77
    assert msg_id == 123
    assert seq == (5 if ack else 4)
    assert length == len(body)
    assert packet[32:] == body