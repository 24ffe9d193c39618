# mtproto

Low-level building blocks for speaking the MTProto protocol from Python.

## What is inside

- `mtproto.tl.cursor`: `Encoder` and `Decoder` for TL primitive values,
  which are uint/int32, int64 longs, doubles, bools and length-prefixed
  byte strings padded to 4-byte words. It also holds the size and CRC
  constants such as `CRC_VECTOR`, `CRC_TRUE`, `CRC_FALSE` and `CRC_NULL`.
- `mtproto.tl.types` holds:
  - `TLObject`, the base class of TL constructors;
  - `Int128` and `Int256`, fixed-size big-endian integers, with
    `random_int128()` and `random_int256()`;
  - the pseudo objects `PseudoTrue`, `PseudoFalse`, `PseudoNil` and
    `WrappedSlice`, with `unwrap_native_types()`;
  - a constructor registry: `register_objects()`, `register_enums()`,
    `lookup_object()` and `is_registered_enum()`.
- `mtproto.tl.tag` parses field tags such as `"flag:2,encoded_in_bitflags"`.
  It provides `parse_tag()`, `FieldTag` and `has_flag()`.
- `mtproto.tl.errors` defines `TLError`, `RegisteredObjectNotFoundError`,
  `MustParseSlicesExplicitlyError` and `PartialWriteError`.
- `mtproto.mode` frames messages on a byte stream that has `read` and `write`.
  - `Abridged` and `Intermediate` are the two modes.
  - `new_mode()` creates a mode and sends its announcement.
  - `detect()` picks the mode from the peer's announcement.
  - `get_variant()` returns the `Variant` of a mode.
- `mtproto.messages` provides the message envelopes:
  - `Unencrypted` with `serialize()`, and `deserialize_unencrypted()`;
  - the `Encrypted` data holder;
  - `serialize_packet()`, which builds the inner packet of an encrypted
    message before encryption.
- `mtproto.transport` covers the connection level:
  - `TCPConnConfig`, `new_tcp()` and `TCPConnection`, a TCP byte stream with
    an optional read timeout;
  - `ErrorCode`, for bare server error codes;
  - `is_packet_encrypted()` and `check_msg_size()`.
- `mtproto.session` stores sessions.
  - `Session` holds the key, hash, salt and hostname.
  - `SessionLoader` is the abstract storage.
  - `FileSessionLoader` and `new_from_file()` keep the session as a JSON file
    written with mode 0600, and cache it until the file changes.
  - `load()` raises `SessionNotFoundError` when the file is missing.
- `mtproto.dh_math` has the handshake maths: `split_pq()`, `make_gab()`,
  `do_rsa_encrypt()` and `xor()`.
- `mtproto.keys` reads PEM RSA public keys with `read_from_file()`, writes
  them with `save_rsa_key()` and computes the 8-byte `rsa_fingerprint()`.
- `mtproto.utils` has `generate_message_id()`, `generate_session_id()`,
  `auth_key_hash()`, `sha1()` and the lock-guarded containers `SyncSet` and
  `SyncMap`.

## Examples

Framing a message and reading it back:

```python
import io

from mtproto.mode import Variant, new_mode, detect, get_variant

buf = io.BytesIO()
mode = new_mode(Variant.INTERMEDIATE, buf)
mode.write_msg(b"test message")

buf.seek(0)
peer = detect(buf)
assert get_variant(peer) is Variant.INTERMEDIATE
assert peer.read_msg() == b"test message"
```

TL primitives:

```python
from mtproto.tl.cursor import Encoder, Decoder

enc = Encoder()
enc.put_string("abc")
data = enc.stream.getvalue()
assert data == b"\x03abc"
assert Decoder(data).pop_message() == b"abc"
```

A plain message:

```python
from mtproto.messages import Unencrypted, deserialize_unencrypted

wire = Unencrypted(msg=b"hi", msg_id=123).serialize()
assert deserialize_unencrypted(wire).msg == b"hi"
```

Factorising the handshake `pq` value:

```python
from mtproto.dh_math import split_pq

assert split_pq(378221) == (613, 617)
```

## What it does not do

This package is a set of parts, not a client.

- It cannot serialize or deserialize whole TL objects. The registry and the
  primitive cursors are here, but nothing walks an object's fields to write
  or read it.
- It does not define the MTProto service objects and has no request helpers
  for the key exchange or for pings.
- It does not encrypt or decrypt messages. `Encrypted` only holds fields, and
  `serialize_packet()` stops before encryption.
- It has no connection manager that sends RPCs, matches responses or keeps a
  session alive.

## Installing

```
pip install .
pip install ".[test]"
pytest
```