import io
import random

import pytest

from mtproto.mode import (
    AmbiguousModeAnnounceError,
    Abridged,
    Intermediate,
    Mode,
    ModeError,
    ModeNotSupportedError,
    NotMultipleError,
    Variant,
    detect,
    get_variant,
    new_mode,
)

BIG = random.Random(1488).randbytes(0x5D0)

TEST_MESSAGE = b"test message"
INTERMEDIATE_FRAME = bytes(
    [
        0xEE, 0xEE, 0xEE, 0xEE, 0x0C, 0x00, 0x00, 0x00,
        0x74, 0x65, 0x73, 0x74, 0x20, 0x6D, 0x65, 0x73,
        0x73, 0x61, 0x67, 0x65,
    ]
)
ABRIDGED_FRAME = bytes(
    [
        0xEF, 0x03, 0x74, 0x65, 0x73, 0x74, 0x20, 0x6D,
        0x65, 0x73, 0x73, 0x61, 0x67, 0x65,
    ]
)
ABRIDGED_BIG_FRAME = bytes([0xEF, 0x7F, 0x74, 0x01, 0x00]) + BIG


@pytest.mark.parametrize(
    "message, variant, expected",
    [
        (TEST_MESSAGE, Variant.INTERMEDIATE, INTERMEDIATE_FRAME),
        (TEST_MESSAGE, Variant.ABRIDGED, ABRIDGED_FRAME),
        (BIG, Variant.ABRIDGED, ABRIDGED_BIG_FRAME),
    ],
)
def test_mode_encode(message, variant, expected):
    buf = io.BytesIO()
    mode = new_mode(variant, buf)
    mode.write_msg(message)
    assert buf.getvalue() == expected


@pytest.mark.parametrize(
    "frame, variant, expected",
    [
        (INTERMEDIATE_FRAME, Variant.INTERMEDIATE, TEST_MESSAGE),
        (ABRIDGED_FRAME, Variant.ABRIDGED, TEST_MESSAGE),
        (ABRIDGED_BIG_FRAME, Variant.ABRIDGED, BIG),
    ],
)
def test_mode_decode(frame, variant, expected):
    mode = detect(io.BytesIO(frame))
    assert get_variant(mode) == variant
    assert mode.read_msg() == expected


def test_abridged_rejects_unaligned_message():
    mode = new_mode(Variant.ABRIDGED, io.BytesIO())
    with pytest.raises(NotMultipleError, match=r"not multiple of 4 \(got 5\)"):
        mode.write_msg(b"12345")


def test_not_multiple_message_without_length():
    assert str(NotMultipleError()) == "size of message not multiple of 4"


def test_unsupported_variants():
    with pytest.raises(ModeNotSupportedError):
        new_mode(Variant.FULL, io.BytesIO())
    with pytest.raises(ModeNotSupportedError):
        new_mode(42, io.BytesIO())


def test_none_connection():
    with pytest.raises(ModeError):
        new_mode(Variant.ABRIDGED, None)
    with pytest.raises(ModeError):
        detect(None)


def test_detect_unknown_announcement():
    with pytest.raises(ModeNotSupportedError):
        detect(io.BytesIO(b"\x01\x02\x03\x04"))


def test_detect_ambiguous_announcement():
    with pytest.raises(AmbiguousModeAnnounceError):
        detect(io.BytesIO(b"\xee\xee\x00\xee"))


def test_detect_empty_stream():
    with pytest.raises(EOFError):
        detect(io.BytesIO(b""))


def test_read_at_end_of_stream():
    assert pytest.raises(EOFError, Intermediate(io.BytesIO()).read_msg)
    assert pytest.raises(EOFError, Abridged(io.BytesIO()).read_msg)


def test_short_body_raises():
    with pytest.raises(ModeError, match="expected to read 8 bytes, got 4"):
        Intermediate(io.BytesIO(b"\x08\x00\x00\x00abcd")).read_msg()
    with pytest.raises(ModeError, match="expected to read 8 bytes, got 4"):
        Abridged(io.BytesIO(b"\x02abcd")).read_msg()


def test_short_size_raises():
    with pytest.raises(ModeError, match="expected 4 bytes, got 2"):
        Intermediate(io.BytesIO(b"\x08\x00")).read_msg()


def test_round_trip_several_messages():
    buf = io.BytesIO()
    writer = new_mode(Variant.INTERMEDIATE, buf)
    writer.write_msg(b"abcd")
    writer.write_msg(b"")
    writer.write_msg(b"xyz")
    buf.seek(0)
    reader = detect(buf)
    assert [reader.read_msg() for _ in range(3)] == [b"abcd", b"", b"xyz"]


def test_get_variant_custom_mode():
    class Custom(Mode):
        def write_msg(self, msg):
            self.conn.write(msg)

        def read_msg(self):
            return self.conn.read()

    with pytest.raises(ModeError, match="custom mode"):
        get_variant(Custom(io.BytesIO()))