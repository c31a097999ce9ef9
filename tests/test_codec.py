import struct

import pytest

from smux.codec import Codec
from smux.command import CommandType
from smux.config import Config
from smux.error import (
    FrameTooLargeError,
    InvalidFrameError,
    InvalidProtocolError,
    ProtocolViolationError,
)
from smux.frame import HEADER_SIZE, Frame


@pytest.fixture
def codec():
    return Codec(Config())


@pytest.mark.parametrize(
    "frame",
    [
        Frame.syn(1, 123),
        Frame.fin(1, 123),
        Frame.psh(1, 123, b"hello world"),
        Frame.nop(1),
        Frame.upd(2, 123, 100, 200),
    ],
)
def test_round_trip(codec, frame):
    buf = bytearray(codec.encode(frame))
    decoded = codec.decode(buf)
    assert decoded == frame
    assert buf == bytearray()


def test_decode_partial_header(codec):
    encoded = codec.encode(Frame.syn(1, 123))
    partial = bytearray(encoded[:4])
    assert codec.decode(partial) is None
    assert partial == bytearray(encoded[:4])


def test_decode_partial_data(codec):
    encoded = codec.encode(Frame.psh(1, 123, b"hello world"))
    partial = bytearray(encoded[: HEADER_SIZE + 5])
    assert codec.decode(partial) is None
    assert len(partial) == HEADER_SIZE + 5


def test_decode_multiple_frames(codec):
    frame1 = Frame.syn(1, 123)
    frame2 = Frame.fin(1, 456)
    buf = bytearray(codec.encode(frame1) + codec.encode(frame2))
    assert codec.decode(buf) == frame1
    assert codec.decode(buf) == frame2
    assert codec.decode(buf) is None


def test_encode_oversized_frame():
    codec = Codec(Config(max_frame_size=100))
    with pytest.raises(FrameTooLargeError):
        codec.encode(Frame.psh(1, 123, bytes(200)))


def test_decode_oversized_frame():
    codec = Codec(Config(max_frame_size=100))
    buf = bytearray(struct.pack("<BBHI", 1, CommandType.PSH, 200, 123))
    with pytest.raises(FrameTooLargeError) as info:
        codec.decode(buf)
    assert info.value.size == HEADER_SIZE + 200
    assert info.value.max_size == 100


def test_decode_invalid_protocol_version(codec):
    buf = bytearray(struct.pack("<BBHI", 0, CommandType.SYN, 0, 123))
    with pytest.raises(InvalidProtocolError):
        codec.decode(buf)


def test_decode_invalid_command(codec):
    buf = bytearray(struct.pack("<BBHI", 1, 255, 0, 123))
    with pytest.raises(InvalidFrameError):
        codec.decode(buf)


def test_upd_frame_encoding(codec):
    buf = codec.encode(Frame.upd(2, 123, 100, 200))
    assert len(buf) == HEADER_SIZE + 8
    assert buf[0] == 2
    assert buf[1] == CommandType.UPD
    assert int.from_bytes(buf[2:4], "little") == 8
    assert int.from_bytes(buf[4:8], "little") == 123
    assert int.from_bytes(buf[8:12], "little") == 100
    assert int.from_bytes(buf[12:16], "little") == 200


def test_invalid_upd_data_length(codec):
    buf = bytearray(struct.pack("<BBHI", 2, CommandType.UPD, 4, 123))
    buf += struct.pack("<I", 100)
    with pytest.raises(ProtocolViolationError):
        codec.decode(buf)


def test_psh_wire_layout(codec):
    buf = codec.encode(Frame.psh(1, 7, b"abc"))
    assert buf == bytes([1, 2, 3, 0, 7, 0, 0, 0]) + b"abc"


def test_encode_rejects_invalid_frame(codec):
    with pytest.raises(ProtocolViolationError):
        codec.encode(Frame.upd(1, 123, 1, 2))


def test_decoded_upd_values(codec):
    buf = bytearray(codec.encode(Frame.upd(2, 9, 5, 65536)))
    frame = codec.decode(buf)
    assert (frame.consumed, frame.window) == (5, 65536)
    assert frame.data == b""