"""Encoding and decoding of smux frames to and from bytes."""

from __future__ import annotations

import struct

from .command import Command, CommandType
from .config import Config
from .error import FrameTooLargeError, ProtocolViolationError
from .frame import HEADER_SIZE, Frame

_HEADER = struct.Struct("<BBHI")
_UPD_BODY = struct.Struct("<II")


class Codec:
    """Turns frames into wire bytes and parses wire bytes back into frames."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self.max_frame_size = self.config.max_frame_size

    def _check_size(self, total: int) -> None:
        if total > self.max_frame_size:
            raise FrameTooLargeError(total, self.max_frame_size)

    def encode(self, frame: Frame) -> bytes:
        """Return the wire form of a frame, raising a SmuxError if it is invalid."""
        frame.validate(self.config)
        if frame.cmd.kind is CommandType.UPD and frame.version >= 2:
            payload = _UPD_BODY.pack(frame.cmd.consumed, frame.cmd.window)
        else:
            payload = frame.data
        self._check_size(HEADER_SIZE + len(payload))
        header = _HEADER.pack(
            frame.version,
            frame.cmd.to_byte(),
            len(payload) & 0xFFFF,
            frame.stream_id,
        )
        return header + payload

    def decode(self, buffer: bytearray) -> Frame | None:
        """Take one frame off the front of ``buffer``.

        Returns None, leaving the buffer untouched, while the frame is still
        incomplete. Raises a SmuxError for malformed or invalid frames.
        """
        if len(buffer) < HEADER_SIZE:
            return None

        version, cmd_byte, length, stream_id = _HEADER.unpack_from(buffer)
        cmd = Command.from_byte(cmd_byte)

        total = HEADER_SIZE + length
        self._check_size(total)
        if len(buffer) < total:
            return None

        data = bytes(buffer[HEADER_SIZE:total])
        del buffer[:total]

        if cmd.kind is CommandType.UPD:
            if version >= 2:
                if len(data) != _UPD_BODY.size:
                    raise ProtocolViolationError(
                        "UPD frame must have exactly 8 bytes of data"
                    )
                consumed, window = _UPD_BODY.unpack(data)
                cmd = Command.upd(consumed, window)
            data = b""

        frame = Frame(version, cmd, stream_id, data)
        frame.validate(self.config)
        return frame