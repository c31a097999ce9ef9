"""Frames of the smux protocol."""

from __future__ import annotations

from dataclasses import dataclass

from .command import Command, CommandType
from .config import Config
from .error import (
    FrameTooLargeError,
    InvalidProtocolError,
    InvalidStreamIdError,
    ProtocolViolationError,
)

HEADER_SIZE = 8


@dataclass(frozen=True)
class Frame:
    """One protocol frame: version, command, stream id and payload."""

    version: int
    cmd: Command
    stream_id: int
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def syn(cls, version: int, stream_id: int) -> Frame:
        return cls(version, Command(CommandType.SYN), stream_id)

    @classmethod
    def fin(cls, version: int, stream_id: int) -> Frame:
        return cls(version, Command(CommandType.FIN), stream_id)

    @classmethod
    def psh(cls, version: int, stream_id: int, data: bytes) -> Frame:
        return cls(version, Command(CommandType.PSH), stream_id, data)

    @classmethod
    def nop(cls, version: int) -> Frame:
        return cls(version, Command(CommandType.NOP), 0)

    @classmethod
    def upd(cls, version: int, stream_id: int, consumed: int, window: int) -> Frame:
        return cls(version, Command.upd(consumed, window), stream_id)

    def total_size(self) -> int:
        """Size of the frame on the wire, header included."""
        return HEADER_SIZE + len(self.data)

    def data_len(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data

    @property
    def consumed(self) -> int | None:
        """Consumed byte count of a UPD frame, None for other commands."""
        return self.cmd.consumed

    @property
    def window(self) -> int | None:
        """Window size of a UPD frame, None for other commands."""
        return self.cmd.window

    def validate(self, config: Config) -> None:
        """Raise a SmuxError if the frame breaks a protocol rule."""
        if self.version == 0:
            raise InvalidProtocolError(self.version)
        if self.cmd.requires_v2() and self.version < 2:
            raise ProtocolViolationError("UPD command requires protocol version 2")
        size = self.total_size()
        if size > config.max_frame_size:
            raise FrameTooLargeError(size, config.max_frame_size)
        if self.cmd.is_control() and self.data:
            raise ProtocolViolationError("Control frames cannot carry data")
        if self.cmd.kind is CommandType.NOP:
            if self.stream_id != 0:
                raise InvalidStreamIdError(self.stream_id)
        elif self.stream_id == 0:
            raise InvalidStreamIdError(self.stream_id)