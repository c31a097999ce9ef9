"""Frame commands of the smux protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .error import InvalidFrameError


class CommandType(enum.IntEnum):
    """Wire values of the frame commands."""

    SYN = 0
    FIN = 1
    PSH = 2
    NOP = 3
    UPD = 4


_CONTROL = frozenset({CommandType.SYN, CommandType.FIN, CommandType.NOP, CommandType.UPD})


@dataclass(frozen=True)
class Command:
    """A frame command; UPD commands also carry consumed and window counts."""

    kind: CommandType
    consumed: int | None = None
    window: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", CommandType(self.kind))
        if self.kind is CommandType.UPD:
            if self.consumed is None:
                object.__setattr__(self, "consumed", 0)
            if self.window is None:
                object.__setattr__(self, "window", 0)
        elif self.consumed is not None or self.window is not None:
            raise ValueError(f"{self.kind.name} command takes no consumed/window values")

    @classmethod
    def from_byte(cls, byte: int) -> Command:
        """Decode a command byte; UPD values start at zero."""
        try:
            kind = CommandType(byte)
        except ValueError:
            raise InvalidFrameError() from None
        return cls(kind)

    @classmethod
    def upd(cls, consumed: int, window: int) -> Command:
        """Build a window update command."""
        return cls(CommandType.UPD, consumed, window)

    def to_byte(self) -> int:
        return int(self.kind)

    def is_control(self) -> bool:
        return self.kind in _CONTROL

    def can_carry_data(self) -> bool:
        return self.kind is CommandType.PSH

    def requires_v2(self) -> bool:
        return self.kind is CommandType.UPD