"""Allocation and validation of stream identifiers."""

from __future__ import annotations

import threading

from .error import InvalidStreamIdError, ProtocolViolationError

_U32_MAX = 0xFFFF_FFFF


class StreamIdGenerator:
    """Hands out stream ids: odd ones for a client, even ones for a server.

    Safe to share between threads.
    """

    def __init__(self, is_client: bool, start: int | None = None) -> None:
        self.is_client = is_client
        self._lock = threading.Lock()
        self._next = self._initial() if start is None else start

    def _initial(self) -> int:
        return 1 if self.is_client else 2

    def next_id(self) -> int:
        """Return the next stream id, or raise once the id space is used up."""
        with self._lock:
            current = self._next
            self._next = (current + 2) & _U32_MAX
        if current > _U32_MAX - 2:
            raise ProtocolViolationError(
                "Stream ID overflow - session should be restarted"
            )
        return current

    def _check_parity(self, stream_id: int, parity: int) -> None:
        if stream_id == 0 or stream_id % 2 != parity:
            raise InvalidStreamIdError(stream_id)

    def validate_peer_stream_id(self, stream_id: int) -> None:
        """Raise InvalidStreamIdError unless the peer may have opened this id."""
        self._check_parity(stream_id, 0 if self.is_client else 1)

    def validate_own_stream_id(self, stream_id: int) -> None:
        """Raise InvalidStreamIdError unless this side may have opened this id."""
        self._check_parity(stream_id, 1 if self.is_client else 0)

    def is_client_initiated(self, stream_id: int) -> bool:
        return stream_id % 2 == 1

    def is_server_initiated(self, stream_id: int) -> bool:
        return stream_id % 2 == 0

    def reset(self) -> None:
        """Start handing out ids from the beginning again."""
        with self._lock:
            self._next = self._initial()