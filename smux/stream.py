"""A multiplexed stream carried inside a smux session."""

from __future__ import annotations

import asyncio

from .error import SessionClosedError
from .frame import Frame

_MAX_CHUNK = 4096


class Stream:
    """One bidirectional byte stream within a session.

    Outgoing data is turned into PSH frames and put on the session's frame
    queue; incoming data is fed in by the session as chunks.
    """

    def __init__(self, stream_id: int, frames: asyncio.Queue, version: int = 1) -> None:
        self._stream_id = stream_id
        self._frames = frames
        self._version = version
        self._incoming: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._pending = b""
        self._eof = False
        self._read_closed = False
        self._write_closed = False
        self._session_closed = False

    def __repr__(self) -> str:
        return (
            f"Stream(id={self._stream_id}, read_closed={self._read_closed}, "
            f"write_closed={self._write_closed})"
        )

    @property
    def stream_id(self) -> int:
        return self._stream_id

    @property
    def is_read_closed(self) -> bool:
        """True once the peer has finished sending."""
        return self._read_closed

    @property
    def is_write_closed(self) -> bool:
        """True once this side has finished sending."""
        return self._write_closed

    @property
    def is_closed(self) -> bool:
        return self._read_closed and self._write_closed

    # Interface used by the owning session.

    def _feed_data(self, data: bytes) -> None:
        """Queue a chunk received from the peer."""
        if data and not self._read_closed:
            self._incoming.put_nowait(bytes(data))

    def _feed_eof(self) -> None:
        """Signal that the peer will send no more data."""
        if not self._read_closed:
            self._read_closed = True
            self._incoming.put_nowait(None)

    def _mark_session_closed(self) -> None:
        """Detach the stream from a session that has shut down."""
        self._session_closed = True
        self._feed_eof()

    # Reading.

    async def read(self, n: int) -> bytes:
        """Return up to ``n`` bytes, or b"" at end of stream."""
        if n < 0:
            raise ValueError("read size must not be negative")
        if n == 0:
            return b""
        if not self._pending:
            if self._eof:
                return b""
            chunk = await self._incoming.get()
            if chunk is None:
                self._eof = True
                return b""
            self._pending = chunk
        data, self._pending = self._pending[:n], self._pending[n:]
        return data

    async def read_exact(self, n: int) -> bytes:
        """Return exactly ``n`` bytes.

        Raises asyncio.IncompleteReadError if the stream ends first.
        """
        parts = bytearray()
        while len(parts) < n:
            chunk = await self.read(n - len(parts))
            if not chunk:
                raise asyncio.IncompleteReadError(bytes(parts), n)
            parts += chunk
        return bytes(parts)

    async def read_to_end(self) -> bytes:
        """Read until the peer closes its side and return everything."""
        parts = bytearray()
        while chunk := await self.read(_MAX_CHUNK):
            parts += chunk
        return bytes(parts)

    # Writing.

    async def write(self, data: bytes) -> int:
        """Send one frame's worth of ``data`` and return how many bytes went out."""
        if self._write_closed:
            raise BrokenPipeError("Stream is closed for writing")
        if not data:
            return 0
        if self._session_closed:
            raise BrokenPipeError("Session is closed")
        chunk = bytes(data[:_MAX_CHUNK])
        await self._frames.put(Frame.psh(self._version, self._stream_id, chunk))
        return len(chunk)

    async def write_all(self, data: bytes) -> None:
        """Send all of ``data``, split into as many frames as needed."""
        view = memoryview(bytes(data))
        while view:
            written = await self.write(view)
            view = view[written:]

    async def flush(self) -> None:
        """Yield to the event loop so the session's sender can take queued frames.

        Writes are not buffered by the stream itself, so this never fails.
        """
        await asyncio.sleep(0)

    async def close(self) -> None:
        """Close the stream for writing by sending FIN.

        Raises SessionClosedError if the session is already gone.
        """
        if self._write_closed:
            return
        self._write_closed = True
        if self._session_closed:
            raise SessionClosedError()
        await self._frames.put(Frame.fin(self._version, self._stream_id))

    async def shutdown(self) -> None:
        """Close the stream for writing; a closed session counts as done."""
        if self._write_closed:
            return
        if not self._session_closed:
            await self._frames.put(Frame.fin(self._version, self._stream_id))
        self._write_closed = True

    async def __aenter__(self) -> Stream:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()

    def __del__(self) -> None:
        if getattr(self, "_write_closed", True) or getattr(self, "_session_closed", True):
            return
        self._write_closed = True
        try:
            self._frames.put_nowait(Frame.fin(self._version, self._stream_id))
        except Exception:
            pass