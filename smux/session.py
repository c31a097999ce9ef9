"""A multiplexed session carrying many streams over one connection."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from .codec import Codec
from .command import CommandType
from .config import Config
from .error import SessionClosedError, SmuxError, StreamAlreadyExistsError
from .frame import Frame
from .stream import Stream
from .stream_id import StreamIdGenerator

_log = logging.getLogger(__name__)

_ACCEPT_BACKLOG = 16
_READ_SIZE = 64 * 1024


class Session:
    """Multiplexes streams over an asyncio reader/writer pair.

    Build one with ``await Session.client(...)`` or ``await Session.server(...)``;
    both start the background tasks that read and write frames.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: Config | None = None,
        *,
        is_client: bool = True,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._config = config if config is not None else Config()
        self._codec = Codec(self._config)
        self._ids = StreamIdGenerator(is_client)
        self._streams: dict[int, Stream] = {}
        self._frames: asyncio.Queue[Frame] = asyncio.Queue(
            maxsize=self._config.max_receive_buffer
        )
        self._incoming: asyncio.Queue[Stream] = asyncio.Queue(maxsize=_ACCEPT_BACKLOG)
        self._die = asyncio.Event()
        self._closed = False
        self._tasks: tuple[asyncio.Task, ...] = ()
        self.is_client = is_client

    @classmethod
    async def client(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: Config | None = None,
    ) -> Session:
        """Start a session on the side that opens odd-numbered streams."""
        session = cls(reader, writer, config, is_client=True)
        session._start()
        return session

    @classmethod
    async def server(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: Config | None = None,
    ) -> Session:
        """Start a session on the side that opens even-numbered streams."""
        session = cls(reader, writer, config, is_client=False)
        session._start()
        return session

    def _start(self) -> None:
        self._tasks = (
            asyncio.create_task(self._recv_loop(), name="smux-recv"),
            asyncio.create_task(self._send_loop(), name="smux-send"),
        )

    def __repr__(self) -> str:
        role = "client" if self.is_client else "server"
        return f"Session({role}, streams={len(self._streams)}, closed={self._closed})"

    def _new_stream(self, stream_id: int) -> Stream:
        stream = Stream(stream_id, self._frames, self._config.version)
        self._streams[stream_id] = stream
        return stream

    async def open_stream(self) -> Stream:
        """Open a new stream to the peer by sending SYN."""
        if self._closed:
            raise SessionClosedError()
        stream_id = self._ids.next_id()
        stream = self._new_stream(stream_id)
        await self._frames.put(Frame.syn(self._config.version, stream_id))
        if self._closed:
            raise SessionClosedError()
        return stream

    async def accept_stream(self) -> Stream | None:
        """Wait for a stream opened by the peer; None once the session is closed."""
        if self._closed:
            return None
        getter = asyncio.ensure_future(self._incoming.get())
        dying = asyncio.ensure_future(self._die.wait())
        try:
            done, _ = await asyncio.wait(
                {getter, dying}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (getter, dying):
                if not task.done():
                    task.cancel()
        if getter in done:
            return getter.result()
        return None

    async def close(self) -> None:
        """Shut the session down and close the transport."""
        self._shutdown()
        current = asyncio.current_task()
        others = [task for task in self._tasks if task is not current]
        await asyncio.gather(*others, return_exceptions=True)
        with contextlib.suppress(OSError, RuntimeError):
            await self._writer.wait_closed()

    def is_closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> Session:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._die.set()
        for stream in self._streams.values():
            stream._mark_session_closed()
        self._streams.clear()
        current = asyncio.current_task()
        for task in self._tasks:
            if task is not current:
                task.cancel()
        with contextlib.suppress(OSError, RuntimeError):
            self._writer.close()

    async def _recv_loop(self) -> None:
        buffer = bytearray()
        try:
            while True:
                chunk = await self._reader.read(_READ_SIZE)
                if not chunk:
                    _log.info("Transport closed")
                    break
                buffer += chunk
                while (frame := self._codec.decode(buffer)) is not None:
                    try:
                        await self._handle_frame(frame)
                    except SmuxError as exc:
                        _log.error("Error handling frame: %s", exc)
        except SmuxError as exc:
            _log.error("Frame decode error: %s", exc)
        except OSError as exc:
            _log.error("recv_loop error: %s", exc)
        finally:
            self._shutdown()

    async def _send_loop(self) -> None:
        try:
            while True:
                frame = await self._frames.get()
                self._writer.write(self._codec.encode(frame))
                await self._writer.drain()
        except (SmuxError, OSError) as exc:
            _log.error("Frame send error: %s", exc)
        finally:
            self._shutdown()

    async def _handle_frame(self, frame: Frame) -> None:
        kind = frame.cmd.kind
        if kind is CommandType.SYN:
            await self._handle_syn(frame)
        elif kind is CommandType.FIN:
            stream = self._streams.pop(frame.stream_id, None)
            if stream is not None:
                stream._feed_eof()
        elif kind is CommandType.PSH:
            stream = self._streams.get(frame.stream_id)
            if stream is not None and frame.data:
                stream._feed_data(frame.data)
        # NOP is a keep-alive and UPD carries flow control, which is not applied.

    async def _handle_syn(self, frame: Frame) -> None:
        stream_id = frame.stream_id
        self._ids.validate_peer_stream_id(stream_id)
        if stream_id in self._streams:
            raise StreamAlreadyExistsError(stream_id)
        stream = self._new_stream(stream_id)
        await self._incoming.put(stream)