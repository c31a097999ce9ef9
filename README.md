# smux

Run many independent byte streams over one reliable connection with asyncio.
The package speaks the smux wire protocol: an 8-byte frame header (version,
command, little-endian 16-bit length, little-endian 32-bit stream id)
followed by a payload. Clients open odd-numbered streams and servers open
even-numbered ones.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

Install the test extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Using a session

`smux.session.Session` sits on top of an asyncio reader/writer pair, such as
the one that `asyncio.open_connection` returns. One side is the client and
the other is the server. `await Session.client(reader, writer, config)` and
`await Session.server(reader, writer, config)` start the background tasks that
read and write frames; `config` may be left out to use the defaults.

```python
import asyncio

from smux.config import Config
from smux.session import Session


async def serve(reader, writer):
    session = await Session.server(reader, writer, Config())
    stream = await session.accept_stream()
    if stream is None:
        return
    request = await stream.read_exact(5)
    await stream.write_all(b"world")
    await stream.shutdown()
    await stream.read_to_end()  # wait for the client to finish
    await session.close()


async def main():
    server = await asyncio.start_server(serve, "127.0.0.1", 0)
    host, port = server.sockets[0].getsockname()[:2]

    reader, writer = await asyncio.open_connection(host, port)
    session = await Session.client(reader, writer, Config())

    stream = await session.open_stream()
    await stream.write_all(b"hello")
    reply = await stream.read_exact(5)
    print(reply)  # b"world"

    await stream.shutdown()
    await session.close()
    server.close()
    await server.wait_closed()


asyncio.run(main())
```

- `open_stream()` sends SYN and returns a new `Stream`; it raises
  `SessionClosedError` once the session has closed.
- `accept_stream()` waits for a stream the peer opened and returns `None` once
  the session has closed.
- `close()` stops the background tasks and closes the transport. Frames still
  waiting in the send queue at that moment are not sent.
- `is_closed()` reports whether the session has stopped. A session also stops
  by itself when the transport reaches end of file, or when a frame cannot be
  decoded or sent.
- A session can be used as an async context manager; leaving it closes it.

## Streams

`smux.stream.Stream` offers:

- `read(n)`: up to `n` bytes, or `b""` once the peer has sent FIN or the
  session has closed.
- `read_exact(n)`: exactly `n` bytes; raises `asyncio.IncompleteReadError` if
  the stream ends first.
- `read_to_end()`: everything until the end of the stream.
- `write(data)`: sends at most 4096 bytes as one PSH frame and returns how many
  were sent. `write_all(data)` sends all of it in as many frames as needed.
  Writing after the stream was shut down, or after the session closed, raises
  `BrokenPipeError`.
- `flush()`: yields to the event loop; writes are not buffered in the stream.
- `shutdown()`: sends FIN and closes the stream for writing; a closed session
  counts as done. `close()` does the same but raises `SessionClosedError` if
  the session is already gone.
- Properties `stream_id`, `is_read_closed`, `is_write_closed` and `is_closed`.

A stream is an async context manager; leaving it calls `shutdown()`.

## Configuration

`smux.config.Config` is a frozen dataclass holding the protocol version,
keep-alive interval and timeout (in seconds), the largest frame size and the
buffer limits. The defaults are version 1, a 10 s interval, a 30 s timeout, a
32 KiB frame limit, a 4 MiB receive buffer and a 64 KiB stream buffer.
`Config.validate()` raises `ConfigError` when the settings conflict.
`build_config(**kwargs)` starts from the defaults, applies the overrides and
validates the result:

```python
from smux.config import build_config

config = build_config(version=2, max_frame_size=64 * 1024, enable_keep_alive=False)
```

## Frames and the codec

The protocol is also available as plain data types, without any I/O:

```python
from smux.codec import Codec
from smux.config import Config
from smux.frame import Frame

codec = Codec(Config())
wire = codec.encode(Frame.psh(1, 3, b"payload"))

buffer = bytearray(wire)
frame = codec.decode(buffer)  # None, buffer untouched, until a whole frame has arrived
```

`Frame.syn`, `Frame.fin`, `Frame.psh`, `Frame.nop` and `Frame.upd` build each
kind of frame, and `Frame.validate(config)` checks it against the protocol
rules. `smux.command.Command` and `CommandType` describe the five commands
(SYN, FIN, PSH, NOP, UPD); the `UPD` window-update command needs protocol
version 2 and carries `consumed` and `window` counts.

`smux.stream_id.StreamIdGenerator` hands out stream ids (odd for a client,
even for a server) and checks whether an id the peer uses is allowed.

## Errors

Every protocol failure raises a subclass of `smux.error.SmuxError`, for
example `FrameTooLargeError`, `ProtocolViolationError`,
`InvalidStreamIdError`, `SessionClosedError` and `ConfigError`.
`SmuxError.is_recoverable()` reports whether retrying the operation makes
sense.

## What the package does not do

- No flow control: UPD frames are decoded and validated but otherwise ignored,
  and writers are never held back by the peer's window.
- No keep-alive: the keep-alive settings in `Config` are validated but no NOP
  frames are sent and no timeout is enforced.
- No command-line tool and no ready-made server; the package is a library that
  runs over streams the caller connects.