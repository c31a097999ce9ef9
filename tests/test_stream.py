import asyncio
import gc

import pytest

from smux.error import SessionClosedError
from smux.frame import Frame
from smux.stream import Stream

pytestmark = pytest.mark.asyncio


def make_stream(stream_id=123, maxsize=1, chunks=(), eof=False):
    frames = asyncio.Queue(maxsize=maxsize)
    stream = Stream(stream_id, frames)
    for chunk in chunks:
        stream._feed_data(chunk)
    if eof:
        stream._feed_eof()
    return stream, frames


def drain(frames):
    return [frames.get_nowait() for _ in range(frames.qsize())]


async def test_stream_creation():
    stream, _ = make_stream()
    assert stream.stream_id == 123
    assert (stream.is_read_closed, stream.is_write_closed, stream.is_closed) == (
        False,
        False,
        False,
    )


@pytest.mark.parametrize(
    "chunks, eof, sizes, expected",
    [
        ([b"hello world"], False, [20], [b"hello world"]),
        ([], True, [20], [b""]),
        ([b"hello ", b"world"], False, [20, 14], [b"hello ", b"world"]),
        ([b"abcdef"], False, [2, 10], [b"ab", b"cdef"]),
        ([b"abc"], False, [0, 3], [b"", b"abc"]),
        ([b"last"], True, [10, 10, 10], [b"last", b"", b""]),
    ],
)
async def test_reads(chunks, eof, sizes, expected):
    stream, _ = make_stream(chunks=chunks, eof=eof)
    assert [await stream.read(n) for n in sizes] == expected
    assert stream.is_read_closed is eof


async def test_read_negative_raises():
    stream, _ = make_stream()
    with pytest.raises(ValueError):
        await stream.read(-1)


async def test_read_exact():
    stream, _ = make_stream(chunks=[b"he", b"llo!"])
    assert await stream.read_exact(5) == b"hello"
    assert await stream.read(5) == b"!"


async def test_read_exact_incomplete():
    stream, _ = make_stream(chunks=[b"abc"], eof=True)
    with pytest.raises(asyncio.IncompleteReadError) as info:
        await stream.read_exact(5)
    assert info.value.partial == b"abc"


async def test_read_to_end():
    stream, _ = make_stream(chunks=[b"one ", b"two ", b"three"], eof=True)
    assert await stream.read_to_end() == b"one two three"


async def test_read_waits_for_data():
    stream, _ = make_stream()
    reader = asyncio.ensure_future(stream.read(10))
    await asyncio.sleep(0)
    assert not reader.done()
    stream._feed_data(b"late")
    assert await asyncio.wait_for(reader, 1) == b"late"


@pytest.mark.parametrize(
    "payload, written",
    [(b"hello world", 11), (bytes(10000), 4096), (b"", 0)],
)
async def test_write_sends_one_frame(payload, written):
    stream, frames = make_stream()
    assert await stream.write(payload) == written
    expected = [Frame.psh(1, 123, payload[:written])] if written else []
    assert drain(frames) == expected


async def test_write_all_splits_into_frames():
    stream, frames = make_stream(maxsize=0)
    payload = bytes(i % 256 for i in range(10000))
    await stream.write_all(payload)
    sent = drain(frames)
    assert [f.data_len() for f in sent] == [4096, 4096, 1808]
    assert b"".join(f.data for f in sent) == payload


async def test_flush_lets_other_tasks_run():
    stream, frames = make_stream(maxsize=0)
    taken = []

    async def sender():
        taken.append(await frames.get())

    task = asyncio.ensure_future(sender())
    await stream.write(b"data")
    await stream.flush()
    await asyncio.wait_for(task, 1)
    assert taken == [Frame.psh(1, 123, b"data")]


@pytest.mark.parametrize("method", ["close", "shutdown"])
async def test_close_sends_single_fin(method):
    stream, frames = make_stream(maxsize=0)
    for _ in range(2):
        await getattr(stream, method)()
    await stream.shutdown()
    assert stream.is_write_closed is True
    assert drain(frames) == [Frame.fin(1, 123)]


async def test_write_after_shutdown_raises():
    stream, _ = make_stream(maxsize=0)
    await stream.shutdown()
    with pytest.raises(BrokenPipeError):
        await stream.write(b"data")


async def test_session_closed_behaviour():
    stream, frames = make_stream()
    stream._mark_session_closed()
    with pytest.raises(BrokenPipeError):
        await stream.write(b"data")
    assert await stream.read(10) == b""
    await stream.shutdown()
    assert stream.is_closed is True
    assert frames.empty()


async def test_close_after_session_closed_raises():
    stream, _ = make_stream()
    stream._mark_session_closed()
    with pytest.raises(SessionClosedError):
        await stream.close()
    assert stream.is_write_closed is True


async def test_context_manager_sends_fin():
    frames = asyncio.Queue()
    async with Stream(7, frames) as stream:
        await stream.write(b"x")
    assert drain(frames) == [Frame.psh(1, 7, b"x"), Frame.fin(1, 7)]


async def test_stream_drop_sends_fin():
    frames = asyncio.Queue(maxsize=1)
    stream = Stream(123, frames)
    del stream
    gc.collect()
    assert drain(frames) == [Frame.fin(1, 123)]


async def test_version_is_used_in_frames():
    frames = asyncio.Queue()
    stream = Stream(5, frames, version=2)
    await stream.write(b"v")
    await stream.shutdown()
    assert drain(frames) == [Frame.psh(2, 5, b"v"), Frame.fin(2, 5)]