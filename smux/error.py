"""Exception hierarchy for the smux protocol."""

from __future__ import annotations


class SmuxError(Exception):
    """Base class for every error raised by this package."""

    _recoverable = False

    def is_recoverable(self) -> bool:
        """Return True if retrying the failed operation may succeed."""
        return self._recoverable


class SmuxIOError(SmuxError):
    """An error raised by the underlying transport."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"I/O error: {error}")

    def is_recoverable(self) -> bool:
        return isinstance(self.error, (BlockingIOError, InterruptedError))


class InvalidProtocolError(SmuxError):
    """A frame carried an unsupported protocol version."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Invalid protocol version: {version}")


class FrameTooLargeError(SmuxError):
    """A frame exceeded the configured maximum size."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(f"Frame too large: {size} bytes (max: {max_size})")


class SessionClosedError(SmuxError):
    """The session has been closed."""

    def __init__(self) -> None:
        super().__init__("Session closed")


class StreamNotFoundError(SmuxError):
    """No stream exists with the given id."""

    def __init__(self, stream_id: int) -> None:
        self.stream_id = stream_id
        super().__init__(f"Stream not found: {stream_id}")


class StreamAlreadyExistsError(SmuxError):
    """A stream with the given id is already open."""

    def __init__(self, stream_id: int) -> None:
        self.stream_id = stream_id
        super().__init__(f"Stream already exists: {stream_id}")


class InvalidStreamIdError(SmuxError):
    """A stream id is not valid in its context."""

    def __init__(self, stream_id: int) -> None:
        self.stream_id = stream_id
        super().__init__(f"Invalid stream ID: {stream_id}")


class ConfigError(SmuxError):
    """A configuration value is invalid."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Configuration error: {message}")


class InvalidFrameError(SmuxError):
    """A frame could not be parsed."""

    def __init__(self) -> None:
        super().__init__("Invalid frame format")


class SmuxTimeoutError(SmuxError):
    """The connection timed out."""

    _recoverable = True

    def __init__(self) -> None:
        super().__init__("Connection timeout")


class BufferOverflowError(SmuxError):
    """A buffer is full."""

    _recoverable = True

    def __init__(self) -> None:
        super().__init__("Buffer overflow")


class ProtocolViolationError(SmuxError):
    """The peer or the caller broke a protocol rule."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Protocol violation: {message}")


class InsufficientDataError(SmuxError):
    """Not enough bytes are available to parse a frame."""

    def __init__(self) -> None:
        super().__init__("Insufficient data for frame parsing")