"""Stream multiplexing over a single reliable connection with asyncio."""

__version__ = "0.1.0"

__all__ = ["codec", "command", "config", "error", "frame", "session", "stream", "stream_id"]