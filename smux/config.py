"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .error import ConfigError

_MAX_FRAME_LIMIT = 16 * 1024 * 1024


@dataclass(frozen=True)
class Config:
    """Settings shared by a session, its codec and its streams.

    Durations are in seconds.
    """

    version: int = 1
    keep_alive_interval: float = 10.0
    keep_alive_timeout: float = 30.0
    max_frame_size: int = 32 * 1024
    max_receive_buffer: int = 4 * 1024 * 1024
    max_stream_buffer: int = 64 * 1024
    enable_keep_alive: bool = True

    def validate(self) -> None:
        """Raise ConfigError if the settings are inconsistent."""
        if self.version == 0:
            raise ConfigError("Version cannot be 0")
        if self.enable_keep_alive and self.keep_alive_timeout <= self.keep_alive_interval:
            raise ConfigError("Keep-alive timeout must be greater than keep-alive interval")
        if self.max_frame_size == 0:
            raise ConfigError("Max frame size cannot be 0")
        if self.max_frame_size > _MAX_FRAME_LIMIT:
            raise ConfigError("Max frame size cannot exceed 16MB")
        if self.max_receive_buffer < self.max_frame_size:
            raise ConfigError("Max receive buffer must be at least as large as max frame size")
        if self.max_stream_buffer == 0:
            raise ConfigError("Max stream buffer cannot be 0")


def build_config(**kwargs) -> Config:
    """Create a Config from keyword overrides and validate it."""
    config = Config(**kwargs)
    config.validate()
    return config