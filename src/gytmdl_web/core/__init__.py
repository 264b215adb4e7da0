"""Core utilities - error taxonomy and formatting."""

from gytmdl_web.core.errors import (
    ChannelClosedError,
    ConfigError,
    GytmdlWebError,
    InvalidRequestError,
    TaskNotFoundError,
    UnauthorizedError,
    format_error,
)

__all__ = [
    "ChannelClosedError",
    "ConfigError",
    "GytmdlWebError",
    "InvalidRequestError",
    "TaskNotFoundError",
    "UnauthorizedError",
    "format_error",
]
