"""Utility modules."""
from .logger import get_logger, set_source_context, set_console_level
from .exceptions import (
    PlaySpendError,
    ConfigError,
    BatchParseError,
    ArchiveError,
    NetworkError,
    RetryableError
)

__all__ = [
    "get_logger",
    "set_source_context",
    "set_console_level",
    "PlaySpendError",
    "ConfigError",
    "BatchParseError",
    "ArchiveError",
    "NetworkError",
    "RetryableError"
]
