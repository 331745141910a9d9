"""Custom exception classes for PlaySpend."""


class PlaySpendError(Exception):
    """Base exception for PlaySpend."""
    pass


class ConfigError(PlaySpendError):
    """Configuration-related errors."""
    pass


class BatchParseError(PlaySpendError):
    """Uploaded purchase history is not a valid sequence of purchase records."""

    USER_MESSAGE = (
        "Failed to parse JSON file. Please ensure it's a valid "
        "Google Play purchase history file."
    )

    def __init__(self, detail: str = ""):
        super().__init__(self.USER_MESSAGE)
        self.detail = detail


class ArchiveError(PlaySpendError):
    """Purchase history could not be located inside an export file."""
    pass


class NetworkError(PlaySpendError):
    """Network and API-related errors."""
    pass


# Retryable errors
class RetryableError(PlaySpendError):
    """Base class for errors that should trigger retry."""
    pass
