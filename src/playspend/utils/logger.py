"""Logging infrastructure with export-source context."""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


def get_default_data_dir() -> Path:
    """Get the per-user PlaySpend data directory."""
    base = os.getenv("LOCALAPPDATA")
    if base:
        return Path(base) / "PlaySpend"
    return Path.home() / ".local" / "share" / "playspend"


class SourceContextFilter(logging.Filter):
    """Add the name of the export being analyzed to log records."""

    def __init__(self):
        super().__init__()
        self.source: Optional[str] = None

    def filter(self, record):
        """Add source to record."""
        record.source = self.source or "session"
        return True


class PlaySpendLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: Optional[str] = None):
        # Imported here: settings itself imports from this package
        from playspend.config.settings import get_settings
        settings = get_settings()

        self.log_dir = Path(settings.log_dir) if settings.log_dir else get_default_data_dir() / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "playspend.log"
        self.source_filter = SourceContextFilter()

        self.logger = logging.getLogger("playspend")
        self.logger.setLevel(getattr(logging, (log_level or settings.log_level).upper()))
        self.logger.propagate = False

        # Remove handlers from an earlier configuration
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=settings.log_max_file_size_mb * 1024 * 1024,
            backupCount=settings.log_backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)

        # Console output goes to stderr so CLI tables on stdout stay clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [source:%(source)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        file_handler.addFilter(self.source_filter)
        console_handler.addFilter(self.source_filter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)
        self.console_handler = console_handler

    def set_source_context(self, source: Optional[str]):
        """Set the export currently being analyzed."""
        self.source_filter.source = source

    def set_console_level(self, log_level: str):
        """Change how much reaches the console (file handler keeps DEBUG)."""
        self.console_handler.setLevel(getattr(logging, log_level.upper()))

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[PlaySpendLogger] = None


def _get_instance(log_level: Optional[str] = None) -> PlaySpendLogger:
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = PlaySpendLogger(log_level)
    return _logger_instance


def get_logger(log_level: Optional[str] = None) -> logging.Logger:
    """Get or create global logger instance."""
    return _get_instance(log_level).get_logger()


def set_source_context(source: Optional[str]):
    """Set export source context for logging."""
    if _logger_instance:
        _logger_instance.set_source_context(source)


def set_console_level(log_level: str):
    """Set the console handler level, e.g. DEBUG for --verbose."""
    _get_instance().set_console_level(log_level)


def reconfigure_logger(log_level: Optional[str] = None):
    """Rebuild handlers from the current settings, keeping the source context."""
    global _logger_instance
    source = _logger_instance.source_filter.source if _logger_instance else None
    _logger_instance = PlaySpendLogger(log_level)
    _logger_instance.set_source_context(source)
