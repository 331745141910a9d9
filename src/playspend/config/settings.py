"""Application settings loader from YAML configuration."""
import os
import yaml
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from playspend.utils.exceptions import ConfigError
from playspend.utils.logger import reconfigure_logger

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"
CONFIG_ENV_VAR = "PLAYSPEND_CONFIG"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int
    log_dir: Optional[str]

    # Analysis
    others_threshold: Decimal
    others_label: str
    unknown_app_label: str
    unknown_title_label: str
    date_format: str
    timeline_granularity: str

    # Retry
    retry_max_retries: int
    retry_backoff_factor: float

    # Google API
    google_api_scopes: list
    service_account_file: Optional[str]
    oauth_client_secrets: Optional[str]
    oauth_token_file: Optional[str]

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            env_path = os.getenv(CONFIG_ENV_VAR)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {config_path}: {e}")

        try:
            settings = cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                log_max_file_size_mb=int(config["logging"]["max_file_size_mb"]),
                log_backup_count=int(config["logging"]["backup_count"]),
                log_dir=config["logging"].get("log_dir") or None,
                others_threshold=Decimal(str(config["analysis"]["others_threshold"])),
                others_label=config["analysis"]["others_label"],
                unknown_app_label=config["analysis"]["unknown_app_label"],
                unknown_title_label=config["analysis"]["unknown_title_label"],
                date_format=config["analysis"]["date_format"],
                timeline_granularity=config["analysis"]["timeline_granularity"],
                retry_max_retries=int(config["retry"]["max_retries"]),
                retry_backoff_factor=float(config["retry"]["backoff_factor"]),
                google_api_scopes=list(config["google_api"]["scopes"]),
                service_account_file=config["google_api"].get("service_account_file") or None,
                oauth_client_secrets=config["google_api"].get("oauth_client_secrets") or None,
                oauth_token_file=config["google_api"].get("oauth_token_file") or None
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise ConfigError(f"Invalid configuration file {config_path}: {e!r}")

        is_valid, message = settings.validate()
        if not is_valid:
            raise ConfigError(f"Invalid configuration: {message}")
        return settings

    def validate(self) -> tuple[bool, str]:
        """Validate configuration values."""
        if not self.others_threshold.is_finite() or not Decimal(0) < self.others_threshold <= Decimal(1):
            return False, "Others threshold must be in (0, 1]"

        if not self.others_label:
            return False, "Others label is required"

        if self.timeline_granularity not in ("daily", "monthly", "yearly"):
            return False, "Timeline granularity must be daily, monthly or yearly"

        if self.retry_max_retries < 1:
            return False, "Retry count must be at least 1"

        return True, "Configuration is valid"


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings


def use_settings(config_path: Path) -> AppSettings:
    """Replace the global settings and rebuild logging from them."""
    global _settings
    _settings = AppSettings.load(config_path)
    reconfigure_logger()
    return _settings
