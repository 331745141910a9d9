"""Configuration module."""
from .settings import AppSettings, get_settings, use_settings

__all__ = ["AppSettings", "get_settings", "use_settings"]
