"""Tests for settings loading."""
import shutil
import tempfile
import unittest
from decimal import Decimal
from logging.handlers import RotatingFileHandler
from pathlib import Path

import yaml

from playspend.config.settings import DEFAULT_CONFIG_PATH, AppSettings, get_settings, use_settings
from playspend.utils.logger import get_logger
from playspend.utils.exceptions import ConfigError


class TestAppSettings(unittest.TestCase):
    """Test AppSettings functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as f:
            self.config = yaml.safe_load(f)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _write(self, config):
        path = self.test_dir / "config.yaml"
        path.write_text(yaml.safe_dump(config), encoding="utf-8")
        return path

    def test_load_defaults(self):
        """Test the packaged configuration loads and validates."""
        settings = AppSettings.load(DEFAULT_CONFIG_PATH)

        self.assertEqual(settings.others_threshold, Decimal("0.95"))
        self.assertEqual(settings.others_label, "Others")
        self.assertEqual(settings.timeline_granularity, "daily")
        self.assertIsNone(settings.service_account_file)

    def test_load_custom_file(self):
        self.config["analysis"]["others_threshold"] = 0.8
        self.config["analysis"]["others_label"] = "Rest"

        settings = AppSettings.load(self._write(self.config))

        self.assertEqual(settings.others_threshold, Decimal("0.8"))
        self.assertEqual(settings.others_label, "Rest")

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            AppSettings.load(self.test_dir / "missing.yaml")

    def test_missing_section(self):
        del self.config["analysis"]

        with self.assertRaises(ConfigError):
            AppSettings.load(self._write(self.config))

    def test_invalid_yaml(self):
        path = self.test_dir / "config.yaml"
        path.write_text("app: [unclosed", encoding="utf-8")

        with self.assertRaises(ConfigError):
            AppSettings.load(path)

    def test_invalid_values(self):
        """Test out-of-range values fail validation."""
        cases = [
            ("others_threshold", 1.5),
            ("others_threshold", 0),
            ("others_threshold", "abc"),
            ("others_label", ""),
            ("timeline_granularity", "weekly"),
        ]

        for key, value in cases:
            config = yaml.safe_load(yaml.safe_dump(self.config))
            config["analysis"][key] = value
            with self.assertRaises(ConfigError, msg=key):
                AppSettings.load(self._write(config))

    def test_validate_retry_count(self):
        settings = AppSettings.load(DEFAULT_CONFIG_PATH)
        settings.retry_max_retries = 0

        is_valid, message = settings.validate()

        self.assertFalse(is_valid)
        self.assertIn("Retry", message)


class TestUseSettings(unittest.TestCase):
    """Test switching to another configuration file."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as f:
            self.config = yaml.safe_load(f)
        self.config["logging"]["log_dir"] = str(self.test_dir / "mylogs")
        self.config["retry"]["max_retries"] = 2
        self.path = self.test_dir / "config.yaml"
        self.path.write_text(yaml.safe_dump(self.config), encoding="utf-8")

    def tearDown(self):
        """Clean up test fixtures."""
        use_settings(DEFAULT_CONFIG_PATH)
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_logging_follows_new_settings(self):
        """Test the log file moves to the configured directory."""
        logger = get_logger()

        use_settings(self.path)
        logger.info("written after switching settings")

        log_file = self.test_dir / "mylogs" / "playspend.log"
        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(Path(file_handlers[0].baseFilename), log_file)
        self.assertTrue(log_file.exists())

    def test_settings_replaced(self):
        use_settings(self.path)

        self.assertEqual(get_settings().retry_max_retries, 2)
        self.assertEqual(get_settings().log_dir, str(self.test_dir / "mylogs"))


if __name__ == "__main__":
    unittest.main()
