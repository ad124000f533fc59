"""Tests for configuration and logging setup."""

import logging
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

from desksort.core.config import ConfigManager, LoggingConfig, SETTINGS_FILE_NAME
from desksort.core.logging_config import ColoredFormatter, LoggingManager


class TestConfigManager:
    """Test the INI backed configuration."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "config.ini"

    def teardown_method(self):
        """Clean up test environment."""
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_creates_default_file(self):
        manager = ConfigManager(self.config_file)
        assert self.config_file.exists()
        config = manager.get_config()
        assert config.paths.settings_file.name == SETTINGS_FILE_NAME
        assert config.paths.sorted_root.name == "Sorted"
        assert config.paths.source_dir is None
        assert config.sort.include_hidden is False
        assert config.config_file == self.config_file

    def test_round_trip(self):
        manager = ConfigManager(self.config_file)
        manager.config.paths.source_dir = self.temp_dir / "Desktop"
        manager.config.sort.include_hidden = True
        manager.config.sort.max_disambiguation_attempts = 50
        manager.config.logging.level = "DEBUG"
        manager.save_to_file()

        config = ConfigManager(self.config_file).get_config()
        assert config.paths.source_dir == self.temp_dir / "Desktop"
        assert config.sort.include_hidden is True
        assert config.sort.max_disambiguation_attempts == 50
        assert config.logging.level == "DEBUG"

    def test_reads_hand_written_file(self):
        self.config_file.write_text(
            "[paths]\n"
            f"settings_file = {self.temp_dir / 'settings.json'}\n"
            f"sorted_root = {self.temp_dir / 'Sorted'}\n"
            "source_dir =\n"
            "[logging]\n"
            "format = %(levelname)s %(message)s\n",
            encoding="utf-8",
        )
        config = ConfigManager(self.config_file).get_config()
        assert config.paths.settings_file == self.temp_dir / "settings.json"
        assert config.paths.source_dir is None
        assert config.logging.format == "%(levelname)s %(message)s"

    def test_invalid_value_keeps_defaults(self):
        self.config_file.write_text("[sort]\ninclude_hidden = maybe\n", encoding="utf-8")
        config = ConfigManager(self.config_file).get_config()
        assert config.sort.include_hidden is False


class TestLoggingManager:
    """Test logging setup."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def teardown_method(self):
        for handler in list(self.root.handlers):
            self.root.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            self.root.addHandler(handler)
        self.root.setLevel(self.saved_level)
        shutil.rmtree(self.temp_dir)

    def test_file_and_console_handlers(self):
        log_file = self.temp_dir / "logs" / "desksort.log"
        manager = LoggingManager(LoggingConfig(level="DEBUG", file_path=log_file))
        assert set(manager.handlers) == {"console", "file"}
        assert self.root.level == logging.DEBUG

        logging.getLogger("desksort.test").info("hello")
        manager.handlers["file"].flush()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_invalid_level_falls_back_to_info(self):
        LoggingManager(LoggingConfig(level="LOUD", file_enabled=False))
        assert self.root.level == logging.INFO

    def test_colored_formatter_restores_levelname(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[33m" in output
        assert record.levelname == "WARNING"

    def test_console_colours_only_on_a_terminal(self):
        config = LoggingConfig(file_enabled=False)
        with patch("desksort.core.logging_config.sys.stderr") as stderr:
            stderr.isatty.return_value = False
            plain = LoggingManager(config).handlers["console"]
            stderr.isatty.return_value = True
            colored = LoggingManager(config).handlers["console"]

        assert not isinstance(plain.formatter, ColoredFormatter)
        assert isinstance(colored.formatter, ColoredFormatter)
