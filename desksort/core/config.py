"""Configuration management for DeskSort."""

import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import configparser

from platformdirs import user_config_dir, user_data_dir, user_desktop_dir, user_log_dir

from .exceptions import ConfigurationError


APP_NAME = "desksort"
SETTINGS_FILE_NAME = "settings.json"
CONFIG_FILE_NAME = "config.ini"


def default_config_dir() -> Path:
    return Path(user_config_dir(APP_NAME))


def default_sorted_root() -> Path:
    return Path(user_data_dir(APP_NAME)) / "Sorted"


def desktop_dir() -> Path:
    """Resolve the current user's desktop folder."""
    desktop = user_desktop_dir()
    if not desktop:
        raise ConfigurationError("Desktop path not found")
    return Path(desktop)


@dataclass
class PathsConfig:
    """Filesystem locations used by DeskSort."""
    settings_file: Optional[Path] = None
    sorted_root: Optional[Path] = None
    source_dir: Optional[Path] = None  # None means the desktop

    def __post_init__(self):
        if self.settings_file is None:
            self.settings_file = default_config_dir() / SETTINGS_FILE_NAME
        if self.sorted_root is None:
            self.sorted_root = default_sorted_root()

    def resolve_source_dir(self) -> Path:
        if self.source_dir is not None:
            return self.source_dir.expanduser()
        return desktop_dir()


@dataclass
class SortConfig:
    """Sort pass configuration settings."""
    include_hidden: bool = False
    max_disambiguation_attempts: int = 1000


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_enabled: bool = True
    file_path: Optional[Path] = None
    file_max_size_mb: int = 5
    file_backup_count: int = 3
    console_enabled: bool = True

    def __post_init__(self):
        if self.file_path is None:
            self.file_path = Path(user_log_dir(APP_NAME)) / "desksort.log"


@dataclass
class AppConfig:
    """Main application configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    sort: SortConfig = field(default_factory=SortConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_file: Optional[Path] = None

    app_name: str = "DeskSort"
    version: str = "0.1.0"


class ConfigManager:
    """Manages application configuration stored in an INI file."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            config_file = default_config_dir() / CONFIG_FILE_NAME

        self.config_file = config_file
        self.config = AppConfig(config_file=config_file)
        self.logger = logging.getLogger(__name__)

        if self.config_file.exists():
            self.load_from_file()
        else:
            self.save_to_file()

    def load_from_file(self) -> None:
        """Load configuration from INI file."""
        try:
            parser = configparser.ConfigParser(interpolation=None)
            parser.read(self.config_file)

            if 'paths' in parser:
                paths_section = parser['paths']
                if paths_section.get('settings_file'):
                    self.config.paths.settings_file = Path(paths_section['settings_file']).expanduser()
                if paths_section.get('sorted_root'):
                    self.config.paths.sorted_root = Path(paths_section['sorted_root']).expanduser()
                if paths_section.get('source_dir'):
                    self.config.paths.source_dir = Path(paths_section['source_dir']).expanduser()

            if 'sort' in parser:
                sort_section = parser['sort']
                if 'include_hidden' in sort_section:
                    self.config.sort.include_hidden = sort_section.getboolean('include_hidden')
                if 'max_disambiguation_attempts' in sort_section:
                    self.config.sort.max_disambiguation_attempts = sort_section.getint('max_disambiguation_attempts')

            if 'logging' in parser:
                log_section = parser['logging']
                if 'level' in log_section:
                    self.config.logging.level = log_section.get('level')
                if 'format' in log_section:
                    self.config.logging.format = log_section.get('format')
                if 'file_enabled' in log_section:
                    self.config.logging.file_enabled = log_section.getboolean('file_enabled')
                if log_section.get('file_path'):
                    self.config.logging.file_path = Path(log_section.get('file_path')).expanduser()
                if 'file_max_size_mb' in log_section:
                    self.config.logging.file_max_size_mb = log_section.getint('file_max_size_mb')
                if 'file_backup_count' in log_section:
                    self.config.logging.file_backup_count = log_section.getint('file_backup_count')
                if 'console_enabled' in log_section:
                    self.config.logging.console_enabled = log_section.getboolean('console_enabled')

            self.logger.info(f"Configuration loaded from {self.config_file}")

        except (configparser.Error, ValueError) as e:
            self.logger.error(f"Error loading configuration from {self.config_file}: {e}")
            # Keep defaults for anything not yet applied

    def save_to_file(self) -> None:
        """Save current configuration to INI file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            parser = configparser.ConfigParser(interpolation=None)

            paths = self.config.paths
            parser['paths'] = {
                'settings_file': str(paths.settings_file),
                'sorted_root': str(paths.sorted_root),
                'source_dir': str(paths.source_dir) if paths.source_dir else '',
            }

            parser['sort'] = {
                'include_hidden': str(self.config.sort.include_hidden),
                'max_disambiguation_attempts': str(self.config.sort.max_disambiguation_attempts),
            }

            parser['logging'] = {
                'level': self.config.logging.level,
                'format': self.config.logging.format,
                'file_enabled': str(self.config.logging.file_enabled),
                'file_path': str(self.config.logging.file_path),
                'file_max_size_mb': str(self.config.logging.file_max_size_mb),
                'file_backup_count': str(self.config.logging.file_backup_count),
                'console_enabled': str(self.config.logging.console_enabled),
            }

            with open(self.config_file, 'w', encoding='utf-8') as f:
                parser.write(f)

            self.logger.info(f"Configuration saved to {self.config_file}")

        except OSError as e:
            self.logger.error(f"Error saving configuration to {self.config_file}: {e}")

    def get_config(self) -> AppConfig:
        """Get the current configuration."""
        return self.config


# Global configuration instance
_config_manager = None


def get_config() -> AppConfig:
    """Get the global application configuration."""
    return get_config_manager().get_config()


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def setup_config(config_file: Optional[Path] = None) -> ConfigManager:
    """
    Set up global configuration.

    Args:
        config_file: Optional path to configuration file

    Returns:
        ConfigManager instance
    """
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager
