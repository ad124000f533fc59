"""Logging setup for DeskSort: coloured stderr output plus a rotating log file."""

import logging
import logging.handlers
import sys
from typing import Dict, Optional

from .config import LoggingConfig, get_config


class ColoredFormatter(logging.Formatter):
    """Prefixes the level name of each record with its ANSI colour."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        color = self.LEVEL_COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The file handler formats the same record afterwards
            record.levelname = levelname


class LoggingManager:
    """Installs DeskSort's handlers on the root logger."""

    def __init__(self, config: Optional[LoggingConfig] = None):
        """
        Configure the root logger from ``config``.

        Args:
            config: Logging section of the application config. Defaults to the
                    section of the global config.
        """
        self.config = config or get_config().logging
        self.handlers: Dict[str, logging.Handler] = {}
        self._configure_root()

    def _configure_root(self):
        root_logger = logging.getLogger()

        # A second CLI invocation in the same process must not double the output
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

        level = logging.getLevelName(self.config.level.upper())
        if isinstance(level, int):
            root_logger.setLevel(level)
        else:
            root_logger.setLevel(logging.INFO)
            root_logger.warning(f"Unknown log level '{self.config.level}' in config, using INFO")

        if self.config.console_enabled:
            self._add('console', self._stderr_handler())

        if self.config.file_enabled and self.config.file_path:
            file_handler = self._log_file_handler()
            if file_handler is not None:
                self._add('file', file_handler)

    def _add(self, name: str, handler: logging.Handler):
        logging.getLogger().addHandler(handler)
        self.handlers[name] = handler

    def _stderr_handler(self) -> logging.Handler:
        """Console output goes to stderr so ``sort --json`` keeps stdout clean."""
        handler = logging.StreamHandler(sys.stderr)
        if sys.stderr.isatty():
            handler.setFormatter(ColoredFormatter(self.config.format))
        else:
            handler.setFormatter(logging.Formatter(self.config.format))
        return handler

    def _log_file_handler(self) -> Optional[logging.Handler]:
        """
        Open the rotating DeskSort log, creating its directory on first use.

        Returns:
            The handler, or None when the log file cannot be opened; sorting
            then continues with console logging only.
        """
        log_path = self.config.file_path
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=self.config.file_max_size_mb * 1024 * 1024,
                backupCount=self.config.file_backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            logging.getLogger(__name__).error(f"Cannot open log file {log_path}: {e}")
            return None
        handler.setFormatter(logging.Formatter(self.config.format))
        return handler


_logging_manager = None


def setup_logging(config: Optional[LoggingConfig] = None) -> LoggingManager:
    """
    Configure logging for the current process.

    Args:
        config: Logging section to apply; the global config's when omitted

    Returns:
        The LoggingManager now owning the root handlers
    """
    global _logging_manager
    _logging_manager = LoggingManager(config)
    return _logging_manager
