"""Custom exceptions for DeskSort."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class SettingsErrorKind(Enum):
    """Why a settings document could not be loaded or saved."""
    NOT_FOUND = "not_found"
    CORRUPT = "corrupt"
    IO_FAILURE = "io_failure"


class ScanErrorKind(Enum):
    """Why a sort pass could not start."""
    SOURCE_UNREADABLE = "source_unreadable"


class DeskSortError(Exception):
    """Base exception for DeskSort errors."""
    pass


class FileSystemError(DeskSortError):
    """Exception for file system related errors."""
    pass


class CollisionError(FileSystemError):
    """No free destination name could be found for an entry."""

    def __init__(self, message, destination: Optional[Path] = None, attempts: int = 0):
        super().__init__(message)
        self.destination = destination
        self.attempts = attempts


class ValidationError(DeskSortError):
    """Exception for data validation errors."""
    pass


class ConfigurationError(DeskSortError):
    """Exception for configuration related errors."""
    pass


class SettingsError(DeskSortError):
    """Base exception for settings document errors."""

    kind = SettingsErrorKind.IO_FAILURE

    def __init__(self, message, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class SettingsNotFoundError(SettingsError):
    """No settings document exists yet."""
    kind = SettingsErrorKind.NOT_FOUND


class SettingsCorruptError(SettingsError):
    """The settings document exists but cannot be parsed."""
    kind = SettingsErrorKind.CORRUPT


class SettingsIOError(SettingsError):
    """Reading or writing the settings document failed."""
    kind = SettingsErrorKind.IO_FAILURE


class ScanError(DeskSortError):
    """A sort pass could not list its source directory."""

    def __init__(self, message, path: Optional[Union[str, Path]] = None,
                 kind: ScanErrorKind = ScanErrorKind.SOURCE_UNREADABLE):
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.kind = kind
