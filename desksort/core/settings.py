"""Persistent category -> destination settings for DeskSort."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Union

from .exceptions import (
    SettingsCorruptError, SettingsIOError, SettingsNotFoundError, ValidationError
)
from .models import CATEGORY_TABLE, category_names


TEMP_PREFIX = ".settings."
TEMP_SUFFIX = ".tmp"


def default_settings(sorted_root: Union[str, Path]) -> Dict[str, str]:
    """
    Build the first-run mapping: one folder per category under ``sorted_root``.

    Args:
        sorted_root: Root directory for sorted entries

    Returns:
        Mapping of every known category to ``<sorted_root>/<category>``
    """
    root = Path(sorted_root)
    return {category.name: str(root / category.name) for category in CATEGORY_TABLE}


def validate_settings(settings: Mapping[str, str]) -> Dict[str, str]:
    """
    Check that a mapping only holds known categories and non-empty paths.

    Raises:
        ValidationError: If the mapping is invalid
    """
    known = set(category_names())
    validated = {}
    for category, destination in settings.items():
        if category not in known:
            raise ValidationError(f"Unknown category: {category}")
        if not isinstance(destination, str) or not destination.strip():
            raise ValidationError(f"Destination for {category} must be a non-empty path")
        validated[category] = destination
    return validated


class SettingsStore:
    """Loads and saves the settings document."""

    def __init__(self, path: Path):
        """
        Initialize the settings store.

        Args:
            path: Location of the settings JSON document
        """
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Dict[str, str]:
        """
        Load the category -> destination mapping.

        Blank destinations are dropped, so the returned mapping only holds
        configured categories and can be saved back unchanged.

        Raises:
            SettingsNotFoundError: No document exists yet
            SettingsCorruptError: The document is not a valid mapping
            SettingsIOError: The document could not be read
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SettingsNotFoundError(f"No settings found at {self.path}", self.path)
        except UnicodeDecodeError as e:
            raise SettingsCorruptError(f"Settings file {self.path} is not UTF-8 text: {e}", self.path) from e
        except OSError as e:
            raise SettingsIOError(f"Cannot read settings {self.path}: {e}", self.path) from e

        try:
            document = json.loads(text)
        except (ValueError, RecursionError) as e:
            raise SettingsCorruptError(f"Settings file {self.path} is not valid JSON: {e}", self.path) from e

        if not isinstance(document, dict):
            raise SettingsCorruptError(f"Settings file {self.path} is not a JSON object", self.path)

        known = set(category_names())
        settings = {}
        for key, value in document.items():
            if key not in known:
                raise SettingsCorruptError(f"Settings file {self.path} has unknown category {key!r}", self.path)
            if not isinstance(value, str):
                raise SettingsCorruptError(f"Destination for {key!r} in {self.path} is not a string", self.path)
            if not value.strip():
                self.logger.debug(f"No destination configured for {key}")
                continue
            settings[key] = value

        self.logger.debug(f"Loaded {len(settings)} destinations from {self.path}")
        return settings

    def save(self, settings: Mapping[str, str]) -> None:
        """
        Replace the settings document with ``settings``.

        The new document is written to a temporary file next to the target and
        renamed into place, so an interrupted save leaves the old one intact.

        Raises:
            ValidationError: The mapping is invalid
            SettingsIOError: The document could not be written
        """
        document = validate_settings(settings)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=str(self.path.parent),
                prefix=TEMP_PREFIX,
                suffix=TEMP_SUFFIX,
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(document, tmp, indent=2)
                tmp.write("\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            tmp_path.replace(self.path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    self.logger.warning(f"Could not remove temporary settings file {tmp_path}")
            raise SettingsIOError(f"Cannot write settings {self.path}: {e}", self.path) from e

        self.logger.info(f"Saved {len(document)} destinations to {self.path}")

    def is_internal_file(self, path: Path) -> bool:
        """Whether ``path`` is the settings document or one of its temp files."""
        if path.parent.resolve() != self.path.parent.resolve():
            return False
        if path.name == self.path.name:
            return True
        return path.name.startswith(TEMP_PREFIX) and path.name.endswith(TEMP_SUFFIX)
