"""DeskSort - sort desktop files into category folders by extension."""

__version__ = "0.1.0"
__description__ = "Sort desktop files into category folders by extension"

from .core.models import Category, CATEGORY_TABLE, MovedEntry, EntryError, SortResult
from .core.classifier import classify
from .core.settings import SettingsStore, default_settings
from .core.sorter import SortEngine
from .core.api import load_settings, save_settings, scan_and_sort
from .cli.main import cli

__all__ = [
    "Category",
    "CATEGORY_TABLE",
    "MovedEntry",
    "EntryError",
    "SortResult",
    "classify",
    "SettingsStore",
    "default_settings",
    "SortEngine",
    "load_settings",
    "save_settings",
    "scan_and_sort",
    "cli"
]
