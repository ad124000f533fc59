"""Core engine: category table, classifier, settings store and sort engine."""

from .models import Category, CATEGORY_TABLE, MovedEntry, EntryError, SortResult
from .classifier import classify, split_name
from .settings import SettingsStore, default_settings
from .sorter import SortEngine
from .api import load_settings, save_settings, load_or_create_settings, scan_and_sort

__all__ = [
    "Category",
    "CATEGORY_TABLE",
    "MovedEntry",
    "EntryError",
    "SortResult",
    "classify",
    "split_name",
    "SettingsStore",
    "default_settings",
    "SortEngine",
    "load_settings",
    "save_settings",
    "load_or_create_settings",
    "scan_and_sort"
]
