"""Extension based classification of desktop entries."""

from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .models import CATEGORY_TABLE, FOLDERS, build_extension_index


_EXTENSION_INDEX: Dict[str, str] = build_extension_index(CATEGORY_TABLE)


def _candidate_suffixes(entry_name: str) -> Iterator[Tuple[int, str]]:
    """Yield (position, suffix) pairs from the longest suffix to the shortest."""
    # A leading dot marks a hidden name, not an extension.
    position = entry_name.find(".", 1)
    while position != -1:
        yield position, entry_name[position:].lower()
        position = entry_name.find(".", position + 1)


def classify(entry_name: str, is_directory: bool,
             index: Optional[Dict[str, str]] = None) -> Optional[str]:
    """
    Classify a directory entry by name.

    Args:
        entry_name: Base name of the entry
        is_directory: Whether the entry is a directory
        index: Optional extension index, defaults to the built-in table

    Returns:
        Category name, or None when the entry is uncategorized
    """
    if is_directory:
        return FOLDERS

    lookup = _EXTENSION_INDEX if index is None else index
    for _, suffix in _candidate_suffixes(entry_name):
        category = lookup.get(suffix)
        if category is not None:
            return category
    return None


def split_name(entry_name: str, is_directory: bool = False,
               index: Optional[Dict[str, str]] = None) -> Tuple[str, str]:
    """
    Split a name into stem and extension.

    Known compound extensions stay whole, so ``archive.tar.gz`` splits into
    ``("archive", ".tar.gz")``. Directories are never split.
    """
    if is_directory:
        return entry_name, ""

    lookup = _EXTENSION_INDEX if index is None else index
    for position, suffix in _candidate_suffixes(entry_name):
        if suffix in lookup:
            return entry_name[:position], entry_name[position:]

    suffix = Path(entry_name).suffix
    if not suffix:
        return entry_name, ""
    return entry_name[:-len(suffix)], suffix
