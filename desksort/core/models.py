"""Core data models for DeskSort."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Any


FOLDERS = "folders"
FOLDER_SENTINEL = "folder"


@dataclass(frozen=True)
class Category:
    """A named group of file extensions sharing one destination."""
    name: str
    extensions: Tuple[str, ...]


# Order matters: it is the order categories are listed and defaulted in.
CATEGORY_TABLE: Tuple[Category, ...] = (
    Category("documents", (".pdf", ".docx", ".doc", ".txt", ".odt", ".rtf")),
    Category("spreadsheets", (".xls", ".xlsx", ".csv", ".ods")),
    Category("presentations", (".pptx", ".odp", ".key")),
    Category("images", (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff")),
    Category("videos", (".mp4", ".mkv", ".avi", ".mov", ".webm", ".flv", ".wmv")),
    Category("audio", (".mp3", ".wav", ".aac", ".ogg", ".flac")),
    Category("archives", (".zip", ".rar", ".7z", ".tar", ".gz", ".tar.gz")),
    Category("executables", (".exe", ".msi", ".sh", ".bat", ".appimage")),
    Category("code", (".js", ".py", ".rs", ".cpp", ".java", ".html", ".css", ".json", ".ts")),
    Category(FOLDERS, (FOLDER_SENTINEL,)),
)


def build_extension_index(table: Tuple[Category, ...] = CATEGORY_TABLE) -> Dict[str, str]:
    """
    Build the extension -> category lookup for a category table.

    Args:
        table: Ordered category table

    Returns:
        Mapping of lower-cased extension to category name

    Raises:
        ValueError: If an extension appears in more than one category
    """
    index = {}
    for category in table:
        for extension in category.extensions:
            if extension == FOLDER_SENTINEL:
                continue
            key = extension.lower()
            if key in index:
                raise ValueError(
                    f"Extension {key} is listed under both {index[key]} and {category.name}"
                )
            index[key] = category.name
    return index


def category_names(table: Tuple[Category, ...] = CATEGORY_TABLE) -> List[str]:
    """Return category identifiers in table order."""
    return [category.name for category in table]


@dataclass
class MovedEntry:
    """An entry that was moved during a sort pass."""
    name: str
    category: str
    source: Path
    destination: Path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "source": str(self.source),
            "destination": str(self.destination),
        }


@dataclass
class EntryError:
    """A per-entry failure during a sort pass."""
    name: str
    reason: str
    error_type: str = "os_error"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "reason": self.reason, "error_type": self.error_type}


@dataclass
class SortResult:
    """Result of one sort pass."""
    source_dir: Path
    moved: List[MovedEntry] = field(default_factory=list)
    errors: List[EntryError] = field(default_factory=list)
    duration: float = 0.0

    @property
    def moved_count(self) -> int:
        return len(self.moved)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        """True when no entry failed."""
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable form for JSON output."""
        return {
            "source_dir": str(self.source_dir),
            "moved": [entry.to_dict() for entry in self.moved],
            "errors": [error.to_dict() for error in self.errors],
            "duration": round(self.duration, 3),
        }
