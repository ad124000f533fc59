"""Sort engine: moves desktop entries into their category folders."""

import os
import shutil
import time
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from .classifier import classify, split_name
from .error_handler import ErrorHandler
from .exceptions import CollisionError
from .models import EntryError, MovedEntry, SortResult


def _file_identity(path: Path, follow_symlinks: bool = True) -> Optional[Tuple[int, int]]:
    try:
        st = os.stat(str(path), follow_symlinks=follow_symlinks)
    except OSError:
        return None
    return st.st_dev, st.st_ino


def _protected_identities(paths: Iterable[Path]) -> Set[Tuple[int, int]]:
    """
    Identities of every existing path in ``paths`` and of all its ancestors.

    An entry whose identity is in this set is one of the paths or contains
    one of them. Comparing identities rather than path strings sees through
    symlinked parents and case-insensitive filesystems.
    """
    identities = set()
    for path in paths:
        path = Path(os.path.abspath(str(Path(path).expanduser())))
        for candidate in (path, *path.parents):
            # Both the link and its target, for symlinked components
            for follow_symlinks in (True, False):
                identity = _file_identity(candidate, follow_symlinks)
                if identity is not None:
                    identities.add(identity)
    return identities


class SortEngine:
    """Scans one directory and sorts its entries by category."""

    def __init__(
        self,
        include_hidden: bool = False,
        excluded_paths: Iterable[Path] = (),
        exclude_filter: Optional[Callable[[Path], bool]] = None,
        max_disambiguation_attempts: int = 1000,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ):
        """
        Initialize the sort engine.

        Args:
            include_hidden: Sort entries whose name starts with a dot
            excluded_paths: Application files that must never be moved
            exclude_filter: Optional predicate marking further entries to leave alone
            max_disambiguation_attempts: Numbered names to try before giving up
            progress_callback: Optional callback called with
                               (processed_count, total_count) after each entry.
        """
        self.include_hidden = include_hidden
        self.excluded_paths = [Path(p) for p in excluded_paths]
        self.exclude_filter = exclude_filter
        self.max_disambiguation_attempts = max_disambiguation_attempts
        self.progress_callback = progress_callback
        self.error_handler = ErrorHandler()
        self.logger = logging.getLogger(__name__)

    def scan_and_sort(self, source_dir: Path, settings: Mapping[str, str]) -> SortResult:
        """
        Run one sort pass over ``source_dir``.

        Args:
            source_dir: Directory whose direct children are sorted
            settings: Category -> destination directory mapping

        Returns:
            SortResult with moved entries and per-entry errors

        Raises:
            ScanError: If ``source_dir`` cannot be listed
        """
        start_time = time.time()
        source_dir = Path(source_dir)
        result = SortResult(source_dir=source_dir)

        entries = self.list_entries(source_dir, settings)
        source_identity = _file_identity(source_dir)
        total = len(entries)
        self.logger.info(f"Sorting {total} entries in {source_dir}")

        for processed, entry in enumerate(entries, start=1):
            self._sort_entry(entry, source_identity, settings, result)

            if self.progress_callback:
                try:
                    self.progress_callback(processed, total)
                except Exception as e:
                    self.logger.warning(f"Progress callback error: {e}")

        result.duration = time.time() - start_time
        self.logger.info(
            f"Sort pass finished in {result.duration:.2f}s: "
            f"{result.moved_count} moved, {result.error_count} errors"
        )
        self.error_handler.log_error_summary(result.errors, "sort pass")
        return result

    def list_entries(self, source_dir: Path, settings: Mapping[str, str]) -> List[Path]:
        """
        List the sortable direct children of ``source_dir`` in name order.

        Hidden entries, application files, configured destinations and
        entries containing a configured destination are left out.

        Raises:
            ScanError: If ``source_dir`` is missing or unreadable
        """
        try:
            children = sorted(Path(source_dir).iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise self.error_handler.handle_source_error(e, source_dir) from e

        protected = _protected_identities(self.excluded_paths + self._destination_paths(settings))

        entries = []
        for child in children:
            if not self.include_hidden and child.name.startswith('.'):
                continue
            if _file_identity(child, follow_symlinks=False) in protected:
                self.logger.debug(f"Skipping protected entry {child.name}")
                continue
            if self.exclude_filter is not None and self.exclude_filter(child):
                self.logger.debug(f"Skipping internal file {child.name}")
                continue
            entries.append(child)
        return entries

    def _destination_paths(self, settings: Mapping[str, str]) -> List[Path]:
        paths = []
        for destination in settings.values():
            if destination:
                paths.append(Path(destination))
        return paths

    def resolve_destination(self, category: str, settings: Mapping[str, str]) -> Optional[Path]:
        """Return the configured destination for ``category``, if any."""
        destination = settings.get(category)
        if not destination or not destination.strip():
            return None
        return Path(destination).expanduser()

    def _sort_entry(self, entry: Path, source_identity: Optional[Tuple[int, int]],
                    settings: Mapping[str, str], result: SortResult) -> None:
        name = entry.name
        try:
            is_directory = entry.is_dir()
        except OSError as e:
            result.errors.append(self.error_handler.entry_error(name, e, "Cannot inspect entry"))
            return

        category = classify(name, is_directory)
        if category is None:
            self.logger.debug(f"Leaving uncategorized entry {name}")
            return

        destination_dir = self.resolve_destination(category, settings)
        if destination_dir is None:
            self.logger.debug(f"No destination configured for {category}, leaving {name}")
            return

        if not destination_dir.is_absolute():
            result.errors.append(self._relative_destination_error(name, category, destination_dir))
            return

        if source_identity is not None and _file_identity(destination_dir) == source_identity:
            self.logger.debug(f"Destination for {category} is the source directory, leaving {name}")
            return

        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            result.errors.append(self.error_handler.entry_error(
                name, e, f"Failed to create destination folder {destination_dir}"
            ))
            return

        try:
            target = self.move_entry(entry, destination_dir, is_directory)
        except (OSError, shutil.Error, CollisionError) as e:
            result.errors.append(self.error_handler.entry_error(name, e, f"Failed to move {name}"))
            return

        self.logger.info(f"Moved {entry} to {target}")
        result.moved.append(MovedEntry(name=name, category=category, source=entry, destination=target))

    def _relative_destination_error(self, name: str, category: str, destination_dir: Path) -> EntryError:
        reason = f"Destination for {category} is not an absolute path: {destination_dir}"
        self.logger.warning(f"Failed to sort {name}: {reason}")
        return EntryError(name=name, reason=reason, error_type="invalid_destination")

    def candidate_names(self, name: str, is_directory: bool = False) -> Iterator[str]:
        """
        Yield the names tried for ``name``, in order.

        ``report.pdf`` is followed by ``report (1).pdf``, ``report (2).pdf`` and
        so on, up to the attempt limit.
        """
        yield name
        stem, suffix = split_name(name, is_directory)
        for counter in range(1, self.max_disambiguation_attempts + 1):
            yield f"{stem} ({counter}){suffix}"

    def move_entry(self, entry: Path, destination_dir: Path, is_directory: bool = False) -> Path:
        """
        Move ``entry`` into ``destination_dir`` without overwriting anything.

        Each candidate name is checked immediately before the move; a taken
        name moves on to the next numbered one.

        Returns:
            Final path of the moved entry

        Raises:
            CollisionError: If every candidate name is taken
        """
        for candidate_name in self.candidate_names(entry.name, is_directory):
            target = destination_dir / candidate_name
            if os.path.lexists(target):
                self.logger.debug(f"{target} exists, trying the next name")
                continue
            shutil.move(str(entry), str(target))
            return target
        raise CollisionError(
            f"No free name for {entry.name} in {destination_dir} after "
            f"{self.max_disambiguation_attempts} attempts",
            destination=destination_dir,
            attempts=self.max_disambiguation_attempts,
        )


def scan_and_sort(source_dir: Path, settings: Mapping[str, str], **options) -> SortResult:
    """Run one sort pass with a throwaway SortEngine."""
    return SortEngine(**options).scan_and_sort(source_dir, settings)
