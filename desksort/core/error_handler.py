"""Error handling utilities for DeskSort."""

import errno
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .exceptions import CollisionError, ScanError
from .models import EntryError


logger = logging.getLogger(__name__)


# errno -> (error_type, reason)
_OS_ERROR_REASONS = {
    errno.EACCES: ("permission_denied", "Permission denied"),
    errno.EPERM: ("permission_denied", "Operation not permitted"),
    errno.ENOENT: ("not_found", "No such file or directory"),
    errno.ENOSPC: ("disk_full", "No space left on device"),
    errno.ENAMETOOLONG: ("path_too_long", "Path too long"),
    errno.EROFS: ("read_only", "Destination is on a read-only file system"),
    errno.EEXIST: ("exists", "A file with that name already exists"),
    errno.ENOTDIR: ("not_a_directory", "Destination is not a directory"),
    errno.EBUSY: ("busy", "Entry is in use"),
}


class ErrorHandler:
    """Turns file system failures into readable, structured descriptions."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize error handler.

        Args:
            logger: Logger instance to use for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def describe_os_error(self, error: BaseException) -> Tuple[str, str]:
        """
        Describe an error raised while creating or moving an entry.

        Args:
            error: The exception that occurred

        Returns:
            Tuple of (error_type, human readable reason)
        """
        if isinstance(error, CollisionError):
            return "collision_exhausted", str(error)

        if isinstance(error, shutil.Error):
            return "move_failed", str(error)

        if isinstance(error, OSError):
            error_type, reason = _OS_ERROR_REASONS.get(
                error.errno, ("os_error", error.strerror or str(error))
            )
            if error.filename:
                reason = f"{reason}: {error.filename}"
            return error_type, reason

        return "unexpected", str(error)

    def entry_error(self, name: str, error: BaseException, operation: str = "") -> EntryError:
        """
        Build and log the EntryError for a failed entry.

        Args:
            name: Entry name
            error: The exception that occurred
            operation: Optional prefix describing the failed step
        """
        error_type, reason = self.describe_os_error(error)
        if operation:
            reason = f"{operation}: {reason}"
        self.logger.warning(f"Failed to sort {name}: {reason}")
        return EntryError(name=name, reason=reason, error_type=error_type)

    def handle_source_error(self, error: OSError, source_dir: Union[str, Path]) -> ScanError:
        """
        Convert a failure to list the source directory into a ScanError.

        Args:
            error: The exception raised while listing
            source_dir: Directory that was being listed
        """
        _, reason = self.describe_os_error(error)
        self.logger.error(f"Cannot read source directory {source_dir}: {reason}")
        return ScanError(f"Cannot read source directory {source_dir}: {reason}", source_dir)

    def log_error_summary(self, errors: List[EntryError], operation: str = "operation"):
        """
        Log a summary of errors that occurred during an operation.

        Args:
            errors: Entry errors that occurred
            operation: Description of the operation
        """
        if not errors:
            return

        error_counts = {}
        for error in errors:
            error_counts[error.error_type] = error_counts.get(error.error_type, 0) + 1

        self.logger.warning(f"Error summary for {operation}:")
        for error_type, count in error_counts.items():
            self.logger.warning(f"  {error_type}: {count} occurrences")

        unique_messages = set()
        for error in errors[:10]:
            if error.reason not in unique_messages:
                unique_messages.add(error.reason)
                self.logger.warning(f"  Example: {error.name}: {error.reason}")
