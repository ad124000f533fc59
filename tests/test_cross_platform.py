"""Cross-platform path handling tests for DeskSort."""

import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from desksort.core.classifier import classify
from desksort.core.config import PathsConfig
from desksort.core.sorter import scan_and_sort


class TestCrossPlatformPaths:
    """Test file path handling across different platforms."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.source = self.temp_dir / "Desktop"
        self.source.mkdir()
        self.dest = self.temp_dir / "Sorted"

    def teardown_method(self):
        """Clean up test environment."""
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_file_extension_case_sensitivity(self):
        """Extensions match regardless of case on any filesystem."""
        for filename in ["image.JPG", "vector.Png", "clip.MOV", "tool.APPIMAGE"]:
            (self.source / filename).touch()

        for entry in self.source.iterdir():
            assert classify(entry.name, entry.is_dir()) is not None

    def test_special_characters_in_paths(self):
        """Names with spaces, brackets and extra dots are sorted intact."""
        special_chars_files = [
            "file with spaces.jpg",
            "file-with-dashes.png",
            "file_with_underscores.gif",
            "file.with.dots.bmp",
            "file(with)parentheses.webp",
            "file[with]brackets.tiff",
        ]
        created = []
        for filename in special_chars_files:
            try:
                (self.source / filename).write_text(filename, encoding="utf-8")
                created.append(filename)
            except OSError as e:
                # Some special characters may not be supported on certain filesystems
                print(f"Skipping {filename} due to filesystem limitation: {e}")

        result = scan_and_sort(self.source, {"images": str(self.dest / "images")})

        assert sorted(entry.name for entry in result.moved) == sorted(created)
        for filename in created:
            assert (self.dest / "images" / filename).read_text(encoding="utf-8") == filename

    def test_unicode_names(self):
        filename = "résumé – 履歴書.pdf"
        try:
            (self.source / filename).write_bytes(b"cv")
        except (OSError, UnicodeEncodeError):
            pytest.skip("Filesystem does not support unicode names")

        scan_and_sort(self.source, {"documents": str(self.dest / "documents")})
        assert (self.dest / "documents" / filename).read_bytes() == b"cv"

    def test_destination_with_spaces(self):
        (self.source / "notes.txt").write_bytes(b"n")
        destination = self.dest / "My Documents" / "Text Files"
        scan_and_sort(self.source, {"documents": str(destination)})
        assert (destination / "notes.txt").exists()

    def test_long_destination_path(self):
        """Deeply nested destinations are created on demand."""
        destination = self.dest
        for i in range(10):
            destination = destination / f"level_{i}_directory_with_long_name"
        (self.source / "photo.jpg").write_bytes(b"img")

        result = scan_and_sort(self.source, {"images": str(destination)})

        if result.errors:
            # Path too long for filesystem
            pytest.skip("Filesystem does not support long paths")
        assert (destination / "photo.jpg").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX home expansion")
    def test_configured_source_expands_home(self):
        with patch.dict("os.environ", {"HOME": str(self.temp_dir)}):
            paths = PathsConfig(source_dir=Path("~/Desktop"))
            assert paths.resolve_source_dir() == self.source
