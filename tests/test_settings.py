"""Tests for the settings store."""

import errno
import json
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from desksort.core.exceptions import (
    SettingsCorruptError, SettingsError, SettingsErrorKind, SettingsIOError,
    SettingsNotFoundError, ValidationError
)
from desksort.core.models import category_names
from desksort.core.settings import SettingsStore, default_settings, validate_settings


class TestSettingsStore:
    """Test loading and saving the settings document."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.path = self.temp_dir / "config" / "settings.json"
        self.store = SettingsStore(self.path)

    def teardown_method(self):
        """Clean up test environment."""
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_round_trip(self):
        mapping = {
            "images": str(self.temp_dir / "img"),
            "documents": str(self.temp_dir / "docs"),
            "folders": str(self.temp_dir / "folders"),
        }
        self.store.save(mapping)
        assert self.store.load() == mapping

    def test_save_creates_parent_directory(self):
        self.store.save({"images": "/dest/img"})
        assert self.path.exists()

    def test_missing_document(self):
        with pytest.raises(SettingsNotFoundError) as exc_info:
            self.store.load()
        assert exc_info.value.kind is SettingsErrorKind.NOT_FOUND
        assert exc_info.value.path == self.path

    def test_invalid_json_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SettingsCorruptError) as exc_info:
            self.store.load()
        assert exc_info.value.kind is SettingsErrorKind.CORRUPT

    def test_non_object_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('["images"]', encoding="utf-8")
        with pytest.raises(SettingsCorruptError):
            self.store.load()

    def test_nested_value_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"images": {"path": "/x"}}), encoding="utf-8")
        with pytest.raises(SettingsCorruptError):
            self.store.load()

    def test_unknown_category_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"memes": "/x"}), encoding="utf-8")
        with pytest.raises(SettingsCorruptError, match="memes"):
            self.store.load()

    def test_invalid_utf8_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_bytes(b'{"images": "/dest/\xff\xfe"}')
        with pytest.raises(SettingsCorruptError) as exc_info:
            self.store.load()
        assert exc_info.value.kind is SettingsErrorKind.CORRUPT

    def test_deeply_nested_json_is_corrupt(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        with pytest.raises(SettingsCorruptError):
            self.store.load()

    def test_blank_destinations_load_as_unconfigured(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            json.dumps({"images": "", "videos": "  ", "documents": "/d"}), encoding="utf-8"
        )
        assert self.store.load() == {"documents": "/d"}

    def test_blank_destinations_survive_edit_and_save(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"images": "", "documents": "/d"}), encoding="utf-8")

        mapping = self.store.load()
        mapping["documents"] = "/elsewhere"
        self.store.save(mapping)

        assert json.loads(self.path.read_text(encoding="utf-8")) == {"documents": "/elsewhere"}

    def test_unreadable_document_is_io_failure(self):
        self.path.mkdir(parents=True)  # a directory cannot be read as text
        with pytest.raises(SettingsIOError) as exc_info:
            self.store.load()
        assert exc_info.value.kind is SettingsErrorKind.IO_FAILURE
        assert isinstance(exc_info.value, SettingsError)

    def test_save_replaces_whole_document(self):
        self.store.save({"images": "/a", "documents": "/b"})
        self.store.save({"audio": "/c"})
        assert self.store.load() == {"audio": "/c"}

    def test_save_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            self.store.save({"memes": "/x"})
        assert not self.path.exists()

    def test_save_rejects_empty_destination(self):
        with pytest.raises(ValidationError):
            self.store.save({"images": "  "})

    def test_failed_save_keeps_previous_document(self):
        original = {"images": "/dest/img"}
        self.store.save(original)

        with patch("desksort.core.settings.os.fsync",
                   side_effect=OSError(errno.ENOSPC, "No space left on device")):
            with pytest.raises(SettingsIOError):
                self.store.save({"images": "/elsewhere"})

        assert self.store.load() == original
        leftovers = [p.name for p in self.path.parent.iterdir() if p.name != self.path.name]
        assert leftovers == []

    def test_document_is_flat_json(self):
        self.store.save({"images": "/dest/img"})
        assert json.loads(self.path.read_text(encoding="utf-8")) == {"images": "/dest/img"}

    def test_is_internal_file(self):
        self.store.save({"images": "/dest/img"})
        parent = self.path.parent
        assert self.store.is_internal_file(parent / "settings.json")
        assert self.store.is_internal_file(parent / ".settings.abc123.tmp")
        assert not self.store.is_internal_file(parent / "notes.txt")
        assert not self.store.is_internal_file(self.temp_dir / "settings.json")


class TestDefaults:
    """Test default settings construction."""

    def test_one_destination_per_category(self):
        mapping = default_settings("/home/user/.local/share/desksort/Sorted")
        assert list(mapping) == category_names()
        assert mapping["images"] == str(Path("/home/user/.local/share/desksort/Sorted") / "images")

    def test_defaults_are_valid(self):
        mapping = default_settings(Path("/tmp/Sorted"))
        assert validate_settings(mapping) == mapping
