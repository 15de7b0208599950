"""
Tests for durable slot storage backends.
"""

import os
from unittest.mock import patch

import pytest

from recipe_hub.errors import StorageCorrupt
from recipe_hub.storage import FileSlotStorage, MemorySlotStorage


class TestMemorySlotStorage:
    """Test the in-memory backend."""

    def test_absent_slot_reads_none(self):
        """Test that an unwritten slot reads as None."""
        assert MemorySlotStorage().read("customRecipes") is None

    def test_write_then_read(self):
        """Test that the last write is returned."""
        storage = MemorySlotStorage()
        storage.write("customRecipes", "[1]")
        storage.write("customRecipes", "[2]")
        assert storage.read("customRecipes") == "[2]"


class TestFileSlotStorage:
    """Test the file-backed backend."""

    def test_creates_directory(self, tmp_path):
        """Test that the data directory is created on init."""
        directory = tmp_path / "nested" / "data"
        FileSlotStorage(directory)
        assert directory.is_dir()

    def test_absent_slot_reads_none(self, tmp_path):
        """Test that a missing slot file reads as None."""
        assert FileSlotStorage(tmp_path).read("customRecipes") is None

    def test_write_then_read(self, tmp_path):
        """Test that a written value is read back from <slot>.json."""
        storage = FileSlotStorage(tmp_path)
        storage.write("customRecipes", '[{"id": "1"}]')

        assert (tmp_path / "customRecipes.json").read_text(encoding="utf-8") == '[{"id": "1"}]'
        assert storage.read("customRecipes") == '[{"id": "1"}]'

    def test_write_leaves_no_temp_files(self, tmp_path):
        """Test that only the slot file remains after a write."""
        storage = FileSlotStorage(tmp_path)
        storage.write("customRecipes", "[]")
        storage.write("customRecipes", "[1]")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["customRecipes.json"]

    def test_failed_write_keeps_previous_value(self, tmp_path):
        """Test that a write failing before the replace keeps the old value."""
        storage = FileSlotStorage(tmp_path)
        storage.write("customRecipes", "[1]")

        with patch("recipe_hub.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                storage.write("customRecipes", "[2]")

        assert storage.read("customRecipes") == "[1]"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["customRecipes.json"]

    @pytest.mark.parametrize("slot", ["", "../escape", "a/b", "with space"])
    def test_rejects_unsafe_slot_names(self, tmp_path, slot):
        """Test that slot names cannot escape the data directory."""
        with pytest.raises(ValueError):
            FileSlotStorage(tmp_path).read(slot)

    def test_undecodable_file_raises_storage_corrupt(self, tmp_path):
        """Test that a non-UTF-8 slot file raises StorageCorrupt."""
        (tmp_path / "customRecipes.json").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(StorageCorrupt):
            FileSlotStorage(tmp_path).read("customRecipes")
