"""
Durable slot storage for the custom recipe collection.

A slot is a single named unit of persistent storage holding one text value
(the JSON-serialized recipe collection). Reading a slot returns the last
fully-written value, or None before the first write. Writing replaces the
whole value; a reader never observes a partial write.

Implementations:
- FileSlotStorage: one `<slot>.json` file per slot in a local data directory
- MemorySlotStorage: process-local dict (tests, throwaway sessions)
"""

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import StorageCorrupt

logger = logging.getLogger(__name__)

# Slot names become file names, so keep them to a safe character set
_SLOT_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class SlotStorage(ABC):
    """
    Abstract base class for durable slot backends.

    All backends must:
    - Return None from read() for a slot that has never been written
    - Make write() replace the slot atomically from the caller's perspective
    """

    @abstractmethod
    def read(self, slot: str) -> Optional[str]:
        """
        Read the current value of a slot.

        Args:
            slot: Slot name (e.g., "customRecipes")

        Returns:
            The last fully-written value, or None if the slot is absent.

        Raises:
            StorageCorrupt: If the slot exists but cannot be read.
        """
        pass

    @abstractmethod
    def write(self, slot: str, text: str) -> None:
        """
        Replace the value of a slot.

        Args:
            slot: Slot name
            text: Complete new value
        """
        pass


class MemorySlotStorage(SlotStorage):
    """In-memory slot storage. Values are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})

    def read(self, slot: str) -> Optional[str]:
        return self._slots.get(slot)

    def write(self, slot: str, text: str) -> None:
        self._slots[slot] = text


class FileSlotStorage(SlotStorage):
    """
    File-backed slot storage.

    Each slot lives in `<directory>/<slot>.json`. Writes go to a temporary file
    in the same directory which is then moved over the slot file with
    os.replace(), so a crash mid-write leaves the previous value intact.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, slot: str) -> Path:
        """
        Get the file path backing a slot.

        Raises:
            ValueError: If the slot name is not a plain file-safe identifier
        """
        if not _SLOT_NAME_RE.match(slot or ""):
            raise ValueError(f"Invalid slot name: {slot!r}")
        return self.directory / f"{slot}.json"

    def read(self, slot: str) -> Optional[str]:
        path = self.path_for(slot)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageCorrupt(f"Could not read slot '{slot}' from {path}: {e}") from e

    def write(self, slot: str, text: str) -> None:
        path = self.path_for(slot)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{slot}.", suffix=".tmp", dir=str(self.directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Temporary slot file already gone: %s", tmp_name)
            raise
        logger.debug("Wrote slot '%s' (%d bytes) to %s", slot, len(text), path)
