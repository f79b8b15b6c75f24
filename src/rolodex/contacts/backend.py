"""Snapshot persistence for the contact store.

A backend stores the whole collection as one snapshot. It keeps no
in-memory state of its own.
"""

import json
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .errors import MalformedSnapshotError, SnapshotNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_SUFFIX = ".bak"


class SnapshotBackend(ABC):
    """Base interface for snapshot storage."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human readable description of where snapshots live."""
        ...

    @abstractmethod
    def read(self) -> list[dict[str, Any]]:
        """Read the stored snapshot.

        Raises:
            SnapshotNotFoundError: Nothing has been stored yet.
            MalformedSnapshotError: Stored data is not a list of mappings.
        """
        ...

    @abstractmethod
    def write(self, records: list[dict[str, str]]) -> None:
        """Replace the stored snapshot.

        Raises:
            OSError: If the snapshot could not be written.
        """
        ...


class JsonFileBackend(SnapshotBackend):
    """Stores the snapshot as a JSON array in a UTF-8 file.

    Before replacing an existing file its current bytes are copied to
    ``<path><backup_suffix>``. The new content goes to a temporary file in
    the same directory which is then moved over the destination, so the
    destination is never left half written.
    """

    def __init__(
        self,
        path: str | Path,
        backup_suffix: str = DEFAULT_BACKUP_SUFFIX,
        indent: int | None = 2,
    ) -> None:
        """Initialize the backend.

        Args:
            path: Destination JSON file.
            backup_suffix: Appended to path to name the backup file.
            indent: JSON indentation, None for compact output.
        """
        if not backup_suffix:
            raise ValueError("backup_suffix cannot be empty")
        self.path = Path(path)
        self.backup_suffix = backup_suffix
        self.indent = indent

    @property
    def location(self) -> str:
        return str(self.path)

    @property
    def backup_path(self) -> Path:
        """Path of the backup copy written before each overwrite."""
        return self.path.with_name(self.path.name + self.backup_suffix)

    def read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            raise SnapshotNotFoundError(f"No contacts file at {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedSnapshotError(f"Invalid JSON in {self.path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedSnapshotError(f"Cannot read {self.path}: {e}") from e
        except (ValueError, RecursionError) as e:
            # oversized integer literals, nesting deeper than the parser allows
            raise MalformedSnapshotError(f"Cannot parse {self.path}: {e}") from e

        if not isinstance(data, list):
            raise MalformedSnapshotError(
                f"Expected a JSON array in {self.path}, got {type(data).__name__}"
            )
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise MalformedSnapshotError(
                    f"Entry {index} in {self.path} is not an object"
                )
        return data

    def write(self, records: list[dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.path.exists():
            shutil.copyfile(self.path, self.backup_path)
            logger.debug("Backed up %s to %s", self.path, self.backup_path)

        fd, temp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=self.indent, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        logger.debug("Wrote %d contact(s) to %s", len(records), self.path)
