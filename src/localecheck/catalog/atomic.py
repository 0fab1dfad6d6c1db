"""Atomic catalog writes.

Writes go to a temporary file in the target directory, are synced to disk and
then renamed over the target. The temporary handle is closed on every exit
path; if anything fails before the rename, the original file is untouched.

Example:
    >>> with AtomicFileWriter("Localizable.xcstrings") as writer:
    ...     writer.write(payload)
    ...     writer.commit()
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class AtomicOperation:
    """Result of an atomic write.

    Attributes:
        path: Path that was written.
        backup_path: Path to the backup of the previous file (if created).
        bytes_written: Number of bytes written.
    """

    path: Path
    backup_path: Path | None = None
    bytes_written: int = 0


class AtomicFileWriter:
    """Atomic file writer using the write-to-temp-then-rename pattern."""

    def __init__(
        self,
        path: Path | str,
        create_backup: bool = False,
        sync_on_commit: bool = True,
    ) -> None:
        """Initialize the atomic writer.

        Args:
            path: Target file path.
            create_backup: Copy the existing file to ``<name>.bak`` before replacing it.
            sync_on_commit: Whether to fsync before rename.
        """
        self._path = Path(path)
        self._create_backup = create_backup
        self._sync_on_commit = sync_on_commit

        self._temp_file: Any = None
        self._temp_path: Path | None = None
        self._committed = False
        self._bytes_written = 0

    def __enter__(self) -> "AtomicFileWriter":
        fd, temp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        self._temp_path = Path(temp_path)
        self._temp_file = os.fdopen(fd, "wb")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._temp_file and not self._temp_file.closed:
            self._temp_file.close()

        # Clean up temp file if not committed
        if not self._committed and self._temp_path and self._temp_path.exists():
            self._temp_path.unlink(missing_ok=True)

    def write(self, data: bytes) -> int:
        if self._committed:
            raise RuntimeError("Cannot write after commit")
        if self._temp_file is None:
            raise RuntimeError("Must be used within context manager")
        count = self._temp_file.write(data)
        self._bytes_written += count
        return count

    def commit(self) -> AtomicOperation:
        """Rename the temp file over the target."""
        if self._committed:
            raise RuntimeError("Already committed")
        if self._temp_file is None or self._temp_path is None:
            raise RuntimeError("Must be used within context manager")

        self._temp_file.flush()
        if self._sync_on_commit:
            os.fsync(self._temp_file.fileno())
        self._temp_file.close()

        backup_path = None
        if self._create_backup and self._path.exists():
            backup_path = self._path.with_name(f"{self._path.name}.bak")
            shutil.copy2(self._path, backup_path)

        if self._path.exists():
            shutil.copymode(self._path, self._temp_path)
        self._temp_path.replace(self._path)
        self._committed = True

        return AtomicOperation(
            path=self._path,
            backup_path=backup_path,
            bytes_written=self._bytes_written,
        )


def atomic_write(path: Path | str, content: bytes, create_backup: bool = False) -> AtomicOperation:
    """Convenience function for a single atomic write."""
    with AtomicFileWriter(path, create_backup=create_backup) as writer:
        writer.write(content)
        return writer.commit()
