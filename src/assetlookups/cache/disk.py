"""Disk cache file for lookup snapshots.

A single JSON document holding the last primed snapshot in its flattened form
(objects and lists only) plus a format version:

    {"version": 1, "snapshot": {"mtime_ms": ..., "companies": [...], ...}}

The file is a local performance aid. Deleting it never changes behaviour,
it only makes the next start cold. Writes go to a temp file in the same
directory and are moved into place with :func:`os.replace`, so readers never
observe a half-written document.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from assetlookups.interfaces.lookups.errors import DiskCacheError, InvalidSnapshotError
from assetlookups.interfaces.lookups.model import LookupSnapshot

PathLike = str | os.PathLike[str]

FORMAT_VERSION = 1


class DiskCacheFile:
    """Load, save and clear the lookup cache file at ``path``."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    def load(self) -> LookupSnapshot | None:
        """Read the cached snapshot.

        Returns:
            LookupSnapshot | None: The cached snapshot, or None if no file exists.

        Raises:
            DiskCacheError: If the file cannot be read or does not hold a valid
                snapshot of the current format version.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise DiskCacheError(str(self.path), f"unreadable: {e}") from e

        try:
            document: Any = json.loads(text)
        except ValueError as e:
            raise DiskCacheError(str(self.path), f"not valid JSON: {e}") from e

        if not isinstance(document, dict) or document.get("version") != FORMAT_VERSION:
            raise DiskCacheError(str(self.path), "unknown format version")
        raw = document.get("snapshot")
        if not isinstance(raw, dict):
            raise DiskCacheError(str(self.path), "missing snapshot")
        try:
            return LookupSnapshot.from_mapping(raw)
        except InvalidSnapshotError as e:
            raise DiskCacheError(str(self.path), e.reason) from e

    def save(self, snapshot: LookupSnapshot) -> None:
        """Atomically replace the file with ``snapshot``.

        Raises:
            DiskCacheError: If the file cannot be written.
        """
        document = {"version": FORMAT_VERSION, "snapshot": snapshot.to_dict()}
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f"{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(document, tmp, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise DiskCacheError(str(self.path), f"write failed: {e}") from e

    def clear(self) -> None:
        """Delete the file; a missing file is not an error.

        Raises:
            DiskCacheError: If an existing file cannot be removed.
        """
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise DiskCacheError(str(self.path), f"delete failed: {e}") from e
