"""Snapshot source interface definitions."""

from __future__ import annotations

import abc

from .model import LookupSnapshot


class SnapshotSource(abc.ABC):
    """Abstract base class for anything that can produce a lookup snapshot."""

    NAME: str = "snapshot-source"

    @abc.abstractmethod
    async def read_snapshot(self) -> LookupSnapshot:
        """Fetch a complete point-in-time snapshot of all lookup data.

        This is the combined fetch: the timestamp and the data arrive together
        and callers should assume it is expensive.

        Returns:
            LookupSnapshot: All lookup data plus the source's modification
            timestamp (``mtime_ms``).

        Raises:
            SnapshotSourceError: If the source cannot produce a snapshot.
        """

    async def read_mtime(self) -> int | None:
        """Return the source's modification timestamp without fetching data.

        Sources that have no cheap timestamp-only read keep this default,
        which returns ``None``. The cache coordinator then falls back to
        the combined fetch of :meth:`read_snapshot` on every freshness check.

        Returns:
            int | None: The timestamp in milliseconds, or None if this source
            cannot probe cheaply.

        Raises:
            SnapshotSourceError: If the source is unreachable.
        """
        return None
