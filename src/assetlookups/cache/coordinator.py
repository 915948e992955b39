"""Lookup cache coordinator.

Decides when to fetch from the snapshot source, hydrates the in-memory state
and maintains the disk cache file.

Freshness check (:meth:`LookupCacheCoordinator.ensure_fresh`):
  1. If the cache is primed and the source offers a cheap timestamp probe
     (``read_mtime()`` returns an int) equal to the primed timestamp, the cached
     data are returned without a fetch.
  2. Otherwise the combined fetch ``read_snapshot()`` runs. Sources without a
     probe therefore pay one full fetch per freshness check.
  3. A fetched timestamp equal to the primed one (or to the timestamp of
     unconfirmed warm data) keeps the cached data. Anything else re-hydrates
     the state and rewrites the disk cache file.

Concurrent callers share one in-flight refresh. Invalidating while a refresh
is in flight detaches it: the callers already waiting get its result, but the
cache is not marked fresh from it.

Disk cache problems are logged and never raised. Snapshot source errors
propagate to the caller; there are no retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from assetlookups.interfaces.lookups.errors import DiskCacheError

from .state import STALE, LookupCacheState

if TYPE_CHECKING:
    from assetlookups.interfaces.lookups.model import LookupSnapshot
    from assetlookups.interfaces.lookups.snapshot_source import SnapshotSource

    from .disk import DiskCacheFile

logger = logging.getLogger(__name__)


class LookupCacheCoordinator:
    """Owns the in-memory lookup state and the disk cache file.

    Args:
        source: Where snapshots come from.
        disk: Disk cache file, or None to run without one.
        trust_warm_cache: Treat data loaded by :meth:`warm_start` as primed, so
            a matching timestamp probe skips the first full fetch. Off by
            default: the first read always validates against the source.
    """

    def __init__(
        self,
        source: SnapshotSource,
        disk: DiskCacheFile | None = None,
        *,
        trust_warm_cache: bool = False,
    ) -> None:
        self.source = source
        self.disk = disk
        self.trust_warm_cache = trust_warm_cache
        self._state = LookupCacheState()
        self._inflight: asyncio.Task[LookupSnapshot] | None = None
        self._generation = 0

    @property
    def primed_mtime_ms(self) -> int:
        """Timestamp the cache was primed from, or ``STALE``."""
        return self._state.primed_mtime_ms

    # --- Freshness ---

    async def ensure_fresh(self) -> LookupSnapshot:
        """Make sure the cache reflects the source, then return the cached snapshot.

        The returned snapshot is owned by the cache; callers must copy anything
        they hand out.

        Raises:
            SnapshotSourceError: If the source fails.
        """
        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._refresh(self._generation))
            task.add_done_callback(self._refresh_done)
            self._inflight = task
        # a cancelled caller must not cancel the refresh other callers share
        return await asyncio.shield(task)

    def _refresh_done(self, task: asyncio.Task[LookupSnapshot]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            task.exception()  # mark retrieved; waiters re-raise it themselves

    async def _refresh(self, generation: int) -> LookupSnapshot:
        state = self._state
        if state.is_primed:
            mtime = await self.source.read_mtime()
            if (
                generation == self._generation
                and mtime is not None
                and mtime == state.primed_mtime_ms
            ):
                return state.snapshot

        snapshot = await self.source.read_snapshot()

        if generation != self._generation:
            logger.debug(
                "Lookup cache invalidated during fetch; not priming from %s",
                snapshot.mtime_ms,
            )
            return snapshot.copy()
        if snapshot.mtime_ms == state.primed_mtime_ms:
            return state.snapshot
        if state.from_disk and snapshot.mtime_ms == state.snapshot.mtime_ms:
            logger.debug("Warm lookup cache confirmed at %s", snapshot.mtime_ms)
            state.confirm_warm()
            return state.snapshot

        logger.debug(
            "Priming lookup cache: %s -> %s", state.primed_mtime_ms, snapshot.mtime_ms
        )
        state.hydrate(snapshot)
        primed = state.snapshot
        await self._save(primed, generation)
        return primed

    # --- Invalidation ---

    def invalidate(self) -> None:
        """Mark the cache stale, drop its data and delete the disk cache file.

        Does not refetch; the next :meth:`ensure_fresh` does.
        """
        self._generation += 1
        self._inflight = None
        self._state.reset()
        if self.disk is not None:
            try:
                self.disk.clear()
            except DiskCacheError as e:
                logger.warning("Could not delete lookup cache file: %s", e)
        logger.debug("Lookup cache invalidated (generation %s)", self._generation)

    # --- Disk cache ---

    def warm_start(self) -> bool:
        """Load the disk cache file into memory, if it holds a usable snapshot.

        Only call this before the first :meth:`ensure_fresh`. An unreadable or
        corrupt file leaves the cache cold.

        Returns:
            bool: True if warm data were loaded.
        """
        if self.disk is None:
            return False
        try:
            snapshot = self.disk.load()
        except DiskCacheError as e:
            logger.warning("Ignoring lookup cache file: %s", e)
            return False
        if snapshot is None:
            logger.debug("No lookup cache file at %s", self.disk.path)
            return False
        self._state.hydrate_warm(snapshot, trusted=self.trust_warm_cache)
        logger.debug(
            "Warm-started lookup cache from %s (mtime %s, trusted=%s)",
            self.disk.path,
            snapshot.mtime_ms,
            self.trust_warm_cache,
        )
        return True

    async def _save(self, snapshot: LookupSnapshot, generation: int) -> None:
        """Write the disk cache file in a worker thread.

        An invalidation that lands while the file is being written removes it
        again, so the file never outlives the data it was written from.
        """
        if self.disk is None:
            return
        try:
            await asyncio.to_thread(self.disk.save, snapshot)
        except DiskCacheError as e:
            logger.warning("Could not write lookup cache file: %s", e)
            return
        if generation != self._generation:
            try:
                await asyncio.to_thread(self.disk.clear)
            except DiskCacheError as e:
                logger.warning("Could not delete lookup cache file: %s", e)


__all__ = ["LookupCacheCoordinator", "STALE"]
