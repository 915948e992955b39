"""In-memory lookup cache state."""

from __future__ import annotations

from dataclasses import dataclass, field

from assetlookups.interfaces.lookups.model import LookupSnapshot

#: Primed timestamp marking the cache as stale; never equals a real snapshot's.
STALE = -1


@dataclass(slots=True)
class LookupCacheState:
    """Hydrated lookup data plus the timestamp it was primed from.

    Owned by exactly one :class:`LookupCacheCoordinator`; nothing else mutates
    it. ``from_disk`` marks data loaded by a warm start that the snapshot
    source has not confirmed yet.
    """

    snapshot: LookupSnapshot = field(default_factory=LookupSnapshot)
    primed_mtime_ms: int = STALE
    from_disk: bool = False

    @property
    def is_primed(self) -> bool:
        return self.primed_mtime_ms != STALE

    def reset(self) -> None:
        """Drop all data and mark the cache stale."""
        self.snapshot = LookupSnapshot()
        self.primed_mtime_ms = STALE
        self.from_disk = False

    def hydrate(self, snapshot: LookupSnapshot) -> None:
        """Replace all data with a private copy of ``snapshot`` and mark it primed."""
        self.snapshot = snapshot.copy()
        self.primed_mtime_ms = snapshot.mtime_ms
        self.from_disk = False

    def hydrate_warm(self, snapshot: LookupSnapshot, *, trusted: bool = False) -> None:
        """Load data read from the disk cache.

        Unless ``trusted``, the data stays unprimed until the snapshot source
        confirms its timestamp (see :meth:`confirm_warm`).
        """
        self.snapshot = snapshot.copy()
        self.primed_mtime_ms = snapshot.mtime_ms if trusted else STALE
        self.from_disk = True

    def confirm_warm(self) -> None:
        """Mark warm data as primed after the source reported the same timestamp."""
        self.primed_mtime_ms = self.snapshot.mtime_ms
        self.from_disk = False
