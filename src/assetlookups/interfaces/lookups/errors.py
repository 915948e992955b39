"""Errors related to the lookup cache and its persistence ports."""


class LookupCacheError(Exception):
    """Base class for all lookup-cache related errors."""


class InvalidSnapshotError(LookupCacheError):
    """Raised when raw lookup data cannot be turned into a snapshot."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid lookup snapshot: {reason}")
        self.reason = reason


class SnapshotSourceError(LookupCacheError):
    """Raised when the snapshot source could not produce a snapshot."""

    def __init__(self, source: str, message: str | None = None) -> None:
        if message is None:
            message = f"Snapshot source ({source}) failed"
        super().__init__(message)
        self.source = source


class LookupStoreUnavailableError(SnapshotSourceError):
    """Raised when the lookup store cannot be reached (database down, locked...)."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(source, f"Lookup store ({source}) unavailable: {detail}")
        self.detail = detail


class DiskCacheError(LookupCacheError):
    """Raised when the disk cache file cannot be read or written.

    The cache coordinator always catches this error; it never reaches callers
    of the read/write API.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Disk cache ({path}): {reason}")
        self.path = path
        self.reason = reason
