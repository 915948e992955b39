"""Lookup cache: in-memory state, disk cache file and the coordinator.

Dependency rule: may import `assetlookups.interfaces`; must not import
adapters, the service layer or entrypoints.
"""

from .coordinator import LookupCacheCoordinator
from .disk import DiskCacheFile
from .state import STALE, LookupCacheState

__all__ = ["DiskCacheFile", "LookupCacheCoordinator", "LookupCacheState", "STALE"]
