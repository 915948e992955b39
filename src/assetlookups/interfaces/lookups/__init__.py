"""Lookup interfaces for assetlookups."""

from .errors import (
    DiskCacheError,
    InvalidSnapshotError,
    LookupCacheError,
    LookupStoreUnavailableError,
    SnapshotSourceError,
)
from .lookup_writer import BOOLEAN_SETTINGS, LookupWriter, WriteResult
from .model import (
    AssetTypeLinks,
    ColorScopes,
    CompanyLocationColors,
    CompanyRecord,
    GlobalColors,
    KeywordLists,
    LocationColors,
    LocationLinks,
    LookupSnapshot,
    LookupTree,
    StatusSettings,
)
from .snapshot_source import SnapshotSource

__all__ = [
    "AssetTypeLinks",
    "BOOLEAN_SETTINGS",
    "ColorScopes",
    "CompanyLocationColors",
    "CompanyRecord",
    "DiskCacheError",
    "GlobalColors",
    "InvalidSnapshotError",
    "KeywordLists",
    "LocationColors",
    "LocationLinks",
    "LookupCacheError",
    "LookupSnapshot",
    "LookupStoreUnavailableError",
    "LookupTree",
    "LookupWriter",
    "SnapshotSource",
    "SnapshotSourceError",
    "StatusSettings",
    "WriteResult",
]
