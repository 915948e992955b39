"""Service layer for ASSETLOOKUPS.

Implements the lookup read/write API on top of the cache coordinator and the
write backend port.

Dependency rule: may import `assetlookups.interfaces` and `assetlookups.cache`,
but not `assetlookups.adapters` or `assetlookups.entrypoints`.
"""
