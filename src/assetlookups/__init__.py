"""ASSETLOOKUPS

The lookup-cache layer of an infrastructure asset-management application.
It keeps companies, locations, asset types, display colours, photo links,
status settings and keyword lists in memory in front of a slower persistence
backend, with a JSON warm-start file keyed by the backend's modification time.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
