"""Bootstrap (composition root) for ASSETLOOKUPS.

Assembles the application at runtime: builds the engine and lookup store,
the cache coordinator (constructed once per process) and the lookups
repository, reading configuration from `assetlookups.config`.

Import rules:
- Entry points import *this* package (not adapters/service_layer/cache).
- This package may import: `assetlookups.adapters`, `assetlookups.cache`,
  `assetlookups.service_layer`, `assetlookups.interfaces`, and
  `assetlookups.config`.
- Inner layers must not import `assetlookups.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap, build_lookups_repository

__all__ = ["AppContainer", "bootstrap", "build_lookups_repository"]
