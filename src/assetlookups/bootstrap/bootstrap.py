"""Wire the lookup store, cache coordinator and repository together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetlookups import config
from assetlookups.adapters.db.engine import make_engine
from assetlookups.adapters.lookups.sqlalchemy_store import SqlAlchemyLookupStore
from assetlookups.cache.coordinator import LookupCacheCoordinator
from assetlookups.cache.disk import DiskCacheFile
from assetlookups.service_layer.lookups_repo import LookupsRepository

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from assetlookups.interfaces.lookups.lookup_writer import LookupWriter
    from assetlookups.interfaces.lookups.snapshot_source import SnapshotSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    engine: Engine
    cache: LookupCacheCoordinator
    lookups: LookupsRepository


def build_lookups_repository(
    store: SnapshotSource,
    writer: LookupWriter,
    settings: config.CacheSettings,
) -> LookupsRepository:
    """Build the cache coordinator over ``store`` and the repository on top of it.

    Runs the warm start when ``settings.warm_start`` is set.
    """
    cache = LookupCacheCoordinator(
        store,
        DiskCacheFile(settings.path),
        trust_warm_cache=settings.trust_warm_cache,
    )
    if settings.warm_start:
        cache.warm_start()
    return LookupsRepository(cache, writer)


def bootstrap(
    db_url: str | None = None, settings: config.CacheSettings | None = None
) -> AppContainer:
    """Build the application from configuration.

    Args:
        db_url: Database URL; defaults to `ASSETLOOKUPS_DB_URL`.
        settings: Cache settings; defaults to the environment.

    Raises:
        DatabaseUrlNotSetError: If no URL is given and the variable is unset.
    """
    url = db_url or config.get_db_url()
    settings = settings or config.CacheSettings.from_env()
    engine = make_engine(url)
    store = SqlAlchemyLookupStore(engine)
    lookups = build_lookups_repository(store, store, settings)
    logger.debug("Bootstrapped lookups (cache file: %s)", settings.path)
    return AppContainer(engine=engine, cache=lookups.cache, lookups=lookups)
