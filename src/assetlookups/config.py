"""Configuration utilities for ASSETLOOKUPS.

This module centralizes small helpers and constants related to application
configuration. Everything is read from the environment:

- ``ASSETLOOKUPS_DB_URL``: SQLAlchemy URL of the lookup store.
- ``ASSETLOOKUPS_CACHE_PATH``: disk cache file (default: the user cache dir).
- ``ASSETLOOKUPS_WARM_START``: load the disk cache at startup (default on).
- ``ASSETLOOKUPS_TRUST_WARM_CACHE``: treat warm data as primed (default off).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from alembic.config import Config
from platformdirs import user_cache_dir

from assetlookups.interfaces.lookups.keys import norm_str, to_bool

APP_NAME = "assetlookups"
CACHE_FILENAME = ".lookups_cache.json"

ENV_DB_URL = "ASSETLOOKUPS_DB_URL"
ENV_CACHE_PATH = "ASSETLOOKUPS_CACHE_PATH"
ENV_WARM_START = "ASSETLOOKUPS_WARM_START"
ENV_TRUST_WARM_CACHE = "ASSETLOOKUPS_TRUST_WARM_CACHE"

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION = Path(__file__).resolve().parent / "adapters" / "db" / "alembic"


class DatabaseUrlNotSetError(Exception):
    """Raised when the ASSETLOOKUPS_DB_URL environment variable is not set."""


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `ASSETLOOKUPS_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `ASSETLOOKUPS_DB_URL` is not set.
    """
    if not (url := os.environ.get(ENV_DB_URL)):
        raise DatabaseUrlNotSetError
    return url


def default_cache_path() -> Path:
    """Return the default disk cache file location (per-user cache dir)."""
    return Path(user_cache_dir(APP_NAME, appauthor=False)) / CACHE_FILENAME


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = norm_str(environ.get(name))
    return to_bool(raw) if raw else default


@dataclass(frozen=True)
class CacheSettings:
    """Lookup cache settings."""

    path: Path
    warm_start: bool = True
    trust_warm_cache: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CacheSettings:
        """Read cache settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        raw_path = norm_str(env.get(ENV_CACHE_PATH))
        return cls(
            path=Path(raw_path).expanduser() if raw_path else default_cache_path(),
            warm_start=_env_flag(env, ENV_WARM_START, True),
            trust_warm_cache=_env_flag(env, ENV_TRUST_WARM_CACHE, False),
        )


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for the lookup store migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → the packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL (e.g., `sqlite:///lookups.db`). Can be
            `None` (default) only in contexts where Alembic won't need to
            connect to the DB.
        stdout: Text stream Alembic will write status lines to. Defaults to
            `sys.stdout`; override in tests to capture output.

    Returns:
        An `alembic.config.Config` pointing to the packaged migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(ALEMBIC_SCRIPT_LOCATION_KEY, str(ALEMBIC_SCRIPT_LOCATION))
    return cfg
