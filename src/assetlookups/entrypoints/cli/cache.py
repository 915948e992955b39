"""ASSETLOOKUPS cache commands."""

from __future__ import annotations

import click
import click_extra as clickx

from assetlookups import config
from assetlookups.cache.disk import DiskCacheFile
from assetlookups.interfaces.lookups.errors import DiskCacheError

from .helpers import echo_json, success


@click.group(cls=clickx.ExtraGroup)
def cache() -> None:
    """Disk cache file management."""


@cache.command("path")
def cache_path() -> None:
    """Print the disk cache file location."""
    echo_json(str(config.CacheSettings.from_env().path))


@cache.command("clear")
def cache_clear() -> None:
    """Delete the disk cache file. The next read starts cold."""
    disk = DiskCacheFile(config.CacheSettings.from_env().path)
    try:
        disk.clear()
    except DiskCacheError as e:
        raise click.ClickException(str(e)) from e
    success(f"Lookup cache cleared ({disk.path})")
