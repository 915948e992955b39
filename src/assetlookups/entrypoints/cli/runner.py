"""Run lookups-repository coroutines from synchronous Click commands.

Each command bootstraps the application, runs one coroutine against the
lookups repository with :func:`asyncio.run` and disposes the engine.
Configuration and store problems become ``ClickException`` with guidance.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import click
from sqlalchemy.exc import ArgumentError

from assetlookups import config
from assetlookups.bootstrap import AppContainer, bootstrap
from assetlookups.interfaces.lookups.errors import LookupStoreUnavailableError

from .db import INVALID_URL_FORMAT_MSG, MISSING_DB_URL_MSG

if TYPE_CHECKING:
    from assetlookups.service_layer.lookups_repo import LookupsRepository

T = TypeVar("T")

STORE_UNAVAILABLE_MSG = (
    "The lookup store could not be read or written.\n"
    "If this is a new database, run 'assetlookups db upgrade' first."
)


def build_app() -> AppContainer:
    """Bootstrap the application, translating configuration errors."""
    try:
        return bootstrap()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e


def run_with_app(work: Callable[[AppContainer], Awaitable[T]]) -> T:
    """Run ``work`` against a freshly bootstrapped application."""
    app = build_app()
    try:
        return asyncio.run(work(app))
    except LookupStoreUnavailableError as e:
        raise click.ClickException(f"{STORE_UNAVAILABLE_MSG}\n{e}") from e
    finally:
        app.engine.dispose()


def run_lookups(work: Callable[[LookupsRepository], Awaitable[T]]) -> T:
    """Run ``work`` against the lookups repository."""
    return run_with_app(lambda app: work(app.lookups))
