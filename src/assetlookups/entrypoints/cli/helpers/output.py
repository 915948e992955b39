"""Output helpers: JSON to stdout, write outcomes to stderr."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from .messages import success

if TYPE_CHECKING:
    from assetlookups.interfaces.lookups.lookup_writer import WriteResult


def echo_json(data: Any) -> None:
    """Print ``data`` as indented JSON on stdout."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def report(result: WriteResult, done: str) -> None:
    """Announce a write outcome.

    Raises:
        click.ClickException: If the backend reported a failure (exit code 1).
    """
    if not result.success:
        raise click.ClickException(
            result.message or "The lookup store rejected the change."
        )
    if result.added is False:
        done = f"{done} (already present)"
    success(done)
