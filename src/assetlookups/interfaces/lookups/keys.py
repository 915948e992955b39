"""Normalisation helpers for free-text lookup keys.

Lookup names come from user input (forms, spreadsheets), so every comparison
goes through the same small set of helpers:

* ``norm_str``: stringify and trim; ``None`` becomes ``""``.
* ``norm_key``: ``norm_str`` then lower-case; used for case-insensitive maps.
* ``to_bool``: parse spreadsheet-style truthy text (``"TRUE"``, ``"y"``, ``1``...).
* ``uniq_sorted``: de-duplicate trimmed names and sort them case-insensitively.
"""

from __future__ import annotations

from collections.abc import Iterable

TRUTHY = frozenset({"true", "1", "yes", "y", "t"})


def norm_str(value: object) -> str:
    """Return ``value`` as a trimmed string (``None`` -> ``""``)."""
    if value is None:
        return ""
    return str(value).strip()


def norm_key(value: object) -> str:
    """Return the case-insensitive form of ``value`` (trimmed, lower-cased)."""
    return norm_str(value).lower()


def to_bool(value: object) -> bool:
    """Interpret ``value`` as a boolean flag.

    Real booleans are returned as-is. Everything else is compared, trimmed and
    lower-cased, against the accepted truthy spellings.
    """
    if isinstance(value, bool):
        return value
    return norm_key(value) in TRUTHY


def uniq_sorted(values: Iterable[object]) -> list[str]:
    """Trim, drop blanks, de-duplicate and sort case-insensitively.

    Duplicates are exact (after trimming); ``"Pump"`` and ``"pump"`` are both
    kept, in a stable order.
    """
    unique = {s for s in (norm_str(v) for v in values) if s}
    return sorted(unique, key=lambda s: (s.lower(), s))
