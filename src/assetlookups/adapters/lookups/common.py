"""Helpers shared by the lookup store adapters."""

from __future__ import annotations

import random
from collections.abc import Iterable

from assetlookups.interfaces.lookups.keys import norm_str
from assetlookups.interfaces.lookups.lookup_writer import WriteResult

KEYWORD_KINDS = ("inspection", "project")


def random_hex_color(rng: random.Random | None = None) -> str:
    """Return a random ``#rrggbb`` colour."""
    value = (rng or random).randrange(0x1000000)
    return f"#{value:06x}"


def clean_keywords(keywords: Iterable[object]) -> list[str]:
    """Trim, drop blanks and exact duplicates; keep the given order."""
    out: dict[str, None] = {}
    for keyword in keywords:
        text = norm_str(keyword)
        if text:
            out.setdefault(text, None)
    return list(out)


def missing(*pairs: tuple[str, str]) -> WriteResult | None:
    """Return a failed result naming the first blank ``(field, value)`` pair."""
    for name, value in pairs:
        if not value:
            return WriteResult.failed(f"{name} is required")
    return None
