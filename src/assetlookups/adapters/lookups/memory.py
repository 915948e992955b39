"""In-memory lookup store.

Implements both :class:`SnapshotSource` and :class:`LookupWriter` over plain
dictionaries. Hierarchy names and colour keys are matched case-insensitively
and keep the spelling they were first written with.

``mtime_ms`` is a counter bumped by every successful mutation, so it doubles
as the modification timestamp for cache freshness checks.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from assetlookups.interfaces.lookups.keys import norm_key, norm_str
from assetlookups.interfaces.lookups.lookup_writer import (
    BOOLEAN_SETTINGS,
    LookupWriter,
    WriteResult,
)
from assetlookups.interfaces.lookups.model import LookupSnapshot
from assetlookups.interfaces.lookups.snapshot_source import SnapshotSource

from .common import clean_keywords, missing, random_hex_color

V = TypeVar("V")

# pylint: disable=too-many-public-methods


def _find(bucket: dict[str, V], name: str) -> str | None:
    """Return the stored key matching ``name`` case-insensitively."""
    wanted = norm_key(name)
    for key in bucket:
        if key.lower() == wanted:
            return key
    return None


@dataclass(slots=True)
class _Location:
    link: str = ""
    # asset type name -> link
    asset_types: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class _Company:
    active: bool = True
    description: str = ""
    email: str = ""
    locations: dict[str, _Location] = field(default_factory=dict)


@dataclass(slots=True)
class InMemoryLookupData:
    """Backing data for :class:`InMemoryLookupStore`."""

    companies: dict[str, _Company] = field(default_factory=dict)
    # (asset_type, company, location) -> colour; "" marks an unscoped level
    colors: dict[tuple[str, str, str], str] = field(default_factory=dict)
    status_colors: dict[str, str] = field(default_factory=dict)
    settings: dict[str, bool] = field(default_factory=dict)
    keywords: dict[str, list[str]] = field(default_factory=dict)
    mtime_ms: int = 0


class InMemoryLookupStore(SnapshotSource, LookupWriter):
    """Dictionary-backed lookup store, used by tests and as a reference."""

    NAME = "memory"

    def __init__(self, data: InMemoryLookupData | None = None) -> None:
        self.data = data if data is not None else InMemoryLookupData()

    # --- SnapshotSource ---

    async def read_snapshot(self) -> LookupSnapshot:
        return LookupSnapshot.from_mapping(self.to_raw())

    async def read_mtime(self) -> int | None:
        return self.data.mtime_ms

    def touch(self) -> None:
        """Bump the modification counter without changing any data."""
        self.data.mtime_ms += 1

    def to_raw(self) -> dict[str, Any]:
        """Return the current data in :meth:`LookupSnapshot.from_mapping` form."""
        d = self.data
        raw: dict[str, Any] = {
            "mtime_ms": d.mtime_ms,
            "companies": [],
            "locations_by_company": {},
            "asset_types_by_company_location": {},
            "colors_global": {},
            "colors_by_location": {},
            "colors_by_company_location": {},
            "location_links": {},
            "asset_type_links": {},
            "status_colors": dict(d.status_colors),
            "apply_status_colors_on_map": d.settings.get(
                "apply_status_colors_on_map", False
            ),
            "apply_repair_colors_on_map": d.settings.get(
                "apply_repair_colors_on_map", False
            ),
            "inspection_keywords": list(d.keywords.get("inspection", [])),
            "project_keywords": list(d.keywords.get("project", [])),
        }
        for name, company in d.companies.items():
            raw["companies"].append(
                {
                    "name": name,
                    "active": company.active,
                    "description": company.description,
                    "email": company.email,
                }
            )
            raw["locations_by_company"][name] = list(company.locations)
            for loc_name, location in company.locations.items():
                raw["asset_types_by_company_location"].setdefault(name, {})[
                    loc_name
                ] = list(location.asset_types)
                raw["location_links"].setdefault(name, {})[loc_name] = location.link
                for at_name, link in location.asset_types.items():
                    raw["asset_type_links"].setdefault(name, {}).setdefault(
                        loc_name, {}
                    )[at_name] = link

        for (asset_type, company, location), color in d.colors.items():
            if company:
                raw["colors_by_company_location"].setdefault(company, {}).setdefault(
                    location, {}
                )[asset_type] = color
            elif location:
                raw["colors_by_location"].setdefault(location, {})[asset_type] = color
            else:
                raw["colors_global"][asset_type] = color
        return raw

    # --- Internals ---

    def _commit(self, result: WriteResult) -> WriteResult:
        if result.success:
            self.data.mtime_ms += 1
        return result

    def _company(self, company: str) -> tuple[str, _Company] | None:
        key = _find(self.data.companies, company)
        return None if key is None else (key, self.data.companies[key])

    def _location(
        self, company: str, location: str
    ) -> tuple[str, str, _Location] | None:
        found = self._company(company)
        if found is None:
            return None
        co_name, co = found
        key = _find(co.locations, location)
        return None if key is None else (co_name, key, co.locations[key])

    def _color_key(
        self, asset_type: str, company: str, location: str
    ) -> tuple[str, str, str]:
        """Return the stored spelling of a colour key.

        An existing entry matching case-insensitively keeps its key. Otherwise
        a company+location key takes the hierarchy's spelling when the
        location exists.
        """
        wanted = (norm_key(asset_type), norm_key(company), norm_key(location))
        for key in self.data.colors:
            if tuple(part.lower() for part in key) == wanted:
                return key
        if company:
            found = self._location(company, location)
            if found is not None:
                company, location, location_data = found
                asset_type = _find(location_data.asset_types, asset_type) or asset_type
        return asset_type, company, location

    def _set_color(self, key: tuple[str, str, str], color: str) -> WriteResult:
        key = self._color_key(*key)
        if color:
            self.data.colors[key] = color
        else:
            self.data.colors.pop(key, None)
        return self._commit(WriteResult.ok())

    # --- Colours ---

    async def set_asset_type_color(self, asset_type: str, color: str) -> WriteResult:
        at = norm_str(asset_type)
        if failure := missing(("asset_type", at)):
            return failure
        return self._set_color((at, "", ""), norm_str(color))

    async def set_asset_type_color_for_location(
        self, asset_type: str, location: str, color: str
    ) -> WriteResult:
        at, loc = norm_str(asset_type), norm_str(location)
        if failure := missing(("asset_type", at), ("location", loc)):
            return failure
        return self._set_color((at, "", loc), norm_str(color))

    async def set_asset_type_color_for_company_location(
        self, asset_type: str, company: str, location: str, color: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)
        if failure := missing(("asset_type", at), ("company", co), ("location", loc)):
            return failure
        return self._set_color((at, co, loc), norm_str(color))

    # --- Hierarchy ---

    async def upsert_company(
        self, name: str, active: bool = True, description: str = "", email: str = ""
    ) -> WriteResult:
        co = norm_str(name)
        if failure := missing(("company", co)):
            return failure
        found = self._company(co)
        record = _Company(bool(active), norm_str(description), norm_str(email))
        if found is None:
            self.data.companies[co] = record
            return self._commit(WriteResult.ok(added=True))
        existing = found[1]
        existing.active = record.active
        existing.description = record.description
        existing.email = record.email
        return self._commit(WriteResult.ok(added=False))

    async def upsert_location(self, location: str, company: str) -> WriteResult:
        loc, co = norm_str(location), norm_str(company)
        if failure := missing(("location", loc), ("company", co)):
            return failure
        found = self._company(co)
        if found is None:
            return WriteResult.failed(f"Company '{co}' not found")
        locations = found[1].locations
        if _find(locations, loc) is not None:
            return self._commit(WriteResult.ok(added=False))
        locations[loc] = _Location()
        return self._commit(WriteResult.ok(added=True))

    async def upsert_asset_type(
        self, asset_type: str, company: str, location: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)
        if failure := missing(("asset_type", at), ("company", co), ("location", loc)):
            return failure
        found = self._location(co, loc)
        if found is None:
            return WriteResult.failed(f"Location '{loc}' not found for company '{co}'")
        co_name, loc_name, location_data = found
        if _find(location_data.asset_types, at) is not None:
            return self._commit(WriteResult.ok(added=False))
        location_data.asset_types[at] = ""
        key = self._color_key(at, co_name, loc_name)
        self.data.colors.setdefault(key, random_hex_color())
        return self._commit(WriteResult.ok(added=True))

    async def delete_company(self, company: str) -> WriteResult:
        co = norm_str(company)
        found = self._company(co)
        if found is None:
            return WriteResult.failed(f"Company '{co}' not found")
        del self.data.companies[found[0]]
        wanted = norm_key(found[0])
        for key in [k for k in self.data.colors if k[1].lower() == wanted]:
            del self.data.colors[key]
        return self._commit(WriteResult.ok())

    async def delete_location(self, company: str, location: str) -> WriteResult:
        co, loc = norm_str(company), norm_str(location)
        found = self._location(co, loc)
        if found is None:
            return WriteResult.failed(f"Location '{loc}' not found for company '{co}'")
        co_name, loc_name, _ = found
        del self.data.companies[co_name].locations[loc_name]
        wanted = (norm_key(co_name), norm_key(loc_name))
        for key in [
            k for k in self.data.colors if (k[1].lower(), k[2].lower()) == wanted
        ]:
            del self.data.colors[key]
        return self._commit(WriteResult.ok())

    async def delete_asset_type(
        self, company: str, location: str, asset_type: str
    ) -> WriteResult:
        co, loc, at = norm_str(company), norm_str(location), norm_str(asset_type)
        found = self._location(co, loc)
        at_name = None if found is None else _find(found[2].asset_types, at)
        if found is None or at_name is None:
            return WriteResult.failed(
                f"Asset type '{at}' not found at '{co}' / '{loc}'"
            )
        co_name, loc_name, location_data = found
        del location_data.asset_types[at_name]
        self.data.colors.pop(self._color_key(at_name, co_name, loc_name), None)
        return self._commit(WriteResult.ok())

    # --- Links ---

    async def set_location_link(
        self, company: str, location: str, link: str
    ) -> WriteResult:
        co, loc = norm_str(company), norm_str(location)
        found = self._location(co, loc)
        if found is None:
            return WriteResult.failed(f"Location '{loc}' not found for company '{co}'")
        found[2].link = norm_str(link)
        return self._commit(WriteResult.ok())

    async def set_asset_type_link(
        self, asset_type: str, company: str, location: str, link: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)
        found = self._location(co, loc)
        at_name = None if found is None else _find(found[2].asset_types, at)
        if found is None or at_name is None:
            return WriteResult.failed(
                f"Asset type '{at}' not found at '{co}' / '{loc}'"
            )
        found[2].asset_types[at_name] = norm_str(link)
        return self._commit(WriteResult.ok())

    # --- Settings ---

    async def set_status_color(self, status_key: str, color: str) -> WriteResult:
        key, col = norm_key(status_key), norm_str(color)
        if failure := missing(("status", key), ("color", col)):
            return failure
        self.data.status_colors[key] = col
        return self._commit(WriteResult.ok())

    async def delete_status(self, status_key: str) -> WriteResult:
        key = norm_key(status_key)
        if self.data.status_colors.pop(key, None) is None:
            return WriteResult.failed(f"Status '{key}' not found")
        return self._commit(WriteResult.ok())

    async def set_setting_boolean(self, key: str, value: bool) -> WriteResult:
        name = norm_key(key)
        if name not in BOOLEAN_SETTINGS:
            return WriteResult.failed(f"Unknown setting '{key}'")
        self.data.settings[name] = bool(value)
        return self._commit(WriteResult.ok())

    async def set_inspection_keywords(self, keywords: Sequence[str]) -> WriteResult:
        self.data.keywords["inspection"] = clean_keywords(keywords)
        return self._commit(WriteResult.ok())

    async def set_project_keywords(self, keywords: Sequence[str]) -> WriteResult:
        self.data.keywords["project"] = clean_keywords(keywords)
        return self._commit(WriteResult.ok())
