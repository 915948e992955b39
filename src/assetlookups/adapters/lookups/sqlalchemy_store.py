"""SQLAlchemy-backed lookup store.

Implements :class:`SnapshotSource` and :class:`LookupWriter` over the tables
in :mod:`assetlookups.adapters.lookups.schema`.

Every successful write bumps ``lookup_meta.modified_at_ms`` inside the same
transaction, strictly increasing even when two writes land in the same
millisecond. That value is the snapshot timestamp, and :meth:`read_mtime`
reads nothing else, so freshness checks stay cheap.

The engine API is blocking; each coroutine runs its unit of work in a worker
thread via :func:`asyncio.to_thread`. Driver errors are mapped to
:class:`LookupStoreUnavailableError`.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import DBAPIError

from assetlookups.interfaces.lookups.errors import LookupStoreUnavailableError
from assetlookups.interfaces.lookups.keys import norm_key, norm_str
from assetlookups.interfaces.lookups.lookup_writer import (
    BOOLEAN_SETTINGS,
    LookupWriter,
    WriteResult,
)
from assetlookups.interfaces.lookups.model import LookupSnapshot
from assetlookups.interfaces.lookups.snapshot_source import SnapshotSource

from .common import clean_keywords, missing, random_hex_color
from .schema import (
    lookup_asset_type_colors,
    lookup_asset_types,
    lookup_companies,
    lookup_keywords,
    lookup_locations,
    lookup_meta,
    lookup_settings,
    lookup_status_colors,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine, Row

# pylint: disable=too-many-public-methods

META_ROW_ID = 1
colors = lookup_asset_type_colors


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class SqlAlchemyLookupStore(SnapshotSource, LookupWriter):
    """Lookup store persisted through a SQLAlchemy :class:`Engine`."""

    NAME = "sqlalchemy"

    def __init__(self, engine: Engine, clock: Callable[[], int] = _now_ms) -> None:
        self.engine = engine
        self._clock = clock

    # --------------------------------------------------------------------- #
    # SnapshotSource
    # --------------------------------------------------------------------- #

    async def read_snapshot(self) -> LookupSnapshot:
        raw = await asyncio.to_thread(self._run, self._read_raw)
        return LookupSnapshot.from_mapping(raw)

    async def read_mtime(self) -> int | None:
        return await asyncio.to_thread(self._run, self._read_mtime)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _run(self, work: Callable[[Connection], Any]) -> Any:
        try:
            with self.engine.connect() as conn:
                return work(conn)
        except DBAPIError as e:
            raise LookupStoreUnavailableError(self.NAME, str(e.orig or e)) from e

    def _write(self, work: Callable[..., WriteResult], *args: Any) -> WriteResult:
        """Run ``work`` in one transaction; bump the timestamp if it succeeded."""
        try:
            with self.engine.begin() as conn:
                result = work(conn, *args)
                if result.success:
                    self._touch(conn)
                return result
        except DBAPIError as e:
            raise LookupStoreUnavailableError(self.NAME, str(e.orig or e)) from e

    async def _submit(
        self, work: Callable[..., WriteResult], *args: Any
    ) -> WriteResult:
        return await asyncio.to_thread(self._write, work, *args)

    @staticmethod
    def _read_mtime(conn: Connection) -> int:
        stmt = select(lookup_meta.c.modified_at_ms).where(
            lookup_meta.c.id == META_ROW_ID
        )
        return conn.execute(stmt).scalar_one_or_none() or 0

    def _touch(self, conn: Connection) -> int:
        previous = self._read_mtime(conn)
        stamp = max(self._clock(), previous + 1)
        if previous:
            conn.execute(
                update(lookup_meta)
                .where(lookup_meta.c.id == META_ROW_ID)
                .values(modified_at_ms=stamp)
            )
        else:
            conn.execute(
                insert(lookup_meta).values(id=META_ROW_ID, modified_at_ms=stamp)
            )
        return stamp

    def _read_raw(self, conn: Connection) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "mtime_ms": self._read_mtime(conn),
            "companies": [],
            "locations_by_company": {},
            "asset_types_by_company_location": {},
            "colors_global": {},
            "colors_by_location": {},
            "colors_by_company_location": {},
            "location_links": {},
            "asset_type_links": {},
        }

        for row in conn.execute(
            select(lookup_companies).order_by(lookup_companies.c.id)
        ).mappings():
            raw["companies"].append(
                {
                    "name": row["name"],
                    "active": row["active"],
                    "description": row["description"],
                    "email": row["email"],
                }
            )

        loc_rows = conn.execute(
            select(
                lookup_companies.c.name.label("company"),
                lookup_locations.c.name.label("location"),
                lookup_locations.c.link,
            ).join_from(lookup_locations, lookup_companies)
        ).mappings()
        for row in loc_rows:
            raw["locations_by_company"].setdefault(row["company"], []).append(
                row["location"]
            )
            raw["location_links"].setdefault(row["company"], {})[row["location"]] = (
                row["link"]
            )

        at_rows = conn.execute(
            select(
                lookup_companies.c.name.label("company"),
                lookup_locations.c.name.label("location"),
                lookup_asset_types.c.name.label("asset_type"),
                lookup_asset_types.c.link,
            )
            .join_from(lookup_asset_types, lookup_locations)
            .join(lookup_companies)
        ).mappings()
        for row in at_rows:
            co, loc, at = row["company"], row["location"], row["asset_type"]
            raw["asset_types_by_company_location"].setdefault(co, {}).setdefault(
                loc, []
            ).append(at)
            raw["asset_type_links"].setdefault(co, {}).setdefault(loc, {})[at] = row[
                "link"
            ]

        for row in conn.execute(select(colors)).mappings():
            at, co, loc = row["asset_type"], row["company"], row["location"]
            if co:
                raw["colors_by_company_location"].setdefault(co, {}).setdefault(
                    loc, {}
                )[at] = row["color"]
            elif loc:
                raw["colors_by_location"].setdefault(loc, {})[at] = row["color"]
            else:
                raw["colors_global"][at] = row["color"]

        raw["status_colors"] = {
            row.status_key: row.color
            for row in conn.execute(select(lookup_status_colors))
        }
        for row in conn.execute(select(lookup_settings)).mappings():
            raw[row["key"]] = bool(row["value"])

        for kind in ("inspection", "project"):
            raw[f"{kind}_keywords"] = list(
                conn.execute(
                    select(lookup_keywords.c.keyword)
                    .where(lookup_keywords.c.kind == kind)
                    .order_by(lookup_keywords.c.position)
                ).scalars()
            )
        return raw

    @staticmethod
    def _find_company(conn: Connection, company: str) -> Row | None:
        return conn.execute(
            select(lookup_companies.c.id, lookup_companies.c.name).where(
                func.lower(lookup_companies.c.name) == norm_key(company)
            )
        ).first()

    @staticmethod
    def _find_location(conn: Connection, company: str, location: str) -> Row | None:
        """Return ``(id, company, location)`` for a company's location."""
        return conn.execute(
            select(
                lookup_locations.c.id,
                lookup_companies.c.name.label("company"),
                lookup_locations.c.name.label("location"),
            )
            .join_from(lookup_locations, lookup_companies)
            .where(func.lower(lookup_companies.c.name) == norm_key(company))
            .where(func.lower(lookup_locations.c.name) == norm_key(location))
        ).first()

    @staticmethod
    def _find_asset_type(
        conn: Connection, location_id: int, asset_type: str
    ) -> Row | None:
        return conn.execute(
            select(lookup_asset_types.c.id, lookup_asset_types.c.name).where(
                lookup_asset_types.c.location_id == location_id,
                func.lower(lookup_asset_types.c.name) == norm_key(asset_type),
            )
        ).first()

    @staticmethod
    def _color_scope(asset_type: str, company: str, location: str) -> Any:
        """Case-insensitive WHERE clause for one colour key."""
        return (
            (func.lower(colors.c.asset_type) == norm_key(asset_type))
            & (func.lower(colors.c.company) == norm_key(company))
            & (func.lower(colors.c.location) == norm_key(location))
        )

    @classmethod
    def _put_color(
        cls, conn: Connection, asset_type: str, company: str, location: str, color: str
    ) -> WriteResult:
        """Set or clear one colour, keeping the stored spelling of its key.

        An existing row matching case-insensitively is replaced under its own
        key. A new company+location row takes the hierarchy's spelling when
        the location exists.
        """
        scope = cls._color_scope(asset_type, company, location)
        existing = conn.execute(
            select(colors.c.asset_type, colors.c.company, colors.c.location).where(
                scope
            )
        ).first()
        if existing is not None:
            asset_type, company, location = existing
        elif company:
            location_row = cls._find_location(conn, company, location)
            if location_row is not None:
                company, location = location_row.company, location_row.location
                at_row = cls._find_asset_type(conn, location_row.id, asset_type)
                if at_row is not None:
                    asset_type = at_row.name
        conn.execute(delete(colors).where(scope))
        if color:
            conn.execute(
                insert(colors).values(
                    asset_type=asset_type,
                    company=company,
                    location=location,
                    color=color,
                )
            )
        return WriteResult.ok()

    # --------------------------------------------------------------------- #
    # Colours
    # --------------------------------------------------------------------- #

    async def set_asset_type_color(self, asset_type: str, color: str) -> WriteResult:
        at = norm_str(asset_type)
        if failure := missing(("asset_type", at)):
            return failure
        return await self._submit(self._put_color, at, "", "", norm_str(color))

    async def set_asset_type_color_for_location(
        self, asset_type: str, location: str, color: str
    ) -> WriteResult:
        at, loc = norm_str(asset_type), norm_str(location)
        if failure := missing(("asset_type", at), ("location", loc)):
            return failure
        return await self._submit(self._put_color, at, "", loc, norm_str(color))

    async def set_asset_type_color_for_company_location(
        self, asset_type: str, company: str, location: str, color: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)
        if failure := missing(("asset_type", at), ("company", co), ("location", loc)):
            return failure
        return await self._submit(self._put_color, at, co, loc, norm_str(color))

    # --------------------------------------------------------------------- #
    # Hierarchy
    # --------------------------------------------------------------------- #

    async def upsert_company(
        self, name: str, active: bool = True, description: str = "", email: str = ""
    ) -> WriteResult:
        co = norm_str(name)
        if failure := missing(("company", co)):
            return failure
        values = {
            "active": bool(active),
            "description": norm_str(description),
            "email": norm_str(email),
        }

        def work(conn: Connection) -> WriteResult:
            row = self._find_company(conn, co)
            if row is None:
                conn.execute(insert(lookup_companies).values(name=co, **values))
                return WriteResult.ok(added=True)
            conn.execute(
                update(lookup_companies)
                .where(lookup_companies.c.id == row.id)
                .values(**values)
            )
            return WriteResult.ok(added=False)

        return await self._submit(work)

    async def upsert_location(self, location: str, company: str) -> WriteResult:
        loc, co = norm_str(location), norm_str(company)
        if failure := missing(("location", loc), ("company", co)):
            return failure

        def work(conn: Connection) -> WriteResult:
            company_row = self._find_company(conn, co)
            if company_row is None:
                return WriteResult.failed(f"Company '{co}' not found")
            if self._find_location(conn, co, loc) is not None:
                return WriteResult.ok(added=False)
            conn.execute(
                insert(lookup_locations).values(company_id=company_row.id, name=loc)
            )
            return WriteResult.ok(added=True)

        return await self._submit(work)

    async def upsert_asset_type(
        self, asset_type: str, company: str, location: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)
        if failure := missing(("asset_type", at), ("company", co), ("location", loc)):
            return failure

        def work(conn: Connection) -> WriteResult:
            location_row = self._find_location(conn, co, loc)
            if location_row is None:
                return WriteResult.failed(
                    f"Location '{loc}' not found for company '{co}'"
                )
            if self._find_asset_type(conn, location_row.id, at) is not None:
                return WriteResult.ok(added=False)
            conn.execute(
                insert(lookup_asset_types).values(location_id=location_row.id, name=at)
            )
            scope = self._color_scope(
                at, location_row.company, location_row.location
            )
            if conn.execute(select(colors.c.color).where(scope)).first() is None:
                conn.execute(
                    insert(colors).values(
                        asset_type=at,
                        company=location_row.company,
                        location=location_row.location,
                        color=random_hex_color(),
                    )
                )
            return WriteResult.ok(added=True)

        return await self._submit(work)

    async def delete_company(self, company: str) -> WriteResult:
        co = norm_str(company)

        def work(conn: Connection) -> WriteResult:
            row = self._find_company(conn, co)
            if row is None:
                return WriteResult.failed(f"Company '{co}' not found")
            conn.execute(
                delete(colors).where(
                    func.lower(colors.c.company) == norm_key(row.name)
                )
            )
            conn.execute(
                delete(lookup_companies).where(lookup_companies.c.id == row.id)
            )
            return WriteResult.ok()

        return await self._submit(work)

    async def delete_location(self, company: str, location: str) -> WriteResult:
        co, loc = norm_str(company), norm_str(location)

        def work(conn: Connection) -> WriteResult:
            row = self._find_location(conn, co, loc)
            if row is None:
                return WriteResult.failed(
                    f"Location '{loc}' not found for company '{co}'"
                )
            conn.execute(
                delete(colors).where(
                    (func.lower(colors.c.company) == norm_key(row.company))
                    & (func.lower(colors.c.location) == norm_key(row.location))
                )
            )
            conn.execute(
                delete(lookup_locations).where(lookup_locations.c.id == row.id)
            )
            return WriteResult.ok()

        return await self._submit(work)

    async def delete_asset_type(
        self, company: str, location: str, asset_type: str
    ) -> WriteResult:
        co, loc, at = norm_str(company), norm_str(location), norm_str(asset_type)

        def work(conn: Connection) -> WriteResult:
            location_row = self._find_location(conn, co, loc)
            at_row = (
                None
                if location_row is None
                else self._find_asset_type(conn, location_row.id, at)
            )
            if location_row is None or at_row is None:
                return WriteResult.failed(
                    f"Asset type '{at}' not found at '{co}' / '{loc}'"
                )
            self._put_color(
                conn, at_row.name, location_row.company, location_row.location, ""
            )
            conn.execute(
                delete(lookup_asset_types).where(lookup_asset_types.c.id == at_row.id)
            )
            return WriteResult.ok()

        return await self._submit(work)

    # --------------------------------------------------------------------- #
    # Links
    # --------------------------------------------------------------------- #

    async def set_location_link(
        self, company: str, location: str, link: str
    ) -> WriteResult:
        co, loc = norm_str(company), norm_str(location)

        def work(conn: Connection) -> WriteResult:
            row = self._find_location(conn, co, loc)
            if row is None:
                return WriteResult.failed(
                    f"Location '{loc}' not found for company '{co}'"
                )
            conn.execute(
                update(lookup_locations)
                .where(lookup_locations.c.id == row.id)
                .values(link=norm_str(link))
            )
            return WriteResult.ok()

        return await self._submit(work)

    async def set_asset_type_link(
        self, asset_type: str, company: str, location: str, link: str
    ) -> WriteResult:
        at, co, loc = norm_str(asset_type), norm_str(company), norm_str(location)

        def work(conn: Connection) -> WriteResult:
            location_row = self._find_location(conn, co, loc)
            at_row = (
                None
                if location_row is None
                else self._find_asset_type(conn, location_row.id, at)
            )
            if at_row is None:
                return WriteResult.failed(
                    f"Asset type '{at}' not found at '{co}' / '{loc}'"
                )
            conn.execute(
                update(lookup_asset_types)
                .where(lookup_asset_types.c.id == at_row.id)
                .values(link=norm_str(link))
            )
            return WriteResult.ok()

        return await self._submit(work)

    # --------------------------------------------------------------------- #
    # Settings
    # --------------------------------------------------------------------- #

    async def set_status_color(self, status_key: str, color: str) -> WriteResult:
        key, col = norm_key(status_key), norm_str(color)
        if failure := missing(("status", key), ("color", col)):
            return failure

        def work(conn: Connection) -> WriteResult:
            conn.execute(
                delete(lookup_status_colors).where(
                    lookup_status_colors.c.status_key == key
                )
            )
            conn.execute(insert(lookup_status_colors).values(status_key=key, color=col))
            return WriteResult.ok()

        return await self._submit(work)

    async def delete_status(self, status_key: str) -> WriteResult:
        key = norm_key(status_key)

        def work(conn: Connection) -> WriteResult:
            deleted = conn.execute(
                delete(lookup_status_colors).where(
                    lookup_status_colors.c.status_key == key
                )
            ).rowcount
            if not deleted:
                return WriteResult.failed(f"Status '{key}' not found")
            return WriteResult.ok()

        return await self._submit(work)

    async def set_setting_boolean(self, key: str, value: bool) -> WriteResult:
        name = norm_key(key)
        if name not in BOOLEAN_SETTINGS:
            return WriteResult.failed(f"Unknown setting '{key}'")

        def work(conn: Connection) -> WriteResult:
            conn.execute(delete(lookup_settings).where(lookup_settings.c.key == name))
            conn.execute(insert(lookup_settings).values(key=name, value=bool(value)))
            return WriteResult.ok()

        return await self._submit(work)

    def _replace_keywords(
        self, conn: Connection, kind: str, words: list[str]
    ) -> WriteResult:
        conn.execute(delete(lookup_keywords).where(lookup_keywords.c.kind == kind))
        if words:
            conn.execute(
                insert(lookup_keywords),
                [
                    {"kind": kind, "position": i, "keyword": word}
                    for i, word in enumerate(words)
                ],
            )
        return WriteResult.ok()

    async def set_inspection_keywords(self, keywords: Sequence[str]) -> WriteResult:
        return await self._submit(
            self._replace_keywords, "inspection", clean_keywords(keywords)
        )

    async def set_project_keywords(self, keywords: Sequence[str]) -> WriteResult:
        return await self._submit(
            self._replace_keywords, "project", clean_keywords(keywords)
        )
