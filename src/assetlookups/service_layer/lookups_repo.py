"""Lookups repository: the read/write API over the lookup cache.

Every read awaits :meth:`LookupCacheCoordinator.ensure_fresh` and then looks
up the returned snapshot. Results are fresh containers, so callers can never
mutate cached state. Absent keys give ``None`` or an empty list, never an
error.

Every write delegates to the :class:`LookupWriter` and then invalidates the
cache, whether the backend reported success, failure, or raised. The
backend's :class:`WriteResult` is returned unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING

from assetlookups.interfaces.lookups.keys import norm_str

if TYPE_CHECKING:
    from assetlookups.cache.coordinator import LookupCacheCoordinator
    from assetlookups.interfaces.lookups.lookup_writer import LookupWriter, WriteResult
    from assetlookups.interfaces.lookups.model import (
        ColorScopes,
        LookupTree,
        StatusSettings,
    )

logger = logging.getLogger(__name__)

# pylint: disable=too-many-public-methods


class LookupsRepository:
    """Read/write API used by the UI layer and the CLI.

    Args:
        cache: The process-wide cache coordinator.
        writer: The persistence write backend.
    """

    def __init__(self, cache: LookupCacheCoordinator, writer: LookupWriter) -> None:
        self.cache = cache
        self.writer = writer

    # ========================================================================
    #                               Reads
    # ========================================================================

    async def get_companies(self) -> list[str]:
        """Active company names, sorted case-insensitively."""
        snapshot = await self.cache.ensure_fresh()
        return snapshot.tree.company_names()

    async def get_locations(self, company: str) -> list[str]:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.tree.locations(company)

    async def get_asset_types(self, company: str, location: str) -> list[str]:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.tree.asset_types(company, location)

    async def get_lookup_tree(self) -> LookupTree:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.tree.copy()

    # --- Colours ---

    async def get_global_color(self, asset_type: str) -> str | None:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.colors.global_colors.get(asset_type)

    async def get_location_color(self, asset_type: str, location: str) -> str | None:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.colors.location_colors.get(asset_type, location)

    async def get_company_location_color(
        self, asset_type: str, company: str, location: str
    ) -> str | None:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.colors.company_location_colors.get(
            asset_type, company, location
        )

    async def get_color(
        self,
        asset_type: str,
        location: str | None = None,
        company: str | None = None,
    ) -> str | None:
        """Colour at exactly the scope selected by the given arguments.

        Company and location select the company-location scope, a location
        alone the location scope, nothing else the global scope. There is no
        fallback between scopes; callers wanting precedence query each scope.
        """
        if norm_str(company) and norm_str(location):
            return await self.get_company_location_color(
                asset_type, company or "", location or ""
            )
        if norm_str(location):
            return await self.get_location_color(asset_type, location or "")
        return await self.get_global_color(asset_type)

    async def get_color_maps(self) -> ColorScopes:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.colors.copy()

    # --- Links ---

    async def resolve_photos_base(
        self,
        company: str | None,
        location: str | None,
        asset_type: str | None = None,
    ) -> str | None:
        """Resolve the photo folder link for a station.

        An asset-type link at (company, location, asset type) wins over a
        location link at (company, location). All keys are compared
        case-insensitively.

        Returns:
            str | None: The link, or None when no link is configured; callers
            then fall back to their default base path.
        """
        snapshot = await self.cache.ensure_fresh()
        co, loc, at = norm_str(company), norm_str(location), norm_str(asset_type)
        if co and loc and at:
            if link := snapshot.asset_type_links.get(co, loc, at):
                return link
        if co and loc:
            if link := snapshot.location_links.get(co, loc):
                return link
        return None

    get_link = resolve_photos_base

    # --- Settings ---

    async def get_status_settings(self) -> StatusSettings:
        snapshot = await self.cache.ensure_fresh()
        return snapshot.status.copy()

    async def get_inspection_keywords(self) -> list[str]:
        snapshot = await self.cache.ensure_fresh()
        return list(snapshot.keywords.inspection)

    async def get_project_keywords(self) -> list[str]:
        snapshot = await self.cache.ensure_fresh()
        return list(snapshot.keywords.project)

    # ========================================================================
    #                               Writes
    # ========================================================================

    async def _write(self, name: str, call: Awaitable[WriteResult]) -> WriteResult:
        try:
            result = await call
        finally:
            self.cache.invalidate()
        if not result.success:
            logger.debug("%s reported failure: %s", name, result.message)
        return result

    async def set_color(
        self,
        asset_type: str,
        color: str,
        location: str | None = None,
        company: str | None = None,
    ) -> WriteResult:
        """Set a colour at the scope selected like :meth:`get_color`."""
        if norm_str(company) and norm_str(location):
            call = self.writer.set_asset_type_color_for_company_location(
                asset_type, company or "", location or "", color
            )
        elif norm_str(location):
            call = self.writer.set_asset_type_color_for_location(
                asset_type, location or "", color
            )
        else:
            call = self.writer.set_asset_type_color(asset_type, color)
        return await self._write("set_color", call)

    async def upsert_company(
        self, name: str, active: bool = True, description: str = "", email: str = ""
    ) -> WriteResult:
        return await self._write(
            "upsert_company",
            self.writer.upsert_company(name, active, description, email),
        )

    async def upsert_location(self, location: str, company: str) -> WriteResult:
        return await self._write(
            "upsert_location", self.writer.upsert_location(location, company)
        )

    async def upsert_asset_type(
        self, asset_type: str, company: str, location: str
    ) -> WriteResult:
        return await self._write(
            "upsert_asset_type",
            self.writer.upsert_asset_type(asset_type, company, location),
        )

    async def delete_company(self, company: str) -> WriteResult:
        return await self._write("delete_company", self.writer.delete_company(company))

    async def delete_location(self, company: str, location: str) -> WriteResult:
        return await self._write(
            "delete_location", self.writer.delete_location(company, location)
        )

    async def delete_asset_type(
        self, company: str, location: str, asset_type: str
    ) -> WriteResult:
        return await self._write(
            "delete_asset_type",
            self.writer.delete_asset_type(company, location, asset_type),
        )

    async def set_location_link(
        self, company: str, location: str, link: str
    ) -> WriteResult:
        return await self._write(
            "set_location_link", self.writer.set_location_link(company, location, link)
        )

    async def set_asset_type_link(
        self, asset_type: str, company: str, location: str, link: str
    ) -> WriteResult:
        return await self._write(
            "set_asset_type_link",
            self.writer.set_asset_type_link(asset_type, company, location, link),
        )

    async def set_status_color(self, status_key: str, color: str) -> WriteResult:
        return await self._write(
            "set_status_color", self.writer.set_status_color(status_key, color)
        )

    async def delete_status(self, status_key: str) -> WriteResult:
        return await self._write("delete_status", self.writer.delete_status(status_key))

    async def set_setting_boolean(self, key: str, value: bool) -> WriteResult:
        return await self._write(
            "set_setting_boolean", self.writer.set_setting_boolean(key, value)
        )

    async def set_inspection_keywords(self, keywords: Sequence[str]) -> WriteResult:
        return await self._write(
            "set_inspection_keywords", self.writer.set_inspection_keywords(keywords)
        )

    async def set_project_keywords(self, keywords: Sequence[str]) -> WriteResult:
        return await self._write(
            "set_project_keywords", self.writer.set_project_keywords(keywords)
        )
