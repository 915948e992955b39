"""Persistence write backend interface definitions."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

SETTING_APPLY_STATUS_COLORS = "apply_status_colors_on_map"
SETTING_APPLY_REPAIR_COLORS = "apply_repair_colors_on_map"
BOOLEAN_SETTINGS = frozenset({SETTING_APPLY_STATUS_COLORS, SETTING_APPLY_REPAIR_COLORS})


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of a single mutation, as reported by the backend.

    ``added`` is only set by upserts, where it tells whether a new row was
    created (True) or an existing one updated (False).
    """

    success: bool
    message: str | None = None
    added: bool | None = None

    @classmethod
    def ok(cls, added: bool | None = None) -> WriteResult:
        return cls(True, None, added)

    @classmethod
    def failed(cls, message: str) -> WriteResult:
        return cls(False, message)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.message is not None:
            out["message"] = self.message
        if self.added is not None:
            out["added"] = self.added
        return out


class LookupWriter(abc.ABC):
    """Abstract base class for lookup mutations.

    Each operation either succeeds, reports a handled failure in the returned
    :class:`WriteResult`, or raises when the store is unreachable. Callers must
    assume a raised error may have left a partially applied change behind.
    """

    # --- Colours ---

    @abc.abstractmethod
    async def set_asset_type_color(self, asset_type: str, color: str) -> WriteResult:
        """Set the global colour of an asset type."""

    @abc.abstractmethod
    async def set_asset_type_color_for_location(
        self, asset_type: str, location: str, color: str
    ) -> WriteResult:
        """Set the colour of an asset type at a location."""

    @abc.abstractmethod
    async def set_asset_type_color_for_company_location(
        self, asset_type: str, company: str, location: str, color: str
    ) -> WriteResult:
        """Set the colour of an asset type at a company's location."""

    # --- Hierarchy ---

    @abc.abstractmethod
    async def upsert_company(
        self, name: str, active: bool = True, description: str = "", email: str = ""
    ) -> WriteResult:
        """Create or update a company.

        Returns:
            WriteResult: ``added`` is True when the company did not exist.
        """

    @abc.abstractmethod
    async def upsert_location(self, location: str, company: str) -> WriteResult:
        """Create a location under ``company`` if it does not exist yet."""

    @abc.abstractmethod
    async def upsert_asset_type(
        self, asset_type: str, company: str, location: str
    ) -> WriteResult:
        """Register an asset type at a company's location.

        New asset types get a random ``#rrggbb`` colour at that scope.
        """

    @abc.abstractmethod
    async def delete_company(self, company: str) -> WriteResult:
        """Delete a company with its locations, asset types and links."""

    @abc.abstractmethod
    async def delete_location(self, company: str, location: str) -> WriteResult:
        """Delete a location with its asset types and links."""

    @abc.abstractmethod
    async def delete_asset_type(
        self, company: str, location: str, asset_type: str
    ) -> WriteResult:
        """Delete an asset type from a company's location."""

    # --- Links ---

    @abc.abstractmethod
    async def set_location_link(
        self, company: str, location: str, link: str
    ) -> WriteResult:
        """Set (or clear, with an empty link) the photo folder link of a location."""

    @abc.abstractmethod
    async def set_asset_type_link(
        self, asset_type: str, company: str, location: str, link: str
    ) -> WriteResult:
        """Set (or clear, with an empty link) the photo folder link of an asset type."""

    # --- Settings ---

    @abc.abstractmethod
    async def set_status_color(self, status_key: str, color: str) -> WriteResult:
        """Set the map colour used for a status (key is case-insensitive)."""

    @abc.abstractmethod
    async def delete_status(self, status_key: str) -> WriteResult:
        """Remove a status colour."""

    @abc.abstractmethod
    async def set_setting_boolean(self, key: str, value: bool) -> WriteResult:
        """Set one of the :data:`BOOLEAN_SETTINGS` flags.

        Unknown keys are reported as a failed :class:`WriteResult`.
        """

    @abc.abstractmethod
    async def set_inspection_keywords(self, keywords: Sequence[str]) -> WriteResult:
        """Replace the inspection keyword list."""

    @abc.abstractmethod
    async def set_project_keywords(self, keywords: Sequence[str]) -> WriteResult:
        """Replace the project keyword list."""
