"""Read models for lookup data.

A :class:`LookupSnapshot` is the complete point-in-time copy of all lookup data
returned by a snapshot source. Each override scope gets its own named type so
read paths never probe loosely shaped nested dictionaries.

Conventions:
  - Hierarchy and colour keys are trimmed names, matched exactly.
  - Link keys are trimmed and lower-cased on storage *and* on lookup.
  - Status keys are lower-cased.
  - Blank keys and blank values are dropped while building; the first value
    seen for a key wins.
  - Every ``from_*`` constructor treats an absent field as empty. A field of
    the wrong shape raises :class:`InvalidSnapshotError`.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidSnapshotError
from .keys import norm_key, norm_str, to_bool, uniq_sorted

# pylint: disable=too-many-instance-attributes

DEFAULT_INSPECTION_KEYWORDS: tuple[str, ...] = ("inspection",)
DEFAULT_PROJECT_KEYWORDS: tuple[str, ...] = (
    "project",
    "construction",
    "maintenance",
    "repair",
    "decommission",
)


# --- Builders ---


def _as_mapping(raw: Any, name: str) -> Mapping[Any, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidSnapshotError(f"{name} must be an object, got {type(raw).__name__}")
    return raw


def _as_list(raw: Any, name: str) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise InvalidSnapshotError(f"{name} must be a list, got {type(raw).__name__}")
    return list(raw)


def _fill(
    out: dict[str, Any], raw: Any, name: str, depth: int, fold: bool
) -> dict[str, Any]:
    """Merge ``raw`` (``depth`` levels of objects ending in strings) into ``out``."""
    for raw_key, value in _as_mapping(raw, name).items():
        key = norm_key(raw_key) if fold else norm_str(raw_key)
        if not key:
            continue
        if depth == 1:
            text = norm_str(value)
            if text:
                out.setdefault(key, text)
            continue
        child = out.get(key, {})
        _fill(child, value, name, depth - 1, fold)
        if child:
            out[key] = child
    return out


def _copy_nested(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        k: _copy_nested(v) if isinstance(v, Mapping) else v for k, v in data.items()
    }


def _dig(data: Mapping[str, Any], *keys: str) -> Any:
    node: Any = data
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


# --- Colour scopes ---


@dataclass(frozen=True, slots=True)
class GlobalColors:
    """Global scope: asset type -> colour."""

    by_asset_type: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> GlobalColors:
        return cls(_fill({}, raw, "colors_global", 1, fold=False))

    def get(self, asset_type: object) -> str | None:
        return self.by_asset_type.get(norm_str(asset_type))

    def to_dict(self) -> dict[str, str]:
        return dict(self.by_asset_type)


@dataclass(frozen=True, slots=True)
class LocationColors:
    """Per-location scope: location -> asset type -> colour."""

    by_location: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> LocationColors:
        return cls(_fill({}, raw, "colors_by_location", 2, fold=False))

    def get(self, asset_type: object, location: object) -> str | None:
        return _dig(self.by_location, norm_str(location), norm_str(asset_type))

    def to_dict(self) -> dict[str, dict[str, str]]:
        return _copy_nested(self.by_location)


@dataclass(frozen=True, slots=True)
class CompanyLocationColors:
    """Per-company-location scope: company -> location -> asset type -> colour."""

    by_company: dict[str, dict[str, dict[str, str]]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> CompanyLocationColors:
        return cls(_fill({}, raw, "colors_by_company_location", 3, fold=False))

    def get(self, asset_type: object, company: object, location: object) -> str | None:
        return _dig(
            self.by_company, norm_str(company), norm_str(location), norm_str(asset_type)
        )

    def to_dict(self) -> dict[str, dict[str, dict[str, str]]]:
        return _copy_nested(self.by_company)


@dataclass(frozen=True, slots=True)
class ColorScopes:
    """The three colour scopes, stored independently.

    No precedence is computed here: each scope answers only for itself and
    returns ``None`` when the key is absent at that scope.
    """

    global_colors: GlobalColors = field(default_factory=GlobalColors)
    location_colors: LocationColors = field(default_factory=LocationColors)
    company_location_colors: CompanyLocationColors = field(
        default_factory=CompanyLocationColors
    )

    def copy(self) -> ColorScopes:
        return ColorScopes(
            GlobalColors(self.global_colors.to_dict()),
            LocationColors(self.location_colors.to_dict()),
            CompanyLocationColors(self.company_location_colors.to_dict()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "global": self.global_colors.to_dict(),
            "by_location": self.location_colors.to_dict(),
            "by_company_location": self.company_location_colors.to_dict(),
        }


# --- Hierarchy ---


@dataclass(frozen=True, slots=True)
class CompanyRecord:
    """An active company as listed in the hierarchy."""

    name: str
    description: str = ""
    email: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> CompanyRecord | None:
        """Build a record from a bare name or a ``{name, active, ...}`` object.

        Returns ``None`` for blank names and for records explicitly marked
        inactive.
        """
        if isinstance(raw, Mapping):
            if "active" in raw and not to_bool(raw["active"]):
                return None
            name = norm_str(raw.get("name"))
            if not name:
                return None
            return cls(
                name, norm_str(raw.get("description")), norm_str(raw.get("email"))
            )
        name = norm_str(raw)
        return cls(name) if name else None

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description, "email": self.email}


@dataclass(frozen=True, slots=True)
class LookupTree:
    """Companies -> locations -> asset types.

    Membership consistency (a location's company is listed, and so on) is the
    snapshot source's responsibility and is not validated here.
    """

    companies: tuple[CompanyRecord, ...] = ()
    locations_by_company: dict[str, tuple[str, ...]] = field(default_factory=dict)
    asset_types_by_company_location: dict[str, dict[str, tuple[str, ...]]] = field(
        default_factory=dict
    )

    @classmethod
    def from_raw(
        cls, companies: Any, locations_by_company: Any, asset_types: Any
    ) -> LookupTree:
        records: dict[str, CompanyRecord] = {}
        for raw in _as_list(companies, "companies"):
            record = CompanyRecord.from_raw(raw)
            if record is not None:
                records.setdefault(record.name, record)
        ordered = tuple(records[name] for name in uniq_sorted(records))

        locations: dict[str, tuple[str, ...]] = {}
        for company, names in _as_mapping(
            locations_by_company, "locations_by_company"
        ).items():
            key = norm_str(company)
            values = uniq_sorted(
                [*locations.get(key, ()), *_as_list(names, "locations_by_company")]
            )
            if key and values:
                locations[key] = tuple(values)

        types: dict[str, dict[str, tuple[str, ...]]] = {}
        name = "asset_types_by_company_location"
        for company, by_location in _as_mapping(asset_types, name).items():
            company_key = norm_str(company)
            if not company_key:
                continue
            per_company = types.get(company_key, {})
            for location, names in _as_mapping(by_location, name).items():
                location_key = norm_str(location)
                values = uniq_sorted(
                    [*per_company.get(location_key, ()), *_as_list(names, name)]
                )
                if location_key and values:
                    per_company[location_key] = tuple(values)
            if per_company:
                types[company_key] = per_company

        return cls(ordered, locations, types)

    def company_names(self) -> list[str]:
        return [c.name for c in self.companies]

    def locations(self, company: object) -> list[str]:
        return list(self.locations_by_company.get(norm_str(company), ()))

    def asset_types(self, company: object, location: object) -> list[str]:
        per_company = self.asset_types_by_company_location.get(norm_str(company), {})
        return list(per_company.get(norm_str(location), ()))

    def copy(self) -> LookupTree:
        return LookupTree(
            self.companies,
            dict(self.locations_by_company),
            {k: dict(v) for k, v in self.asset_types_by_company_location.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "companies": [c.to_dict() for c in self.companies],
            "locations_by_company": {
                k: list(v) for k, v in self.locations_by_company.items()
            },
            "asset_types_by_company_location": {
                company: {loc: list(v) for loc, v in by_location.items()}
                for company, by_location in self.asset_types_by_company_location.items()
            },
        }


# --- Links ---


@dataclass(frozen=True, slots=True)
class LocationLinks:
    """Location-scoped links: company -> location -> link (keys case-folded)."""

    by_company: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> LocationLinks:
        return cls(_fill({}, raw, "location_links", 2, fold=True))

    def get(self, company: object, location: object) -> str | None:
        return _dig(self.by_company, norm_key(company), norm_key(location))

    def to_dict(self) -> dict[str, dict[str, str]]:
        return _copy_nested(self.by_company)


@dataclass(frozen=True, slots=True)
class AssetTypeLinks:
    """Asset-type-scoped links: company -> location -> asset type -> link."""

    by_company: dict[str, dict[str, dict[str, str]]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> AssetTypeLinks:
        return cls(_fill({}, raw, "asset_type_links", 3, fold=True))

    def get(self, company: object, location: object, asset_type: object) -> str | None:
        return _dig(
            self.by_company, norm_key(company), norm_key(location), norm_key(asset_type)
        )

    def to_dict(self) -> dict[str, dict[str, dict[str, str]]]:
        return _copy_nested(self.by_company)


# --- Settings ---


@dataclass(frozen=True, slots=True)
class StatusSettings:
    """Status colours plus the two map-application flags."""

    status_colors: dict[str, str] = field(default_factory=dict)
    apply_status_colors_on_map: bool = False
    apply_repair_colors_on_map: bool = False

    @classmethod
    def from_raw(
        cls, status_colors: Any, apply_status: Any, apply_repair: Any
    ) -> StatusSettings:
        return cls(
            _fill({}, status_colors, "status_colors", 1, fold=True),
            to_bool(apply_status),
            to_bool(apply_repair),
        )

    def get_color(self, status: object) -> str | None:
        return self.status_colors.get(norm_key(status))

    def copy(self) -> StatusSettings:
        return StatusSettings(
            dict(self.status_colors),
            self.apply_status_colors_on_map,
            self.apply_repair_colors_on_map,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_colors": dict(self.status_colors),
            "apply_status_colors_on_map": self.apply_status_colors_on_map,
            "apply_repair_colors_on_map": self.apply_repair_colors_on_map,
        }


def _keywords(raw: Any, name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    items = raw.split(",") if isinstance(raw, str) else _as_list(raw, name)
    seen: dict[str, None] = {}
    for item in items:
        text = norm_str(item)
        if text:
            seen.setdefault(text, None)
    return tuple(seen) or default


@dataclass(frozen=True, slots=True)
class KeywordLists:
    """Ordered inspection and project keyword lists.

    An empty list from the source is replaced by the built-in defaults.
    """

    inspection: tuple[str, ...] = DEFAULT_INSPECTION_KEYWORDS
    project: tuple[str, ...] = DEFAULT_PROJECT_KEYWORDS

    @classmethod
    def from_raw(cls, inspection: Any, project: Any) -> KeywordLists:
        return cls(
            _keywords(inspection, "inspection_keywords", DEFAULT_INSPECTION_KEYWORDS),
            _keywords(project, "project_keywords", DEFAULT_PROJECT_KEYWORDS),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {"inspection": list(self.inspection), "project": list(self.project)}


# --- Snapshot ---


def _parse_mtime(raw: Any) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise InvalidSnapshotError("mtime_ms must be a number")
    if isinstance(raw, float) and math.isfinite(raw) and not raw.is_integer():
        raise InvalidSnapshotError(f"mtime_ms must be whole milliseconds, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidSnapshotError(f"mtime_ms must be a number, got {raw!r}") from exc
    if value < 0:
        raise InvalidSnapshotError(f"mtime_ms must be non-negative, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class LookupSnapshot:
    """Complete point-in-time copy of all lookup data.

    ``mtime_ms`` is the source's modification timestamp in milliseconds. It is
    never negative, so it can never collide with the cache's stale marker.
    """

    mtime_ms: int = 0
    tree: LookupTree = field(default_factory=LookupTree)
    colors: ColorScopes = field(default_factory=ColorScopes)
    location_links: LocationLinks = field(default_factory=LocationLinks)
    asset_type_links: AssetTypeLinks = field(default_factory=AssetTypeLinks)
    status: StatusSettings = field(default_factory=StatusSettings)
    keywords: KeywordLists = field(default_factory=KeywordLists)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> LookupSnapshot:
        """Build a snapshot from its flattened form (as produced by :meth:`to_dict`).

        Raises:
            InvalidSnapshotError: if ``raw`` is not an object, or a field has
                the wrong shape.
        """
        raw = _as_mapping(raw, "snapshot")
        return cls(
            mtime_ms=_parse_mtime(raw.get("mtime_ms")),
            tree=LookupTree.from_raw(
                raw.get("companies"),
                raw.get("locations_by_company"),
                raw.get("asset_types_by_company_location"),
            ),
            colors=ColorScopes(
                GlobalColors.from_raw(raw.get("colors_global")),
                LocationColors.from_raw(raw.get("colors_by_location")),
                CompanyLocationColors.from_raw(raw.get("colors_by_company_location")),
            ),
            location_links=LocationLinks.from_raw(raw.get("location_links")),
            asset_type_links=AssetTypeLinks.from_raw(raw.get("asset_type_links")),
            status=StatusSettings.from_raw(
                raw.get("status_colors"),
                raw.get("apply_status_colors_on_map"),
                raw.get("apply_repair_colors_on_map"),
            ),
            keywords=KeywordLists.from_raw(
                raw.get("inspection_keywords"), raw.get("project_keywords")
            ),
        )

    def copy(self) -> LookupSnapshot:
        """Return a deep copy; no container is shared with ``self``."""
        return LookupSnapshot(
            self.mtime_ms,
            self.tree.copy(),
            self.colors.copy(),
            LocationLinks(self.location_links.to_dict()),
            AssetTypeLinks(self.asset_type_links.to_dict()),
            self.status.copy(),
            self.keywords,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the flattened JSON-ready form (objects and lists only)."""
        tree = self.tree.to_dict()
        return {
            "mtime_ms": self.mtime_ms,
            "companies": tree["companies"],
            "locations_by_company": tree["locations_by_company"],
            "asset_types_by_company_location": tree["asset_types_by_company_location"],
            "colors_global": self.colors.global_colors.to_dict(),
            "colors_by_location": self.colors.location_colors.to_dict(),
            "colors_by_company_location": self.colors.company_location_colors.to_dict(),
            "location_links": self.location_links.to_dict(),
            "asset_type_links": self.asset_type_links.to_dict(),
            "status_colors": dict(self.status.status_colors),
            "apply_status_colors_on_map": self.status.apply_status_colors_on_map,
            "apply_repair_colors_on_map": self.status.apply_repair_colors_on_map,
            "inspection_keywords": list(self.keywords.inspection),
            "project_keywords": list(self.keywords.project),
        }
