"""Lookup store schema.

Tables used by :class:`SqlAlchemyLookupStore`:

| Table                      | Contents                                         |
|----------------------------|--------------------------------------------------|
| lookup_companies           | companies (active flag, description, email)      |
| lookup_locations           | locations per company, plus the location link    |
| lookup_asset_types         | asset types per location, plus the asset link    |
| lookup_asset_type_colors   | colours at global / location / company scope     |
| lookup_status_colors       | status key (lower-case) -> colour                |
| lookup_settings            | boolean map settings                             |
| lookup_keywords            | ordered inspection / project keyword lists       |
| lookup_meta                | single row holding ``modified_at_ms``            |

Colour scope is encoded by which of ``company`` / ``location`` are non-empty:
both empty is global, only ``location`` is per-location, both set is
per-company-location. Empty strings are used instead of NULL so the composite
primary key stays unique on every backend.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
    true,
)

from assetlookups.adapters.db.metadata import metadata

__all__ = [
    "lookup_companies",
    "lookup_locations",
    "lookup_asset_types",
    "lookup_asset_type_colors",
    "lookup_status_colors",
    "lookup_settings",
    "lookup_keywords",
    "lookup_meta",
]

NAME_LENGTH = 200
LINK_LENGTH = 1024
COLOR_LENGTH = 32

lookup_companies = Table(
    "lookup_companies",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(NAME_LENGTH), nullable=False, comment="Company name."),
    Column("active", Boolean, nullable=False, server_default=true()),
    Column("description", String(1000), nullable=False, server_default=""),
    Column("email", String(320), nullable=False, server_default=""),
    UniqueConstraint("name"),
)

lookup_locations = Table(
    "lookup_locations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "company_id",
        Integer,
        ForeignKey("lookup_companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(NAME_LENGTH), nullable=False, comment="Location name."),
    Column(
        "link",
        String(LINK_LENGTH),
        nullable=False,
        server_default="",
        comment="Photo folder link for the whole location.",
    ),
    UniqueConstraint("company_id", "name"),
)

lookup_asset_types = Table(
    "lookup_asset_types",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "location_id",
        Integer,
        ForeignKey("lookup_locations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(NAME_LENGTH), nullable=False, comment="Asset type name."),
    Column(
        "link",
        String(LINK_LENGTH),
        nullable=False,
        server_default="",
        comment="Photo folder link for this asset type at this location.",
    ),
    UniqueConstraint("location_id", "name"),
)

lookup_asset_type_colors = Table(
    "lookup_asset_type_colors",
    metadata,
    Column("asset_type", String(NAME_LENGTH), primary_key=True),
    Column("company", String(NAME_LENGTH), primary_key=True, server_default=""),
    Column("location", String(NAME_LENGTH), primary_key=True, server_default=""),
    Column("color", String(COLOR_LENGTH), nullable=False),
    CheckConstraint("company = '' OR location <> ''", name="company_needs_location"),
)

lookup_status_colors = Table(
    "lookup_status_colors",
    metadata,
    Column("status_key", String(100), primary_key=True, comment="Lower-cased."),
    Column("color", String(COLOR_LENGTH), nullable=False),
)

lookup_settings = Table(
    "lookup_settings",
    metadata,
    Column("key", String(100), primary_key=True),
    Column("value", Boolean, nullable=False),
)

lookup_keywords = Table(
    "lookup_keywords",
    metadata,
    Column("kind", String(32), primary_key=True, comment="inspection | project"),
    Column("position", Integer, primary_key=True),
    Column("keyword", String(NAME_LENGTH), nullable=False),
    CheckConstraint("kind IN ('inspection', 'project')", name="kind"),
)

lookup_meta = Table(
    "lookup_meta",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column(
        "modified_at_ms",
        BigInteger,
        nullable=False,
        comment="Bumped in the same transaction as every write.",
    ),
    CheckConstraint("id = 1", name="single_row"),
)
