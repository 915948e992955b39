"""create lookup tables

Revision ID: 4c1d2e9a7b30
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# deal with alembic stuff
# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "4c1d2e9a7b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "lookup_companies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name", sa.String(length=200), nullable=False, comment="Company name."
        ),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            "description", sa.String(length=1000), server_default="", nullable=False
        ),
        sa.Column("email", sa.String(length=320), server_default="", nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lookup_companies")),
        sa.UniqueConstraint("name", name=op.f("uq_lookup_companies_name")),
    )
    op.create_table(
        "lookup_locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column(
            "name", sa.String(length=200), nullable=False, comment="Location name."
        ),
        sa.Column(
            "link",
            sa.String(length=1024),
            server_default="",
            nullable=False,
            comment="Photo folder link for the whole location.",
        ),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["lookup_companies.id"],
            name=op.f("fk_lookup_locations_company_id_lookup_companies"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lookup_locations")),
        sa.UniqueConstraint(
            "company_id", "name", name=op.f("uq_lookup_locations_company_id_name")
        ),
    )
    op.create_table(
        "lookup_asset_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column(
            "name", sa.String(length=200), nullable=False, comment="Asset type name."
        ),
        sa.Column(
            "link",
            sa.String(length=1024),
            server_default="",
            nullable=False,
            comment="Photo folder link for this asset type at this location.",
        ),
        sa.ForeignKeyConstraint(
            ["location_id"],
            ["lookup_locations.id"],
            name=op.f("fk_lookup_asset_types_location_id_lookup_locations"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lookup_asset_types")),
        sa.UniqueConstraint(
            "location_id", "name", name=op.f("uq_lookup_asset_types_location_id_name")
        ),
    )
    op.create_table(
        "lookup_asset_type_colors",
        sa.Column("asset_type", sa.String(length=200), nullable=False),
        sa.Column("company", sa.String(length=200), server_default="", nullable=False),
        sa.Column("location", sa.String(length=200), server_default="", nullable=False),
        sa.Column("color", sa.String(length=32), nullable=False),
        sa.CheckConstraint(
            "company = '' OR location <> ''",
            name=op.f("ck_lookup_asset_type_colors_company_needs_location"),
        ),
        sa.PrimaryKeyConstraint(
            "asset_type",
            "company",
            "location",
            name=op.f("pk_lookup_asset_type_colors"),
        ),
    )
    op.create_table(
        "lookup_status_colors",
        sa.Column(
            "status_key", sa.String(length=100), nullable=False, comment="Lower-cased."
        ),
        sa.Column("color", sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint("status_key", name=op.f("pk_lookup_status_colors")),
    )
    op.create_table(
        "lookup_settings",
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_lookup_settings")),
    )
    op.create_table(
        "lookup_keywords",
        sa.Column(
            "kind",
            sa.String(length=32),
            nullable=False,
            comment="inspection | project",
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("keyword", sa.String(length=200), nullable=False),
        sa.CheckConstraint(
            "kind IN ('inspection', 'project')", name=op.f("ck_lookup_keywords_kind")
        ),
        sa.PrimaryKeyConstraint("kind", "position", name=op.f("pk_lookup_keywords")),
    )
    op.create_table(
        "lookup_meta",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column(
            "modified_at_ms",
            sa.BigInteger(),
            nullable=False,
            comment="Bumped in the same transaction as every write.",
        ),
        sa.CheckConstraint("id = 1", name=op.f("ck_lookup_meta_single_row")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lookup_meta")),
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("lookup_meta")
    op.drop_table("lookup_keywords")
    op.drop_table("lookup_settings")
    op.drop_table("lookup_status_colors")
    op.drop_table("lookup_asset_type_colors")
    op.drop_table("lookup_asset_types")
    op.drop_table("lookup_locations")
    op.drop_table("lookup_companies")
