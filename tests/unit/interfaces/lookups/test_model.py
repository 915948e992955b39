"""Unit tests for the lookup read models.

Covers building a :class:`LookupSnapshot` from its flattened form: tolerant
handling of absent fields, rejection of wrong shapes and bad timestamps, key
normalisation per scope, and isolation of copies.
"""

import math
import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from assetlookups.interfaces.lookups import (
    InvalidSnapshotError,
    KeywordLists,
    LookupSnapshot,
)
from assetlookups.interfaces.lookups.model import (
    DEFAULT_INSPECTION_KEYWORDS,
    DEFAULT_PROJECT_KEYWORDS,
    LocationLinks,
)

# pylint: disable=magic-value-comparison

RAW = {
    "mtime_ms": 100,
    "companies": [
        {"name": "Acme", "active": True, "email": "ops@acme.test"},
        {"name": "Defunct", "active": False},
        "Beta",
        "  ",
    ],
    "locations_by_company": {"Acme": ["North", "south", "North"]},
    "asset_types_by_company_location": {"Acme": {"North": ["Pump", "Valve"]}},
    "colors_global": {"Pump": "#ff0000", " Pump ": "#00ff00"},
    "colors_by_location": {"North": {"Pump": "#111111"}},
    "colors_by_company_location": {"Acme": {"North": {"Pump": "#222222"}}},
    "location_links": {"Acme": {"North": "\\\\srv\\acme\\north"}},
    "asset_type_links": {"ACME": {"NORTH": {"PUMP": "\\\\srv\\acme\\pumps"}}},
    "status_colors": {"Active": "#00aa00", "": "#000000"},
    "apply_status_colors_on_map": "TRUE",
    "apply_repair_colors_on_map": 0,
    "inspection_keywords": "inspect, survey ,inspect",
    "project_keywords": [],
}


class TestFromMapping:
    """Building snapshots from raw data."""

    @staticmethod
    def test_empty_mapping_gives_defaults():
        snapshot = LookupSnapshot.from_mapping({})
        assert snapshot.mtime_ms == 0
        assert snapshot.tree.company_names() == []
        assert snapshot.colors.global_colors.get("Pump") is None
        assert snapshot.status.apply_status_colors_on_map is False
        assert snapshot.keywords == KeywordLists()

    @staticmethod
    def test_tree_lists_active_companies_sorted():
        snapshot = LookupSnapshot.from_mapping(RAW)
        assert snapshot.tree.company_names() == ["Acme", "Beta"]
        assert snapshot.tree.companies[0].email == "ops@acme.test"
        assert snapshot.tree.locations("Acme") == ["North", "south"]
        assert snapshot.tree.asset_types("Acme", "North") == ["Pump", "Valve"]
        assert snapshot.tree.locations("Nobody") == []

    @staticmethod
    def test_colours_are_exact_and_first_value_wins():
        colors = LookupSnapshot.from_mapping(RAW).colors
        assert colors.global_colors.get("Pump") == "#ff0000"
        assert colors.global_colors.get(" Pump ") == "#ff0000"
        assert colors.global_colors.get("pump") is None
        assert colors.location_colors.get("Pump", "North") == "#111111"
        assert colors.company_location_colors.get("Pump", "Acme", "North") == "#222222"

    @staticmethod
    def test_links_and_statuses_are_case_insensitive():
        snapshot = LookupSnapshot.from_mapping(RAW)
        assert snapshot.location_links.get("ACME", "north") == "\\\\srv\\acme\\north"
        assert snapshot.asset_type_links.get("acme", "North", "pump")
        assert snapshot.status.get_color("ACTIVE") == "#00aa00"
        assert snapshot.status.status_colors == {"active": "#00aa00"}

    @staticmethod
    def test_flags_and_keywords():
        snapshot = LookupSnapshot.from_mapping(RAW)
        assert snapshot.status.apply_status_colors_on_map is True
        assert snapshot.status.apply_repair_colors_on_map is False
        assert snapshot.keywords.inspection == ("inspect", "survey")
        assert snapshot.keywords.project == DEFAULT_PROJECT_KEYWORDS

    @staticmethod
    def test_blank_keyword_lists_fall_back_to_defaults():
        keywords = KeywordLists.from_raw(" , ", None)
        assert keywords.inspection == DEFAULT_INSPECTION_KEYWORDS
        assert keywords.project == DEFAULT_PROJECT_KEYWORDS


class TestInvalidSnapshots:
    """Wrong shapes are rejected with InvalidSnapshotError."""

    @staticmethod
    @pytest.mark.parametrize(
        "raw",
        [
            {"mtime_ms": -5},
            {"mtime_ms": "soon"},
            {"mtime_ms": True},
            {"mtime_ms": math.inf},
            {"mtime_ms": math.nan},
            {"mtime_ms": 1_700_000_000_000.5},
        ],
    )
    def test_bad_timestamps(raw):
        with pytest.raises(InvalidSnapshotError):
            LookupSnapshot.from_mapping(raw)

    @staticmethod
    def test_whole_float_timestamp_is_accepted():
        assert LookupSnapshot.from_mapping({"mtime_ms": 1_700.0}).mtime_ms == 1_700

    @staticmethod
    @pytest.mark.parametrize(
        "raw",
        [
            {"companies": "Acme"},
            {"colors_global": ["#fff"]},
            {"locations_by_company": {"Acme": "North"}},
            {"asset_type_links": {"Acme": "x"}},
        ],
    )
    def test_wrong_shapes(raw):
        with pytest.raises(InvalidSnapshotError):
            LookupSnapshot.from_mapping(raw)

    @staticmethod
    def test_not_an_object():
        with pytest.raises(InvalidSnapshotError, match="must be an object"):
            LookupSnapshot.from_mapping(["nope"])  # type: ignore[arg-type]


class TestCopies:
    """Copies and flattened forms share nothing with the original."""

    @staticmethod
    def test_copy_is_deep():
        original = LookupSnapshot.from_mapping(RAW)
        clone = original.copy()
        clone.colors.global_colors.by_asset_type["Pump"] = "#000000"
        clone.location_links.by_company["acme"]["north"] = "elsewhere"
        clone.status.status_colors.clear()
        assert original.colors.global_colors.get("Pump") == "#ff0000"
        assert original.location_links.get("acme", "north") == "\\\\srv\\acme\\north"
        assert original.status.get_color("active") == "#00aa00"

    @staticmethod
    def test_to_dict_rebuilds_an_equal_snapshot():
        original = LookupSnapshot.from_mapping(RAW)
        assert LookupSnapshot.from_mapping(original.to_dict()) == original

    @staticmethod
    def test_to_dict_holds_only_objects_and_lists():
        def walk(node):
            assert not isinstance(node, (tuple, set, frozenset))
            if isinstance(node, dict):
                for value in node.values():
                    walk(value)
            elif isinstance(node, list):
                for value in node:
                    walk(value)

        walk(LookupSnapshot.from_mapping(RAW).to_dict())


names = st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=12)


@pytest.mark.property
@given(company=names, location=names, link=names)
def test_location_links_ignore_case_and_padding(company, location, link):
    links = LocationLinks.from_raw({company: {location: link}})
    assert links.get(f"  {company.upper()} ", location.lower()) == link
    assert links.get(company.swapcase(), f"{location.swapcase()}\t") == link
