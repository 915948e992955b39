"""End-to-end tests for the lookup commands.

A user sets up a fresh database, builds a small hierarchy, configures
colours, links, statuses and keywords, and reads everything back as JSON.
Notices go to stderr, so stdout of read commands is parsed directly.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from assetlookups.entrypoints.cli.db import MISSING_DB_URL_MSG
from assetlookups.entrypoints.cli.main import assetlookups as cli
from assetlookups.entrypoints.cli.runner import STORE_UNAVAILABLE_MSG

# pylint: disable=redefined-outer-name
# pylint: disable=magic-value-comparison


@pytest.fixture
def runner(cli_env) -> CliRunner:
    """Runner against an upgraded temp database."""
    runner = CliRunner(env=cli_env)
    result = runner.invoke(cli, ["db", "upgrade", "--force"])
    assert result.exit_code == 0, result.output
    return runner


@pytest.fixture
def seeded(runner) -> CliRunner:
    for args in (
        ["company", "add", "Acme", "--email", "ops@acme.test"],
        ["location", "add", "Acme", "North"],
        ["asset-type", "add", "Acme", "North", "Pump"],
    ):
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
    return runner


def read_json(runner: CliRunner, *args: str):
    result = runner.invoke(cli, list(args))
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_missing_url(tmp_path):
    runner = CliRunner(
        env={"ASSETLOOKUPS_DB_URL": "", "ASSETLOOKUPS_LOG_PATH": str(tmp_path / "l.log")}
    )
    result = runner.invoke(cli, ["companies"])
    assert result.exit_code == 1
    assert MISSING_DB_URL_MSG in result.output


def test_unmigrated_database(cli_env):
    result = CliRunner(env=cli_env).invoke(cli, ["companies"])
    assert result.exit_code == 1
    assert STORE_UNAVAILABLE_MSG in result.output


def test_empty_database_reads(runner):
    assert read_json(runner, "companies") == []
    assert read_json(runner, "locations", "Acme") == []
    assert read_json(runner, "color", "get", "Pump") is None
    assert read_json(runner, "link", "resolve", "Acme", "North") is None
    assert read_json(runner, "keywords", "show")["inspection"] == ["inspection"]


def test_hierarchy(seeded):
    assert read_json(seeded, "companies") == ["Acme"]
    assert read_json(seeded, "locations", "acme") == []
    assert read_json(seeded, "locations", "Acme") == ["North"]
    assert read_json(seeded, "asset-types", "Acme", "North") == ["Pump"]

    tree = read_json(seeded, "tree")
    assert tree["companies"] == [
        {"name": "Acme", "description": "", "email": "ops@acme.test"}
    ]
    assert tree["asset_types_by_company_location"] == {"Acme": {"North": ["Pump"]}}


def test_upsert_existing_and_failures(seeded):
    result = seeded.invoke(cli, ["company", "add", "ACME"])
    assert result.exit_code == 0
    assert "(already present)" in result.stderr

    result = seeded.invoke(cli, ["location", "add", "Nobody", "North"])
    assert result.exit_code == 1
    assert "Company 'Nobody' not found" in result.output


def test_colours(seeded):
    assert read_json(seeded, "color", "get", "Pump") is None
    scoped = read_json(seeded, "color", "get", "Pump", "-l", "North", "-c", "Acme")
    assert scoped.startswith("#")

    result = seeded.invoke(cli, ["color", "set", "Pump", "#ff0000"])
    assert result.exit_code == 0
    result = seeded.invoke(cli, ["color", "set", "Pump", "#00ff00", "-l", "North"])
    assert result.exit_code == 0

    assert read_json(seeded, "color", "get", "Pump") == "#ff0000"
    assert read_json(seeded, "color", "get", "Pump", "--location", "North") == "#00ff00"
    maps = read_json(seeded, "color", "maps")
    assert maps["global"] == {"Pump": "#ff0000"}
    assert maps["by_location"] == {"North": {"Pump": "#00ff00"}}


def test_links(seeded):
    seeded.invoke(cli, ["link", "set-location", "Acme", "North", "//srv/north"])
    assert read_json(seeded, "link", "resolve", "ACME", "north", "Pump") == "//srv/north"

    seeded.invoke(cli, ["link", "set-asset-type", "Acme", "North", "Pump", "//srv/pumps"])
    assert read_json(seeded, "link", "resolve", "Acme", "North", "pump") == "//srv/pumps"
    assert read_json(seeded, "link", "resolve", "Acme", "North") == "//srv/north"


def test_statuses(runner):
    assert runner.invoke(cli, ["status", "set", "Active", "#00aa00"]).exit_code == 0
    assert runner.invoke(cli, ["status", "apply", "repair"]).exit_code == 0
    assert runner.invoke(cli, ["status", "apply", "status", "--off"]).exit_code == 0
    assert read_json(runner, "status", "show") == {
        "status_colors": {"active": "#00aa00"},
        "apply_status_colors_on_map": False,
        "apply_repair_colors_on_map": True,
    }

    assert runner.invoke(cli, ["status", "delete", "ACTIVE"]).exit_code == 0
    result = runner.invoke(cli, ["status", "delete", "active"])
    assert result.exit_code == 1
    assert "Status 'active' not found" in result.output


def test_keywords(runner):
    result = runner.invoke(cli, ["keywords", "set", "project", "build", "retrofit"])
    assert result.exit_code == 0
    assert read_json(runner, "keywords", "show")["project"] == ["build", "retrofit"]

    assert runner.invoke(cli, ["keywords", "set", "project"]).exit_code == 0
    assert read_json(runner, "keywords", "show")["project"][0] == "project"


def test_deletes_ask_for_confirmation(seeded):
    result = seeded.invoke(cli, ["company", "delete", "Acme"], input="n\n")
    assert result.exit_code == 1
    assert read_json(seeded, "companies") == ["Acme"]

    result = seeded.invoke(cli, ["asset-type", "delete", "Acme", "North", "Pump"])
    assert result.exit_code == 0
    assert read_json(seeded, "asset-types", "Acme", "North") == []

    result = seeded.invoke(cli, ["company", "delete", "Acme", "--yes"])
    assert result.exit_code == 0
    assert read_json(seeded, "companies") == []


def test_reads_populate_and_writes_clear_cache_file(seeded, cli_env):
    cache_file = Path(cli_env["ASSETLOOKUPS_CACHE_PATH"])
    assert read_json(seeded, "cache", "path") == str(cache_file)

    read_json(seeded, "companies")
    assert cache_file.exists()

    seeded.invoke(cli, ["company", "add", "Beta"])
    assert not cache_file.exists()

    read_json(seeded, "companies")
    result = seeded.invoke(cli, ["cache", "clear"])
    assert result.exit_code == 0
    assert not cache_file.exists()


def test_corrupt_cache_file_is_ignored(seeded, cli_env):
    cache_file = Path(cli_env["ASSETLOOKUPS_CACHE_PATH"])
    cache_file.parent.mkdir(parents=True, exist_ok=True)
    cache_file.write_text("garbage", encoding="utf-8")

    assert read_json(seeded, "companies") == ["Acme"]
    assert json.loads(cache_file.read_text(encoding="utf-8"))["version"] == 1


def test_cache_clear_reports_undeletable_path(runner, cli_env):
    Path(cli_env["ASSETLOOKUPS_CACHE_PATH"]).mkdir(parents=True)

    result = runner.invoke(cli, ["cache", "clear"])
    assert result.exit_code == 1
    assert "delete failed" in result.stderr
