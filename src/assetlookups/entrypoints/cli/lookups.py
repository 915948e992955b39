"""ASSETLOOKUPS lookup commands: browse and edit the cached lookup data.

Read commands print JSON to **stdout**; write commands print a short notice
to **stderr** and exit non-zero when the store rejects the change.

Requirements
- ``ASSETLOOKUPS_DB_URL`` must be set and the schema upgraded.
- ``ASSETLOOKUPS_CACHE_PATH`` optionally moves the disk cache file.
"""

from __future__ import annotations

import click
import click_extra as clickx

from assetlookups.interfaces.lookups.lookup_writer import (
    SETTING_APPLY_REPAIR_COLORS,
    SETTING_APPLY_STATUS_COLORS,
)

from .helpers import echo_json, report
from .runner import run_lookups

APPLY_SETTINGS = {
    "status": SETTING_APPLY_STATUS_COLORS,
    "repair": SETTING_APPLY_REPAIR_COLORS,
}

company_option = click.option(
    "--company", "-c", default=None, help="Company scope (requires --location)."
)
location_option = click.option(
    "--location", "-l", default=None, help="Location scope."
)


# ============================================================================
#                               Hierarchy reads
# ============================================================================


@click.command()
def tree() -> None:
    """Print the full company / location / asset type tree."""
    lookup_tree = run_lookups(lambda repo: repo.get_lookup_tree())
    echo_json(lookup_tree.to_dict())


@click.command()
def companies() -> None:
    """List active companies."""
    echo_json(run_lookups(lambda repo: repo.get_companies()))


@click.command()
@click.argument("company")
def locations(company: str) -> None:
    """List the locations of COMPANY."""
    echo_json(run_lookups(lambda repo: repo.get_locations(company)))


@click.command("asset-types")
@click.argument("company")
@click.argument("location")
def asset_types(company: str, location: str) -> None:
    """List the asset types at COMPANY / LOCATION."""
    echo_json(run_lookups(lambda repo: repo.get_asset_types(company, location)))


# ============================================================================
#                                   Colours
# ============================================================================


@click.group(cls=clickx.ExtraGroup)
def color() -> None:
    """Asset type colours (global, per location, per company and location)."""


@color.command("get")
@click.argument("asset_type")
@location_option
@company_option
def color_get(asset_type: str, location: str | None, company: str | None) -> None:
    """Print the colour of ASSET_TYPE at exactly the selected scope."""
    echo_json(run_lookups(lambda repo: repo.get_color(asset_type, location, company)))


@color.command("set")
@click.argument("asset_type")
@click.argument("value")
@location_option
@company_option
def color_set(
    asset_type: str, value: str, location: str | None, company: str | None
) -> None:
    """Set the colour of ASSET_TYPE to VALUE (an empty VALUE removes it)."""
    result = run_lookups(
        lambda repo: repo.set_color(asset_type, value, location, company)
    )
    report(result, f"Colour of '{asset_type}' updated")


@color.command("maps")
def color_maps() -> None:
    """Print every colour map."""
    scopes = run_lookups(lambda repo: repo.get_color_maps())
    echo_json(scopes.to_dict())


# ============================================================================
#                                    Links
# ============================================================================


@click.group(cls=clickx.ExtraGroup)
def link() -> None:
    """Photo folder links per location and per asset type."""


@link.command("resolve")
@click.argument("company")
@click.argument("location")
@click.argument("asset_type", required=False)
def link_resolve(company: str, location: str, asset_type: str | None) -> None:
    """Print the photo folder link for a station (null when unset)."""
    echo_json(
        run_lookups(lambda repo: repo.resolve_photos_base(company, location, asset_type))
    )


@link.command("set-location")
@click.argument("company")
@click.argument("location")
@click.argument("target")
def link_set_location(company: str, location: str, target: str) -> None:
    """Set the link of COMPANY / LOCATION to TARGET."""
    result = run_lookups(lambda repo: repo.set_location_link(company, location, target))
    report(result, f"Link of '{company}' / '{location}' updated")


@link.command("set-asset-type")
@click.argument("company")
@click.argument("location")
@click.argument("asset_type")
@click.argument("target")
def link_set_asset_type(
    company: str, location: str, asset_type: str, target: str
) -> None:
    """Set the link of ASSET_TYPE at COMPANY / LOCATION to TARGET."""
    result = run_lookups(
        lambda repo: repo.set_asset_type_link(asset_type, company, location, target)
    )
    report(result, f"Link of '{asset_type}' at '{company}' / '{location}' updated")


# ============================================================================
#                                  Statuses
# ============================================================================


@click.group(cls=clickx.ExtraGroup)
def status() -> None:
    """Status colours and the map colouring switches."""


@status.command("show")
def status_show() -> None:
    """Print status colours and map settings."""
    settings = run_lookups(lambda repo: repo.get_status_settings())
    echo_json(settings.to_dict())


@status.command("set")
@click.argument("key")
@click.argument("value")
def status_set(key: str, value: str) -> None:
    """Set the colour of status KEY to VALUE."""
    result = run_lookups(lambda repo: repo.set_status_color(key, value))
    report(result, f"Status '{key}' updated")


@status.command("delete")
@click.argument("key")
def status_delete(key: str) -> None:
    """Remove status KEY."""
    result = run_lookups(lambda repo: repo.delete_status(key))
    report(result, f"Status '{key}' deleted")


@status.command("apply")
@click.argument("kind", type=click.Choice(sorted(APPLY_SETTINGS), case_sensitive=False))
@click.option("--on/--off", "enabled", default=True, show_default=True)
def status_apply(kind: str, enabled: bool) -> None:
    """Turn map colouring by KIND on or off."""
    key = APPLY_SETTINGS[kind.lower()]
    result = run_lookups(lambda repo: repo.set_setting_boolean(key, enabled))
    report(result, f"Map {kind.lower()} colours {'on' if enabled else 'off'}")


# ============================================================================
#                                  Keywords
# ============================================================================


@click.group(cls=clickx.ExtraGroup)
def keywords() -> None:
    """Inspection and project keyword lists."""


@keywords.command("show")
def keywords_show() -> None:
    """Print both keyword lists."""

    async def _both(repo):
        return {
            "inspection": await repo.get_inspection_keywords(),
            "project": await repo.get_project_keywords(),
        }

    echo_json(run_lookups(_both))


@keywords.command("set")
@click.argument(
    "kind", type=click.Choice(["inspection", "project"], case_sensitive=False)
)
@click.argument("words", nargs=-1)
def keywords_set(kind: str, words: tuple[str, ...]) -> None:
    """Replace the KIND keyword list with WORDS (none restores the defaults)."""
    if kind.lower() == "inspection":
        result = run_lookups(lambda repo: repo.set_inspection_keywords(words))
    else:
        result = run_lookups(lambda repo: repo.set_project_keywords(words))
    report(result, f"{kind.capitalize()} keywords updated")


COMMANDS = (tree, companies, locations, asset_types, color, link, status, keywords)
