"""ASSETLOOKUPS hierarchy commands: add and delete companies, locations and
asset types.

Deleting a company or location removes everything beneath it, so the delete
commands ask for confirmation unless ``--yes`` is given.
"""

from __future__ import annotations

import click
import click_extra as clickx

from .helpers import report
from .runner import run_lookups

yes_option = click.confirmation_option(
    prompt="This also removes everything below it. Continue?"
)


@click.group(cls=clickx.ExtraGroup)
def company() -> None:
    """Companies."""


@company.command("add")
@click.argument("name")
@click.option("--inactive", is_flag=True, help="Hide the company from lookups.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--email", default="", help="Contact e-mail.")
def company_add(name: str, inactive: bool, description: str, email: str) -> None:
    """Add company NAME, or update it if it exists."""
    result = run_lookups(
        lambda repo: repo.upsert_company(name, not inactive, description, email)
    )
    report(result, f"Company '{name}' saved")


@company.command("delete")
@click.argument("name")
@yes_option
def company_delete(name: str) -> None:
    """Delete company NAME with its locations and asset types."""
    result = run_lookups(lambda repo: repo.delete_company(name))
    report(result, f"Company '{name}' deleted")


@click.group(cls=clickx.ExtraGroup)
def location() -> None:
    """Locations of a company."""


@location.command("add")
@click.argument("company_name", metavar="COMPANY")
@click.argument("name", metavar="LOCATION")
def location_add(company_name: str, name: str) -> None:
    """Add LOCATION to COMPANY."""
    result = run_lookups(lambda repo: repo.upsert_location(name, company_name))
    report(result, f"Location '{name}' saved")


@location.command("delete")
@click.argument("company_name", metavar="COMPANY")
@click.argument("name", metavar="LOCATION")
@yes_option
def location_delete(company_name: str, name: str) -> None:
    """Delete LOCATION of COMPANY with its asset types."""
    result = run_lookups(lambda repo: repo.delete_location(company_name, name))
    report(result, f"Location '{name}' deleted")


@click.group("asset-type", cls=clickx.ExtraGroup)
def asset_type() -> None:
    """Asset types at a company location."""


@asset_type.command("add")
@click.argument("company_name", metavar="COMPANY")
@click.argument("location_name", metavar="LOCATION")
@click.argument("name", metavar="ASSET_TYPE")
def asset_type_add(company_name: str, location_name: str, name: str) -> None:
    """Add ASSET_TYPE at COMPANY / LOCATION (a random colour is assigned)."""
    result = run_lookups(
        lambda repo: repo.upsert_asset_type(name, company_name, location_name)
    )
    report(result, f"Asset type '{name}' saved")


@asset_type.command("delete")
@click.argument("company_name", metavar="COMPANY")
@click.argument("location_name", metavar="LOCATION")
@click.argument("name", metavar="ASSET_TYPE")
def asset_type_delete(company_name: str, location_name: str, name: str) -> None:
    """Delete ASSET_TYPE at COMPANY / LOCATION."""
    result = run_lookups(
        lambda repo: repo.delete_asset_type(company_name, location_name, name)
    )
    report(result, f"Asset type '{name}' deleted")


COMMANDS = (company, location, asset_type)
