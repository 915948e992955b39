"""Global pytest fixtures for ASSETLOOKUPS."""

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.lookups",
]
