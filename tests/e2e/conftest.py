"""Default marks for tests under `tests/e2e/`."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

# pylint: disable=unused-argument

E2E_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "e2e"


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `e2e` marks to items in `tests/e2e/`."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if E2E_ROOT in path.parents:
            if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
                item.add_marker(pytest.mark.e2e)


@pytest.fixture
def cli_env(sqlite_url: str, tmp_path: Path) -> dict[str, str]:
    """Environment for CLI runs: a temp (unmigrated) database and cache file."""
    return {
        "ASSETLOOKUPS_DB_URL": sqlite_url,
        "ASSETLOOKUPS_CACHE_PATH": str(tmp_path / "cache" / ".lookups_cache.json"),
        "ASSETLOOKUPS_LOG_PATH": str(tmp_path / "latest.log"),
    }


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo the root-logger setup done by the CLI's group callback."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
