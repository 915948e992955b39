"""Unit tests for :class:`assetlookups.cache.coordinator.LookupCacheCoordinator`.

The coordinator is driven with scripted snapshot sources that count full
fetches and timestamp probes, so each test can assert exactly how often the
source was hit. Coroutines run under ``asyncio.run``.
"""

from __future__ import annotations

import asyncio
import logging
import threading

import pytest

from assetlookups.cache import STALE, DiskCacheFile, LookupCacheCoordinator
from assetlookups.interfaces.lookups import SnapshotSourceError
from tests.helpers.fake_sources import (
    BrokenSource,
    CountingSource,
    GatedSource,
    snapshot_at,
)

# pylint: disable=magic-value-comparison

COORDINATOR_LOGGER = "assetlookups.cache.coordinator"


def acme_at(mtime_ms: int, color: str = "#ff0000"):
    return snapshot_at(mtime_ms, companies=["Acme"], colors_global={"Pump": color})


class TestEnsureFresh:
    """Freshness checks against the snapshot source."""

    @staticmethod
    def test_cold_cache_fetches_and_writes_disk_file(disk_cache):
        source = CountingSource([acme_at(100)])
        cache = LookupCacheCoordinator(source, disk_cache)

        snapshot = asyncio.run(cache.ensure_fresh())

        assert source.fetches == 1
        assert snapshot.tree.company_names() == ["Acme"]
        assert cache.primed_mtime_ms == 100
        assert disk_cache.load() == acme_at(100)

    @staticmethod
    def test_repeated_checks_fetch_once_with_probe():
        source = CountingSource([acme_at(100)], probe=True)
        cache = LookupCacheCoordinator(source)

        async def scenario():
            for _ in range(5):
                await cache.ensure_fresh()

        asyncio.run(scenario())
        assert source.fetches == 1
        assert source.probes == 4

    @staticmethod
    def test_cold_cache_does_not_probe():
        source = CountingSource([acme_at(100)], probe=True)
        asyncio.run(LookupCacheCoordinator(source).ensure_fresh())
        assert source.probes == 0

    @staticmethod
    def test_unchanged_timestamp_keeps_cached_data_without_probe(disk_cache):
        source = CountingSource([acme_at(100), acme_at(100, color="#0000ff")])
        cache = LookupCacheCoordinator(source, disk_cache)

        async def scenario():
            first = await cache.ensure_fresh()
            disk_cache.clear()
            second = await cache.ensure_fresh()
            return first, second

        first, second = asyncio.run(scenario())
        assert source.fetches == 2
        assert second is first
        assert second.colors.global_colors.get("Pump") == "#ff0000"
        assert not disk_cache.path.exists()

    @staticmethod
    def test_timestamp_change_scenario_fetches_twice():
        """Prime at 100, source moves to 200, then stays at 200."""
        source = CountingSource(
            [acme_at(100), acme_at(200, color="#00ff00")], probe=True
        )
        cache = LookupCacheCoordinator(source)

        async def scenario():
            return [await cache.ensure_fresh() for _ in range(3)]

        first, second, third = asyncio.run(scenario())
        assert source.fetches == 2
        assert first.mtime_ms == 100
        assert second.colors.global_colors.get("Pump") == "#00ff00"
        assert third.mtime_ms == 200
        assert cache.primed_mtime_ms == 200

    @staticmethod
    def test_source_errors_propagate_and_next_call_retries():
        source = CountingSource([acme_at(100)])
        source.fail_with = SnapshotSourceError("counting")
        cache = LookupCacheCoordinator(source)

        with pytest.raises(SnapshotSourceError):
            asyncio.run(cache.ensure_fresh())
        assert cache.primed_mtime_ms == STALE

        source.fail_with = None
        assert asyncio.run(cache.ensure_fresh()).mtime_ms == 100

    @staticmethod
    def test_broken_source_leaves_cache_stale():
        cache = LookupCacheCoordinator(BrokenSource())
        with pytest.raises(SnapshotSourceError, match="broken"):
            asyncio.run(cache.ensure_fresh())
        assert cache.primed_mtime_ms == STALE


class TestConcurrency:
    """A single in-flight refresh shared by concurrent callers."""

    @staticmethod
    def test_concurrent_callers_share_one_fetch():
        async def scenario():
            source = GatedSource([acme_at(100)])
            cache = LookupCacheCoordinator(source)
            waiters = [asyncio.ensure_future(cache.ensure_fresh()) for _ in range(5)]
            await source.started.wait()
            source.gate.set()
            results = await asyncio.gather(*waiters)
            return source, results

        source, results = asyncio.run(scenario())
        assert source.fetches == 1
        assert {r.mtime_ms for r in results} == {100}

    @staticmethod
    def test_cancelled_caller_does_not_cancel_shared_fetch():
        async def scenario():
            source = GatedSource([acme_at(100)])
            cache = LookupCacheCoordinator(source)
            impatient = asyncio.ensure_future(cache.ensure_fresh())
            patient = asyncio.ensure_future(cache.ensure_fresh())
            await source.started.wait()
            impatient.cancel()
            source.gate.set()
            result = await patient
            return impatient, result, cache

        impatient, result, cache = asyncio.run(scenario())
        assert impatient.cancelled()
        assert result.mtime_ms == 100
        assert cache.primed_mtime_ms == 100

    @staticmethod
    def test_invalidate_during_fetch_does_not_prime():
        async def scenario():
            source = GatedSource([acme_at(100), acme_at(200)])
            cache = LookupCacheCoordinator(source)
            waiter = asyncio.ensure_future(cache.ensure_fresh())
            await source.started.wait()
            cache.invalidate()
            source.gate.set()
            detached = await waiter
            primed_after_detached = cache.primed_mtime_ms
            fresh = await cache.ensure_fresh()
            return source, detached, primed_after_detached, fresh

        source, detached, primed_after_detached, fresh = asyncio.run(scenario())
        assert detached.mtime_ms == 100
        assert primed_after_detached == STALE
        assert fresh.mtime_ms == 200
        assert source.fetches == 2


class TestInvalidate:
    """Invalidation drops data and the disk cache file."""

    @staticmethod
    def test_invalidate_forces_refetch_and_deletes_file(disk_cache):
        source = CountingSource([acme_at(100)], probe=True)
        cache = LookupCacheCoordinator(source, disk_cache)

        async def scenario():
            await cache.ensure_fresh()
            assert disk_cache.path.exists()
            cache.invalidate()
            assert cache.primed_mtime_ms == STALE
            assert not disk_cache.path.exists()
            await cache.ensure_fresh()

        asyncio.run(scenario())
        assert source.fetches == 2
        assert disk_cache.path.exists()

    @staticmethod
    def test_invalidate_without_file_is_quiet(disk_cache, caplog):
        cache = LookupCacheCoordinator(CountingSource([acme_at(1)]), disk_cache)
        with caplog.at_level(logging.WARNING, logger=COORDINATOR_LOGGER):
            cache.invalidate()
        assert not caplog.records


class TestWarmStart:
    """Loading the disk cache file at startup."""

    @staticmethod
    def test_no_disk_cache_configured():
        assert LookupCacheCoordinator(CountingSource([acme_at(1)])).warm_start() is False

    @staticmethod
    def test_missing_file_stays_cold(disk_cache):
        cache = LookupCacheCoordinator(CountingSource([acme_at(1)]), disk_cache)
        assert cache.warm_start() is False
        assert cache.primed_mtime_ms == STALE

    @staticmethod
    def test_matching_timestamp_reuses_warm_data(disk_cache):
        disk_cache.save(acme_at(100, color="#abcdef"))
        source = CountingSource([acme_at(100, color="#000000")], probe=True)
        cache = LookupCacheCoordinator(source, disk_cache)

        assert cache.warm_start() is True
        assert cache.primed_mtime_ms == STALE

        snapshot = asyncio.run(cache.ensure_fresh())
        assert source.fetches == 1
        assert snapshot.colors.global_colors.get("Pump") == "#abcdef"
        assert cache.primed_mtime_ms == 100

    @staticmethod
    def test_outdated_warm_data_is_replaced(disk_cache):
        disk_cache.save(acme_at(50, color="#abcdef"))
        source = CountingSource([acme_at(100, color="#000000")])
        cache = LookupCacheCoordinator(source, disk_cache)
        cache.warm_start()

        snapshot = asyncio.run(cache.ensure_fresh())
        assert snapshot.colors.global_colors.get("Pump") == "#000000"
        assert disk_cache.load().mtime_ms == 100

    @staticmethod
    def test_trusted_warm_cache_skips_first_fetch(disk_cache):
        disk_cache.save(acme_at(100))
        source = CountingSource([acme_at(100)], probe=True)
        cache = LookupCacheCoordinator(source, disk_cache, trust_warm_cache=True)
        cache.warm_start()

        assert cache.primed_mtime_ms == 100
        asyncio.run(cache.ensure_fresh())
        assert source.fetches == 0
        assert source.probes == 1

    @staticmethod
    def test_corrupt_file_is_ignored_with_warning(disk_cache, caplog):
        disk_cache.path.parent.mkdir(parents=True)
        disk_cache.path.write_text("{{{ definitely not json", encoding="utf-8")
        source = CountingSource([acme_at(100)])
        cache = LookupCacheCoordinator(source, disk_cache)

        with caplog.at_level(logging.WARNING, logger=COORDINATOR_LOGGER):
            assert cache.warm_start() is False
        assert "Ignoring lookup cache file" in caplog.text

        assert asyncio.run(cache.ensure_fresh()).mtime_ms == 100
        assert disk_cache.load().mtime_ms == 100


def test_disk_write_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    source = CountingSource([acme_at(100)])
    cache = LookupCacheCoordinator(source, DiskCacheFile(blocker / "cache.json"))

    with caplog.at_level(logging.WARNING, logger=COORDINATOR_LOGGER):
        snapshot = asyncio.run(cache.ensure_fresh())

    assert snapshot.mtime_ms == 100
    assert cache.primed_mtime_ms == 100
    assert "Could not write lookup cache file" in caplog.text


class BlockingDiskCache(DiskCacheFile):
    """Disk cache file whose saves record their thread and wait for release."""

    def __init__(self, path) -> None:
        super().__init__(path)
        self.saving = threading.Event()
        self.release = threading.Event()
        self.save_threads: list[int] = []

    def save(self, snapshot) -> None:
        self.save_threads.append(threading.get_ident())
        self.saving.set()
        self.release.wait(timeout=5)
        super().save(snapshot)


def test_disk_write_runs_in_worker_thread(tmp_path):
    disk = BlockingDiskCache(tmp_path / "cache.json")
    disk.release.set()
    cache = LookupCacheCoordinator(CountingSource([acme_at(100)]), disk)

    asyncio.run(cache.ensure_fresh())

    assert disk.save_threads and threading.get_ident() not in disk.save_threads
    assert disk.load().mtime_ms == 100


def test_invalidate_during_disk_write_removes_file(tmp_path):
    disk = BlockingDiskCache(tmp_path / "cache.json")
    source = CountingSource([acme_at(100)])
    cache = LookupCacheCoordinator(source, disk)

    async def scenario():
        task = asyncio.ensure_future(cache.ensure_fresh())
        await asyncio.to_thread(disk.saving.wait, 5)
        cache.invalidate()
        disk.release.set()
        return await task

    assert asyncio.run(scenario()).mtime_ms == 100
    assert cache.primed_mtime_ms == STALE
    assert not disk.path.exists()