"""
CBC Exams Backend: Result Cache Unit Tests
============================================

What:  Tests for the TTL cache, its key derivation and background sweep.
How:   A FakeClock (conftest) drives expiry deterministically; the sweeper
       test uses the real clock with millisecond intervals.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from cbcexams.services.pagination import Page
from cbcexams.services.result_cache import ResultCache


class TestResultCacheGetSet:

    def test_miss_returns_none(self, result_cache):
        assert result_cache.get("resources:q1=x") is None

    def test_hit_returns_payload(self, result_cache):
        payload = {"data": [1, 2, 3]}
        result_cache.set("k", payload)

        assert result_cache.get("k") is payload

    def test_expired_entry_reported_absent(self, result_cache, clock):
        result_cache.set("k", "v")
        clock.advance(60)

        assert result_cache.get("k") is None
        # Still held until the next sweep
        assert len(result_cache) == 1

    def test_overwrite_resets_expiry(self, result_cache, clock):
        result_cache.set("k", "old")
        clock.advance(50)
        result_cache.set("k", "new")
        clock.advance(50)

        assert result_cache.get("k") == "new"

    def test_clear(self, result_cache):
        result_cache.set("a", 1)
        result_cache.set("b", 2)
        result_cache.clear()

        assert len(result_cache) == 0


class TestResultCacheSweep:

    def test_purge_removes_only_expired(self, result_cache, clock):
        result_cache.set("old", 1)
        clock.advance(45)
        result_cache.set("fresh", 2)
        clock.advance(20)

        removed = result_cache.purge_expired()

        assert removed == 1
        assert result_cache.get("old") is None
        assert result_cache.get("fresh") == 2

    def test_purge_on_empty_cache(self, result_cache):
        assert result_cache.purge_expired() == 0

    @pytest.mark.asyncio
    async def test_background_sweeper_removes_expired(self):
        cache = ResultCache(ttl_seconds=0.01, sweep_interval_seconds=0.02)
        cache.set("k", "v")
        cache.start()
        try:
            assert cache.running
            await asyncio.sleep(0.2)
            assert len(cache) == 0
        finally:
            await cache.stop()

    @pytest.mark.asyncio
    async def test_stop_cancels_sweeper_and_clears(self):
        cache = ResultCache(ttl_seconds=60, sweep_interval_seconds=60)
        cache.start()
        cache.set("k", "v")

        await cache.stop()

        assert not cache.running
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_sweeper(self):
        cache = ResultCache(ttl_seconds=60, sweep_interval_seconds=60)
        cache.start()
        first = cache._sweeper
        cache.start()

        assert cache._sweeper is first
        await cache.stop()


class TestMakeKey:
    """Cache keys must be deterministic and collision-free."""

    def test_format(self):
        key = ResultCache.make_key("resources", [("q1", "grade 9"), ("q2", "")], Page(1, 100))
        assert key == "resources:q1=grade+9&q2=&page=1&limit=100"

    def test_identical_params_identical_key(self):
        params = [("q1", "maths"), ("q2", ""), ("q3", ""), ("q4", "")]
        assert ResultCache.make_key("resources", params, Page(2, 10)) == ResultCache.make_key(
            "resources", list(params), Page(2, 10)
        )

    def test_page_and_limit_distinguish_keys(self):
        params = [("q1", "maths")]
        keys = {
            ResultCache.make_key("resources", params, Page(1, 10)),
            ResultCache.make_key("resources", params, Page(2, 10)),
            ResultCache.make_key("resources", params, Page(1, 20)),
        }
        assert len(keys) == 3

    def test_ampersand_in_value_cannot_collide(self):
        crafted = ResultCache.make_key("resources", [("q1", "a&q2=b"), ("q2", "")], Page(1, 10))
        plain = ResultCache.make_key("resources", [("q1", "a"), ("q2", "b")], Page(1, 10))
        assert crafted != plain

    def test_namespace_separates_endpoints(self):
        params = [("search", "")]
        assert ResultCache.make_key("unique_directories", params, Page(1, 10)) != (
            ResultCache.make_key("resources", params, Page(1, 10))
        )

    def test_none_value_treated_as_empty(self):
        assert ResultCache.make_key("r", [("q1", None)], Page(1, 10)) == (
            ResultCache.make_key("r", [("q1", "")], Page(1, 10))
        )


class TestConcurrency:

    def test_concurrent_writes_last_writer_wins(self, result_cache):
        written = set(range(8))

        def writer(worker: int) -> None:
            for _ in range(500):
                result_cache.set("shared", worker)
                result_cache.get("shared")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(writer, written))

        assert result_cache.get("shared") in written
        assert len(result_cache) == 1

    def test_concurrent_purge_and_set(self, result_cache, clock):
        for i in range(200):
            result_cache.set(f"k{i}", i)
        clock.advance(61)

        def rewrite() -> None:
            for i in range(200):
                result_cache.set(f"k{i}", -i)

        with ThreadPoolExecutor(max_workers=2) as pool:
            purge = pool.submit(result_cache.purge_expired)
            writes = pool.submit(rewrite)
            purge.result()
            writes.result()

        # A rewritten entry is never removed by a purge that saw the old one
        assert len(result_cache) == 200
        assert all(result_cache.get(f"k{i}") == -i for i in range(200))
