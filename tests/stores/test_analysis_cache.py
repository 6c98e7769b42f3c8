"""Tests for the analysis TTL cache."""

from __future__ import annotations

from rulegen.stores import AnalysisCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache: AnalysisCache[str] = AnalysisCache(ttl=300, clock=clock)
    cache.store("github.com/acme/webapp@main", "analysis")

    clock.now += 299
    assert cache.get("github.com/acme/webapp@main") == "analysis"

    clock.now += 1
    assert cache.get("github.com/acme/webapp@main") is None
    assert len(cache) == 0


def test_store_refreshes_timestamp() -> None:
    clock = _Clock()
    cache: AnalysisCache[int] = AnalysisCache(ttl=10, clock=clock)
    cache.store("k", 1)
    clock.now += 8
    cache.store("k", 2)
    clock.now += 8

    assert cache.get("k") == 2


def test_prune_invalidate_and_clear() -> None:
    clock = _Clock()
    cache: AnalysisCache[int] = AnalysisCache(ttl=10, clock=clock)
    cache.store("old", 1)
    clock.now += 5
    cache.store("fresh", 2)
    clock.now += 6

    assert cache.prune() == 1
    assert "fresh" in cache and "old" not in cache

    cache.invalidate("fresh")
    assert len(cache) == 0

    cache.store("again", 3)
    cache.clear()
    assert cache.get("again") is None


def test_zero_ttl_never_serves_entries() -> None:
    cache: AnalysisCache[int] = AnalysisCache(ttl=0, clock=_Clock())
    cache.store("k", 1)

    assert cache.get("k") is None
