"""
Tests for YearResolutionCache.

Covers:
- One resolution pass per year, however many lookups follow
- Concurrent first access performing a single pass
- Invalidation when the catalog is mutated
- Malformed rules recorded and skipped without aborting the pass
"""
from __future__ import annotations

import threading
from datetime import date

import pytest

from holidaycal.engine import YearResolutionCache, resolve
from holidaycal.models import ResolutionState, days_after, fixed
from tests.conftest import CountingResolver, make_catalog, make_rule


def names(rules) -> list[str]:
    return [r.name for r in rules]


class TestSinglePassPerYear:
    """The first lookup resolves the whole catalog; later ones read the index."""

    def test_thousand_lookups_one_pass(self, shopping_catalog, counting_resolver) -> None:
        cache = YearResolutionCache(shopping_catalog, resolver=counting_resolver)
        for _ in range(1000):
            cache.rules_on(date(2024, 11, 29))

        assert cache.stats.resolution_passes == 1
        assert counting_resolver.calls == len(shopping_catalog)
        assert cache.stats.misses == 1
        assert cache.stats.hits == 999

    def test_each_year_resolved_separately(self, shopping_catalog, counting_resolver) -> None:
        cache = YearResolutionCache(shopping_catalog, resolver=counting_resolver)
        cache.rules_on(date(2024, 1, 1))
        cache.rules_on(date(2025, 1, 1))
        cache.rules_on(date(2024, 6, 1))

        assert cache.stats.resolution_passes == 2
        assert cache.cached_years == [2024, 2025]

    def test_rules_on_dates(self, shopping_catalog) -> None:
        cache = YearResolutionCache(shopping_catalog)
        assert [r.name for r in cache.rules_on(date(2024, 11, 28))] == ["Thanksgiving"]
        assert [r.name for r in cache.rules_on(date(2024, 11, 29))] == ["Black Friday"]
        assert [r.name for r in cache.rules_on(date(2024, 2, 29))] == ["Leap Day"]
        assert cache.rules_on(date(2024, 11, 30)) == ()

    def test_index_contents(self, shopping_catalog) -> None:
        cache = YearResolutionCache(shopping_catalog)
        index = cache.index_for(2025)

        assert index.year == 2025
        assert [o.name for o in index.occurrences] == ["Thanksgiving", "Black Friday"]
        assert index.date_of("Thanksgiving") == date(2025, 11, 27)
        assert index.date_of("Leap Day") is None
        assert index.catalog_fingerprint == shopping_catalog.fingerprint

    def test_warm(self, shopping_catalog, counting_resolver) -> None:
        cache = YearResolutionCache(shopping_catalog, resolver=counting_resolver)
        cache.warm(2023, 2024, 2025)
        assert cache.cached_years == [2023, 2024, 2025]

        cache.rules_on(date(2024, 11, 28))
        assert cache.stats.resolution_passes == 3


class TestConcurrency:
    """Concurrent first access for a year."""

    def test_concurrent_first_access_single_pass(self, shopping_catalog) -> None:
        resolver = CountingResolver(delay=0.01)
        cache = YearResolutionCache(shopping_catalog, resolver=resolver)
        barrier = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            rules = cache.rules_on(date(2024, 11, 28))
            with results_lock:
                results.append([r.name for r in rules])

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache.stats.resolution_passes == 1
        assert resolver.calls == len(shopping_catalog)
        assert results == [["Thanksgiving"]] * 8

    def test_different_years_in_parallel(self, shopping_catalog) -> None:
        resolver = CountingResolver(delay=0.005)
        cache = YearResolutionCache(shopping_catalog, resolver=resolver)
        threads = [
            threading.Thread(target=cache.index_for, args=(year,))
            for year in (2024, 2025, 2026, 2024, 2025, 2026)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert resolver.calls == 3 * len(shopping_catalog)
        assert cache.cached_years == [2024, 2025, 2026]


class TestInvalidation:
    """Catalog mutation drops every cached year."""

    def test_add_rule_invalidates(self, shopping_catalog) -> None:
        cache = YearResolutionCache(shopping_catalog)
        assert cache.rules_on(date(2024, 12, 2)) == ()

        shopping_catalog.add(make_rule("Cyber Monday", days_after("Thanksgiving", 4)))

        assert [r.name for r in cache.rules_on(date(2024, 12, 2))] == ["Cyber Monday"]
        assert cache.stats.invalidations == 1
        assert cache.stats.resolution_passes == 2

    def test_unchanged_catalog_not_invalidated(self, shopping_catalog) -> None:
        cache = YearResolutionCache(shopping_catalog)
        cache.index_for(2024)
        cache.index_for(2024)
        assert cache.stats.invalidations == 0

    def test_explicit_invalidate(self, shopping_catalog, counting_resolver) -> None:
        cache = YearResolutionCache(shopping_catalog, resolver=counting_resolver)
        cache.index_for(2024)
        cache.invalidate()

        assert cache.cached_years == []
        assert cache.state(2024) == ResolutionState.UNRESOLVED
        cache.index_for(2024)
        assert counting_resolver.calls == 2 * len(shopping_catalog)


class TestMutationDuringPass:
    """A pass that overlaps a catalog mutation never publishes its index."""

    @staticmethod
    def _first_call_blocks(started: threading.Event, release: threading.Event):
        calls = []
        calls_lock = threading.Lock()

        def resolver(rule, year, catalog=None):
            with calls_lock:
                calls.append(rule.name)
                first = len(calls) == 1
            if first:
                started.set()
                release.wait(5)
            return resolve(rule, year, catalog)

        return resolver

    def test_concurrent_reader_result_survives(self) -> None:
        catalog = make_catalog(make_rule("Old", fixed(1, 1)))
        started, release = threading.Event(), threading.Event()
        cache = YearResolutionCache(catalog, resolver=self._first_call_blocks(started, release))
        slow_result = []

        slow = threading.Thread(
            target=lambda: slow_result.append(names(cache.rules_on(date(2024, 1, 1)))),
        )
        slow.start()
        assert started.wait(5)

        catalog.add(make_rule("New", fixed(1, 1)))
        fresh = names(cache.rules_on(date(2024, 1, 1)))
        release.set()
        slow.join(5)

        assert fresh == ["Old", "New"]
        assert slow_result == [["Old", "New"]]
        assert names(cache.rules_on(date(2024, 1, 1))) == ["Old", "New"]
        assert cache.stats.stale_passes == 1
        assert cache.stats.resolution_passes == 2

    def test_unobserved_mutation_triggers_retry(self) -> None:
        catalog = make_catalog(make_rule("Old", fixed(1, 1)))
        started, release = threading.Event(), threading.Event()
        cache = YearResolutionCache(catalog, resolver=self._first_call_blocks(started, release))
        slow_result = []

        slow = threading.Thread(
            target=lambda: slow_result.append(names(cache.rules_on(date(2024, 1, 1)))),
        )
        slow.start()
        assert started.wait(5)

        catalog.add(make_rule("New", fixed(1, 1)))
        release.set()
        slow.join(5)

        assert slow_result == [["Old", "New"]]
        assert names(cache.rules_on(date(2024, 1, 1))) == ["Old", "New"]
        assert cache.stats.stale_passes == 1
        assert cache.stats.invalidations == 1
        assert cache.state(2024) == ResolutionState.RESOLVED


class TestCatalogOrder:
    """Dependent offsets do not depend on where their base sits in the catalog."""

    def test_base_after_dependent(self, thanksgiving, black_friday) -> None:
        base_first = YearResolutionCache(make_catalog(thanksgiving, black_friday))
        base_last = YearResolutionCache(make_catalog(black_friday, thanksgiving))

        for cache in (base_first, base_last):
            assert names(cache.rules_on(date(2024, 11, 29))) == ["Black Friday"]
            assert cache.index_for(2024).date_of("Black Friday") == date(2024, 11, 29)
            assert cache.skipped(2024) == ()


class TestSkippedRules:
    """Malformed rules are reported and omitted, never fatal."""

    def test_orphan_dependent_skipped(self) -> None:
        catalog = make_catalog(
            make_rule("Pi Day", fixed(3, 14)),
            make_rule("Orphan", days_after("Nowhere", 1)),
        )
        cache = YearResolutionCache(catalog)
        index = cache.index_for(2024)

        assert [o.name for o in index.occurrences] == ["Pi Day"]
        assert index.skipped_names == ["Orphan"]
        assert index.skipped[0].code == "HC_RULE_NOT_FOUND"
        assert index.skipped[0].year == 2024
        assert cache.stats.rules_skipped == 1

    def test_cycle_skipped(self) -> None:
        catalog = make_catalog(
            make_rule("A", days_after("B", 1)),
            make_rule("B", days_after("A", 1)),
            make_rule("Pi Day", fixed(3, 14)),
        )
        cache = YearResolutionCache(catalog)

        skipped = cache.skipped(2024)
        assert {s.name for s in skipped} == {"A", "B"}
        assert all(s.code == "HC_DEPENDENCY_CYCLE" for s in skipped)
        assert [r.name for r in cache.rules_on(date(2024, 3, 14))] == ["Pi Day"]

    def test_unexpected_error_recorded(self, shopping_catalog) -> None:
        def broken(rule, year, catalog=None):
            if rule.name == "Leap Day":
                raise RuntimeError("boom")
            return None

        cache = YearResolutionCache(shopping_catalog, resolver=broken)
        skipped = cache.skipped(2024)

        assert len(skipped) == 1
        assert skipped[0].name == "Leap Day"
        assert skipped[0].code == "HC_INTERNAL_ERROR"
        assert skipped[0].reason == "boom"

    def test_skipped_rule_logged(self, caplog) -> None:
        catalog = make_catalog(make_rule("Orphan", days_after("Nowhere", 1)))
        cache = YearResolutionCache(catalog)
        cache.index_for(2024)
        assert "Orphan" in caplog.text


class TestResolutionState:
    """UNRESOLVED -> RESOLVING -> RESOLVED."""

    def test_states(self, shopping_catalog) -> None:
        seen = []
        cache = None

        def observing(rule, year, catalog=None):
            seen.append(cache.state(year))
            return None

        cache = YearResolutionCache(shopping_catalog, resolver=observing)
        assert cache.state(2024) == ResolutionState.UNRESOLVED
        assert not cache.is_resolved(2024)

        cache.index_for(2024)

        assert set(seen) == {ResolutionState.RESOLVING}
        assert cache.state(2024) == ResolutionState.RESOLVED
        assert cache.is_resolved(2024)

    def test_failed_pass_returns_to_unresolved(self, shopping_catalog) -> None:
        cache = YearResolutionCache(shopping_catalog)

        def explode(year):
            raise RuntimeError("interrupted")

        cache._resolve_year = explode
        with pytest.raises(RuntimeError):
            cache.index_for(2024)

        assert cache.state(2024) == ResolutionState.UNRESOLVED
