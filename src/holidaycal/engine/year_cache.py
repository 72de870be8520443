"""
holidaycal Year Resolution Cache

Per-year memoization of a full catalog resolution pass.

On the first query for a year every rule in the catalog is resolved once
and the results are indexed by date. Later queries for that year read the
finished index without locking.

State per year: UNRESOLVED -> RESOLVING -> RESOLVED.

A malformed rule never aborts a pass: it is logged, recorded as a
SkippedRule on the year's index, and the remaining rules resolve normally.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from ..exceptions import MalformedRuleError
from ..models import (
    HolidayRule,
    ResolutionState,
    ResolvedOccurrence,
    SkippedRule,
    YearIndex,
)
from .catalog import HolidayCatalog
from .resolver import resolve

logger = logging.getLogger(__name__)

Resolver = Callable[[HolidayRule, int, Optional[HolidayCatalog]], Optional[date]]


@dataclass
class CacheStats:
    """
    Counters for cache behaviour (diagnostics and tests).

    ``hits`` is bumped on the lock-free read path and may undercount
    under concurrent reads; the other counters are updated under the
    cache lock and are exact.
    """
    resolution_passes: int = 0
    hits: int = 0
    misses: int = 0
    invalidations: int = 0
    rules_skipped: int = 0
    stale_passes: int = 0


@dataclass
class YearResolutionCache:
    """
    Resolves a catalog one year at a time and keeps the results.

    The cache is valid for the life of the process: rules are immutable.
    If the catalog is mutated, the next lookup notices the new revision
    and drops every cached year (dependent rules can change transitively,
    so nothing is patched incrementally). A pass that was already running
    when the catalog changed is discarded and the year is resolved again.

    Usage:
        cache = YearResolutionCache(catalog)

        index = cache.index_for(2024)
        index.rules_on(date(2024, 11, 28))

        # Prefetch adjacent years from another thread
        cache.warm(2025, 2026)
    """

    catalog: HolidayCatalog

    # Injected for tests (call counting); defaults to the pure resolver
    resolver: Resolver = resolve

    stats: CacheStats = field(default_factory=CacheStats)

    # Internal state
    _indices: dict[int, YearIndex] = field(default_factory=dict, repr=False)
    _states: dict[int, ResolutionState] = field(default_factory=dict, repr=False)
    _year_locks: dict[int, threading.Lock] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _catalog_revision: int = field(default=-1, repr=False)
    # Bumped by invalidate(); a pass only publishes into its own generation
    _generation: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._catalog_revision = self.catalog.revision

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def index_for(self, year: int) -> YearIndex:
        """
        Get the index for a year, resolving it on first access.

        Concurrent first accesses for the same year perform one pass.
        """
        while True:
            self._check_revision()

            index = self._indices.get(year)
            if index is not None:
                self.stats.hits += 1
                return index

            with self._lock_for(year):
                # Another thread may have finished while we waited
                index = self._indices.get(year)
                if index is not None:
                    self.stats.hits += 1
                    return index

                with self._lock:
                    generation = self._generation
                    revision = self.catalog.revision
                    self.stats.misses += 1
                    self._states[year] = ResolutionState.RESOLVING

                try:
                    index = self._resolve_year(year)
                except BaseException:
                    with self._lock:
                        if self._generation == generation:
                            self._states[year] = ResolutionState.UNRESOLVED
                    raise

                with self._lock:
                    current = (
                        self._generation == generation
                        and self.catalog.revision == revision
                        and self._catalog_revision == revision
                    )
                    if current:
                        self._indices[year] = index
                        self._states[year] = ResolutionState.RESOLVED
                        return index
                    self.stats.stale_passes += 1

            logger.info("Discarding index for %d built from a stale catalog; retrying", year)

    def rules_on(self, d: date) -> tuple[HolidayRule, ...]:
        """Rules falling on a date (empty tuple if none)."""
        return self.index_for(d.year).rules_on(d)

    def state(self, year: int) -> ResolutionState:
        """Current resolution state of a year."""
        return self._states.get(year, ResolutionState.UNRESOLVED)

    def is_resolved(self, year: int) -> bool:
        return year in self._indices

    @property
    def cached_years(self) -> list[int]:
        return sorted(self._indices)

    def skipped(self, year: int) -> tuple[SkippedRule, ...]:
        """Rules omitted from a year's resolution pass."""
        return self.index_for(year).skipped

    def warm(self, *years: int) -> None:
        """Resolve years ahead of time (e.g. from a prefetch thread)."""
        for year in years:
            self.index_for(year)

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    def invalidate(self) -> None:
        """Drop every cached year."""
        with self._lock:
            self._indices = {}
            self._states = {}
            self._year_locks = {}
            self._catalog_revision = self.catalog.revision
            self._generation += 1
            self.stats.invalidations += 1

    def _check_revision(self) -> None:
        if self._catalog_revision != self.catalog.revision:
            logger.warning(
                "Catalog %r changed (revision %d -> %d); dropping %d cached years",
                self.catalog.name, self._catalog_revision,
                self.catalog.revision, len(self._indices),
            )
            self.invalidate()

    def _lock_for(self, year: int) -> threading.Lock:
        with self._lock:
            lock = self._year_locks.get(year)
            if lock is None:
                lock = threading.Lock()
                self._year_locks[year] = lock
            return lock

    # -------------------------------------------------------------------------
    # Resolution Pass
    # -------------------------------------------------------------------------

    def _resolve_year(self, year: int) -> YearIndex:
        """Resolve every catalog rule for one year and build its index."""
        started = time.perf_counter()
        with self._lock:
            self.stats.resolution_passes += 1

        occurrences: list[ResolvedOccurrence] = []
        skipped: list[SkippedRule] = []

        for rule in self.catalog:
            try:
                resolved = self.resolver(rule, year, self.catalog)
            except MalformedRuleError as e:
                logger.warning("Skipping rule %r for %d: %s", rule.name, year, e)
                skipped.append(SkippedRule(
                    name=rule.name, year=year, code=e.code, reason=e.message,
                ))
                continue
            except Exception as e:
                logger.exception("Unexpected error resolving rule %r for %d", rule.name, year)
                skipped.append(SkippedRule(
                    name=rule.name, year=year, code="HC_INTERNAL_ERROR", reason=str(e),
                ))
                continue

            if resolved is not None:
                occurrences.append(ResolvedOccurrence(date=resolved, rule=rule))

        occurrences.sort(
            key=lambda o: (o.date, self.catalog.position(o.rule.name), o.rule.name)
        )

        grouped: dict[date, list[HolidayRule]] = defaultdict(list)
        for occurrence in occurrences:
            grouped[occurrence.date].append(occurrence.rule)

        with self._lock:
            self.stats.rules_skipped += len(skipped)
        index = YearIndex(
            year=year,
            by_date={d: tuple(rules) for d, rules in grouped.items()},
            occurrences=tuple(occurrences),
            skipped=tuple(skipped),
            catalog_fingerprint=self.catalog.fingerprint,
        )

        logger.info(
            "Resolved %d rules for %d: %d occurrences, %d skipped (%.1f ms)",
            len(self.catalog), year, len(occurrences), len(skipped),
            (time.perf_counter() - started) * 1000,
        )
        return index
