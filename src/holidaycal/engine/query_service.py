"""
holidaycal Query Service

Public facade used by the presentation layer.

``holidays_on(d)`` is called once per visible calendar cell on every
render, so it only ever reads a cached YearIndex once the year is warm.

The service is an explicit value: construct one at application start and
pass it to whatever needs it. There is no module-level singleton.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..models import (
    HolidayCategory,
    HolidayRule,
    ResolvedOccurrence,
    SkippedRule,
)
from .catalog import HolidayCatalog, load_default_catalog
from .resolver import occurs_on as _occurs_on
from .year_cache import YearResolutionCache

logger = logging.getLogger(__name__)


# =============================================================================
# Category Preferences
# =============================================================================

DEFAULT_ENABLED_CATEGORIES: frozenset[HolidayCategory] = frozenset({
    HolidayCategory.BANK_HOLIDAY,
    HolidayCategory.UNIQUE_HOLIDAY,
    HolidayCategory.AWARENESS_DAY,
    HolidayCategory.SEASON,
})


@dataclass
class CategoryPreferences:
    """
    Which holiday categories are shown.

    In-memory only; persisting preferences is the host application's job.
    """

    enabled: set[HolidayCategory] = field(
        default_factory=lambda: set(DEFAULT_ENABLED_CATEGORIES)
    )

    @classmethod
    def defaults(cls) -> CategoryPreferences:
        """Bank, unique, awareness and season categories enabled."""
        return cls()

    @classmethod
    def all_enabled(cls) -> CategoryPreferences:
        return cls(enabled=set(HolidayCategory))

    def is_enabled(self, category: HolidayCategory) -> bool:
        return category in self.enabled

    def enable(self, category: HolidayCategory) -> None:
        self.enabled.add(category)

    def disable(self, category: HolidayCategory) -> None:
        self.enabled.discard(category)

    def toggle(self, category: HolidayCategory) -> bool:
        """Flip a category; returns the new state."""
        if self.is_enabled(category):
            self.disable(category)
            return False
        self.enable(category)
        return True

    def enable_all(self) -> None:
        self.enabled = set(HolidayCategory)

    def disable_all(self) -> None:
        self.enabled = set()


# =============================================================================
# Query Service
# =============================================================================

@dataclass
class HolidayQueryService:
    """
    Answers "which holidays fall on this date?" and related queries.

    Handles:
    - Day lookups through the per-year cache
    - Month, year, category and upcoming-holiday listings
    - Optional category filtering
    - Single-rule checks that bypass the cache

    Usage:
        service = HolidayQueryService()            # bundled catalog

        service.holidays_on(date(2024, 11, 28))    # [Thanksgiving rule]
        service.display_holidays_on(date(2024, 11, 28))
        service.upcoming_holidays(date.today(), limit=5)

        # Custom catalog, only bank holidays shown
        prefs = CategoryPreferences(enabled={HolidayCategory.BANK_HOLIDAY})
        service = HolidayQueryService(catalog=my_catalog, preferences=prefs)
    """

    catalog: Optional[HolidayCatalog] = None

    # None means no category filtering
    preferences: Optional[CategoryPreferences] = None

    cache: Optional[YearResolutionCache] = None

    def __post_init__(self) -> None:
        if self.cache is not None:
            if self.catalog is None:
                self.catalog = self.cache.catalog
            elif self.cache.catalog is not self.catalog:
                raise ValueError("cache was built for a different catalog")
        if self.catalog is None:
            self.catalog = load_default_catalog()
        if self.cache is None:
            self.cache = YearResolutionCache(self.catalog)

    # -------------------------------------------------------------------------
    # Day Queries
    # -------------------------------------------------------------------------

    def holidays_on(self, d: date) -> list[HolidayRule]:
        """
        Holidays falling on a date, in deterministic order.

        Resolves the date's year on first use; afterwards a dict lookup.
        """
        rules = self.cache.rules_on(d)
        if self.preferences is None:
            return list(rules)
        return [r for r in rules if self.preferences.is_enabled(r.category)]

    def display_holidays_on(self, d: date) -> list[dict[str, Any]]:
        """Presentation payload: name, emoji, description, category."""
        return [rule.to_display() for rule in self.holidays_on(d)]

    def has_holidays_on(self, d: date) -> bool:
        return bool(self.holidays_on(d))

    def occurs_on(self, rule: HolidayRule, d: date) -> bool:
        """
        Check a single rule against a date, without the cache.

        Never filtered by category preferences.
        """
        return _occurs_on(rule, d, self.catalog)

    def date_of(self, name: str, year: int) -> Optional[date]:
        """Resolved date of a named catalog rule in a year (None if none)."""
        return self.cache.index_for(year).date_of(name)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def holidays_for_year(self, year: int) -> list[ResolvedOccurrence]:
        """Every occurrence in a year, sorted by date then catalog order."""
        return self._filter(self.cache.index_for(year).occurrences)

    def holidays_in_month(self, year: int, month: int) -> list[ResolvedOccurrence]:
        """Occurrences within one month."""
        if not 1 <= month <= 12:
            raise ValueError(f"month must be in 1..12, got {month}")
        return [o for o in self.holidays_for_year(year) if o.date.month == month]

    def holidays_by_category(self, year: int) -> dict[HolidayCategory, list[ResolvedOccurrence]]:
        """Occurrences in a year grouped by category."""
        grouped: dict[HolidayCategory, list[ResolvedOccurrence]] = {}
        for occurrence in self.holidays_for_year(year):
            grouped.setdefault(occurrence.rule.category, []).append(occurrence)
        return grouped

    def holidays_between(self, start: date, end: date) -> list[ResolvedOccurrence]:
        """Occurrences in an inclusive date range (may span years)."""
        if end < start:
            return []
        results: list[ResolvedOccurrence] = []
        for year in range(start.year, end.year + 1):
            results.extend(
                o for o in self.holidays_for_year(year) if start <= o.date <= end
            )
        return results

    def upcoming_holidays(self, start: date, limit: int = 10) -> list[ResolvedOccurrence]:
        """
        The next ``limit`` occurrences on or after a date.

        Looks at the start year and the following year.
        """
        if limit <= 0:
            return []
        candidates = [
            o for o in self.holidays_for_year(start.year) if o.date >= start
        ]
        if len(candidates) < limit and start.year < 9999:
            candidates.extend(self.holidays_for_year(start.year + 1))
        return candidates[:limit]

    # -------------------------------------------------------------------------
    # Cache Management
    # -------------------------------------------------------------------------

    def skipped_rules(self, year: int) -> list[SkippedRule]:
        """Malformed rules omitted when resolving a year."""
        return list(self.cache.skipped(year))

    def warm(self, *years: int) -> None:
        """Prefetch years (e.g. the ones adjacent to the visible month)."""
        self.cache.warm(*years)

    def invalidate(self) -> None:
        """Drop all cached years."""
        self.cache.invalidate()

    def _filter(self, occurrences: Iterable[ResolvedOccurrence]) -> list[ResolvedOccurrence]:
        if self.preferences is None:
            return list(occurrences)
        return [o for o in occurrences if self.preferences.is_enabled(o.rule.category)]
