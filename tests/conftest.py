"""
Pytest configuration and fixtures for holidaycal tests.

Provides helper factories and common fixtures for rules and catalogs.
"""
import threading

import pytest

from holidaycal.engine import HolidayCatalog, resolve
from holidaycal.models import (
    HolidayCategory,
    HolidayRule,
    ResolutionStrategy,
    Weekday,
    days_after,
    every_n_years,
    fixed,
    nth_weekday,
)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_rule(
    name: str,
    strategy: ResolutionStrategy = None,
    category: HolidayCategory = HolidayCategory.UNIQUE_HOLIDAY,
    emoji: str = "",
    description: str = "",
) -> HolidayRule:
    """Create a HolidayRule, defaulting to a fixed Jan 1 date."""
    return HolidayRule(
        name=name,
        category=category,
        strategy=strategy if strategy is not None else fixed(1, 1),
        emoji=emoji,
        description=description or f"{name} description",
    )


def make_catalog(*rules: HolidayRule, name: str = "test") -> HolidayCatalog:
    """Create a catalog from rules, in order."""
    return HolidayCatalog.from_rules(rules, name=name)


def make_thanksgiving() -> HolidayRule:
    return make_rule(
        "Thanksgiving",
        nth_weekday(11, Weekday.THURSDAY, 4),
        category=HolidayCategory.BANK_HOLIDAY,
        emoji="🦃",
    )


def make_black_friday() -> HolidayRule:
    return make_rule("Black Friday", days_after("Thanksgiving", 1), emoji="🛍️")


def make_leap_day() -> HolidayRule:
    return make_rule("Leap Day", every_n_years(4, 2024, 2, 29), emoji="🐸")


class CountingResolver:
    """Wraps the real resolver and counts calls (thread-safe)."""

    def __init__(self, delay: float = 0.0):
        self.calls = 0
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, rule, year, catalog=None):
        with self._lock:
            self.calls += 1
        if self.delay:
            threading.Event().wait(self.delay)
        return resolve(rule, year, catalog)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def thanksgiving() -> HolidayRule:
    return make_thanksgiving()


@pytest.fixture
def black_friday() -> HolidayRule:
    return make_black_friday()


@pytest.fixture
def leap_day() -> HolidayRule:
    return make_leap_day()


@pytest.fixture
def shopping_catalog(thanksgiving, black_friday, leap_day) -> HolidayCatalog:
    """Thanksgiving, Black Friday (dependent) and Leap Day (periodic)."""
    return make_catalog(thanksgiving, black_friday, leap_day, name="shopping")


@pytest.fixture
def counting_resolver() -> CountingResolver:
    return CountingResolver()
