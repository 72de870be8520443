"""
holidaycal Models

Domain models for holiday definitions and resolved occurrences.

    from holidaycal.models import (
        # Enums
        HolidayCategory, Weekday, MoonPhase,
        # Rules
        HolidayRule, nth_weekday, days_after, easter_offset,
        # Results
        ResolvedOccurrence, YearIndex,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    HolidayCategory,
    MoonPhase,
    ResolutionState,
    StrategyKind,
    Weekday,
)

# =============================================================================
# Strategies (+ builder helpers)
# =============================================================================
from .strategies import (
    STRATEGY_TYPES,
    DependentOffset,
    EasterOffset,
    ExplicitYearTable,
    Fixed,
    LastWeekday,
    LunarApproximate,
    NthWeekday,
    PeriodicYears,
    ResolutionStrategy,
    WeekdayRelative,
    days_after,
    easter_offset,
    every_n_years,
    fixed,
    full_moon,
    last_weekday,
    new_moon,
    nth_weekday,
    weekday_after,
    weekday_before,
    year_table,
)

# =============================================================================
# Rule
# =============================================================================
from .rule import HolidayRule

# =============================================================================
# Resolved Occurrences
# =============================================================================
from .occurrence import (
    ResolvedOccurrence,
    SkippedRule,
    YearIndex,
)

__all__ = [
    # Enums
    "HolidayCategory",
    "MoonPhase",
    "ResolutionState",
    "StrategyKind",
    "Weekday",
    # Strategies
    "ResolutionStrategy",
    "STRATEGY_TYPES",
    "Fixed",
    "NthWeekday",
    "LastWeekday",
    "WeekdayRelative",
    "EasterOffset",
    "DependentOffset",
    "PeriodicYears",
    "LunarApproximate",
    "ExplicitYearTable",
    # Builders
    "fixed",
    "nth_weekday",
    "last_weekday",
    "weekday_after",
    "weekday_before",
    "easter_offset",
    "days_after",
    "every_n_years",
    "full_moon",
    "new_moon",
    "year_table",
    # Rule
    "HolidayRule",
    # Results
    "ResolvedOccurrence",
    "SkippedRule",
    "YearIndex",
]
