"""
holidaycal - Holiday Date Resolution Engine

Answers "which holidays fall on this date?" for calendar views.

Every holiday is a declarative rule (fixed date, nth weekday, Easter
offset, offset from another holiday, lunar approximation, almanac table,
...) that resolves to at most one date per year. A catalog of rules is
resolved once per year and cached, so per-day lookups are dict reads.

Quick Start:
    from datetime import date
    from holidaycal import HolidayQueryService

    service = HolidayQueryService()          # bundled catalog
    service.holidays_on(date(2024, 11, 29))  # [Black Friday, ...]
    service.upcoming_holidays(date.today(), limit=5)

Custom catalogs:
    from holidaycal import HolidayCatalog, HolidayRule, HolidayCategory
    from holidaycal.models import nth_weekday, days_after, Weekday

    catalog = HolidayCatalog.from_rules([
        HolidayRule("Thanksgiving", HolidayCategory.BANK_HOLIDAY,
                    nth_weekday(11, Weekday.THURSDAY, 4)),
        HolidayRule("Black Friday", HolidayCategory.UNIQUE_HOLIDAY,
                    days_after("Thanksgiving", 1)),
    ])
    service = HolidayQueryService(catalog=catalog)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    HolidayCategory,
    HolidayRule,
    MoonPhase,
    ResolvedOccurrence,
    SkippedRule,
    Weekday,
    YearIndex,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    CategoryPreferences,
    HolidayCatalog,
    HolidayQueryService,
    YearResolutionCache,
    load_default_catalog,
    occurs_on,
    resolve,
)

# =============================================================================
# Packs
# =============================================================================
from .packs import (
    CatalogPackLoader,
    load_catalog_pack,
)

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    CatalogLoadError,
    CatalogValidationError,
    CatalogVersionMismatch,
    DependencyCycleError,
    DuplicateRuleError,
    HolidayCalError,
    MalformedRuleError,
    OutOfAlgorithmRangeError,
    RuleNotFoundError,
)

__all__ = [
    "__version__",
    # Models
    "HolidayCategory",
    "HolidayRule",
    "MoonPhase",
    "ResolvedOccurrence",
    "SkippedRule",
    "Weekday",
    "YearIndex",
    # Engine
    "CategoryPreferences",
    "HolidayCatalog",
    "HolidayQueryService",
    "YearResolutionCache",
    "load_default_catalog",
    "occurs_on",
    "resolve",
    # Packs
    "CatalogPackLoader",
    "load_catalog_pack",
    # Exceptions
    "HolidayCalError",
    "MalformedRuleError",
    "RuleNotFoundError",
    "DependencyCycleError",
    "OutOfAlgorithmRangeError",
    "DuplicateRuleError",
    "CatalogLoadError",
    "CatalogValidationError",
    "CatalogVersionMismatch",
]
