"""
holidaycal Engine

Core services for holiday date resolution.

Services:
- resolve / occurs_on: Resolve a single rule for a year
- HolidayCatalog: Ordered, name-indexed set of rules
- YearResolutionCache: Per-year memoized resolution passes
- HolidayQueryService: Day, month, year and upcoming-holiday queries

Usage:
    from holidaycal.engine import (
        HolidayCatalog,
        HolidayQueryService,
        YearResolutionCache,
        resolve,
    )
"""
from __future__ import annotations

from .catalog import (
    HolidayCatalog,
    load_default_catalog,
)
from .query_service import (
    DEFAULT_ENABLED_CATEGORIES,
    CategoryPreferences,
    HolidayQueryService,
)
from .resolver import (
    occurs_on,
    resolve,
    resolve_many,
)
from .year_cache import (
    CacheStats,
    Resolver,
    YearResolutionCache,
)

__all__ = [
    # Resolution
    "resolve",
    "occurs_on",
    "resolve_many",
    # Catalog
    "HolidayCatalog",
    "load_default_catalog",
    # Cache
    "YearResolutionCache",
    "CacheStats",
    "Resolver",
    # Queries
    "HolidayQueryService",
    "CategoryPreferences",
    "DEFAULT_ENABLED_CATEGORIES",
]
