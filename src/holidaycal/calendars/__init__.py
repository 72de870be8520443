"""
holidaycal Calendars

Stateless calendrical algorithms used by the resolution engine.

Provides:
- Gregorian arithmetic (leap years, nth/last weekday, day offsets)
- Easter Sunday (Meeus/Jones/Butcher, 1583-4099)
- Approximate lunar phases (mean synodic month)

Usage:
    from holidaycal.calendars import easter_sunday, nth_weekday_of_month

    easter_sunday(2025)                      # date(2025, 4, 20)
    nth_weekday_of_month(2024, 11, 3, 4)     # Thanksgiving: date(2024, 11, 28)
    nth_weekday_of_month(2025, 2, 0, 5)      # None: no 5th Monday
"""
from __future__ import annotations

from .arithmetic import (
    EASTER_MAX_YEAR,
    EASTER_MIN_YEAR,
    add_days,
    days_in_month,
    easter_sunday,
    is_leap_year,
    last_day_of_month,
    last_weekday_of_month,
    nth_weekday_of_month,
    safe_date,
    weekday_on_or_after,
    weekday_on_or_before,
)
from .lunar import (
    HALF_SYNODIC_MONTH_DAYS,
    REFERENCE_NEW_MOON,
    SYNODIC_MONTH_DAYS,
    full_moon_in_month,
    moon_age_days,
    new_moon_in_month,
)

__all__ = [
    # Gregorian arithmetic
    "is_leap_year",
    "days_in_month",
    "safe_date",
    "last_day_of_month",
    "add_days",
    "nth_weekday_of_month",
    "last_weekday_of_month",
    "weekday_on_or_after",
    "weekday_on_or_before",
    # Easter
    "easter_sunday",
    "EASTER_MIN_YEAR",
    "EASTER_MAX_YEAR",
    # Lunar approximation
    "REFERENCE_NEW_MOON",
    "SYNODIC_MONTH_DAYS",
    "HALF_SYNODIC_MONTH_DAYS",
    "new_moon_in_month",
    "full_moon_in_month",
    "moon_age_days",
]
