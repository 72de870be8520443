"""
Calendar Arithmetic

Pure Gregorian calendar functions used to turn holiday rules into dates.

Weekdays use Python's numbering (0=Monday, 6=Sunday), matching
``date.weekday()``.

None of these functions raise for a date that does not exist or a
request that is ill-formed; they return ``None`` instead (a 5th Monday
in a four-Monday month, Feb 29 in a common year, month 13, weekday 9,
a year outside 1..9999, Easter outside the algorithm's range).
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..exceptions import OutOfAlgorithmRangeError

# Meeus/Jones/Butcher is exact for the Gregorian calendar in this range
EASTER_MIN_YEAR = 1583
EASTER_MAX_YEAR = 4099

# Range supported by datetime.date
MIN_YEAR = 1
MAX_YEAR = 9999

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _valid_month(year: int, month: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12


def _valid_weekday(weekday: int) -> bool:
    return isinstance(weekday, int) and 0 <= weekday <= 6


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4, not by 100 unless also by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def safe_date(year: int, month: int, day: int) -> Optional[date]:
    """
    Build a date, returning None if it does not exist.

    Used for Feb 29 in common years and for years outside the
    range supported by ``datetime.date``.
    """
    if not _valid_month(year, month) or day < 1:
        return None
    if day > days_in_month(year, month):
        return None
    return date(year, month, day)


def last_day_of_month(year: int, month: int) -> Optional[date]:
    """Get the last calendar day of a month (None for an invalid month)."""
    if not _valid_month(year, month):
        return None
    return date(year, month, days_in_month(year, month))


def add_days(d: date, n: int) -> Optional[date]:
    """
    Add a signed number of days to a date.

    Crosses month and year boundaries (including Feb 29) correctly.
    Returns None when the result would fall outside years 1..9999.
    """
    try:
        return d + timedelta(days=n)
    except OverflowError:
        return None


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> Optional[date]:
    """
    Get the nth occurrence of a weekday in a month.

    Args:
        year: Year
        month: Month (1-12)
        weekday: Day of week (0=Monday, 6=Sunday)
        n: Which occurrence (1=first, 2=second, etc.)

    Returns:
        The date of the nth weekday, or None if the month has fewer
        than n such weekdays or the request is invalid
    """
    if n < 1 or not _valid_month(year, month) or not _valid_weekday(weekday):
        return None

    first_day = date(year, month, 1)

    # Find the first occurrence, then add whole weeks
    days_until_weekday = (weekday - first_day.weekday()) % 7
    result = add_days(first_day, days_until_weekday + 7 * (n - 1))
    if result is None or result.month != month:
        return None
    return result


def last_weekday_of_month(year: int, month: int, weekday: int) -> Optional[date]:
    """
    Get the last occurrence of a weekday in a month.

    Always within the final seven days of the month.

    Args:
        year: Year
        month: Month (1-12)
        weekday: Day of week (0=Monday, 6=Sunday)

    Returns:
        The date of the last weekday, or None if the request is invalid
    """
    last_day = last_day_of_month(year, month)
    if last_day is None or not _valid_weekday(weekday):
        return None
    days_since_weekday = (last_day.weekday() - weekday) % 7
    return last_day - timedelta(days=days_since_weekday)


def weekday_on_or_after(d: date, weekday: int) -> Optional[date]:
    """First date on or after ``d`` that falls on ``weekday``."""
    if not _valid_weekday(weekday):
        return None
    return add_days(d, (weekday - d.weekday()) % 7)


def weekday_on_or_before(d: date, weekday: int) -> Optional[date]:
    """Last date on or before ``d`` that falls on ``weekday``."""
    if not _valid_weekday(weekday):
        return None
    return add_days(d, -((d.weekday() - weekday) % 7))


def easter_sunday(year: int, strict: bool = False) -> Optional[date]:
    """
    Calculate Western Easter Sunday using the Meeus/Jones/Butcher algorithm.

    Integer (floor) division throughout; float division corrupts
    results for specific years.

    Args:
        year: Gregorian year
        strict: Raise instead of returning None outside 1583-4099

    Returns:
        Easter Sunday, or None if the year is outside the algorithm's range

    Raises:
        OutOfAlgorithmRangeError: If strict and the year is out of range
    """
    if not EASTER_MIN_YEAR <= year <= EASTER_MAX_YEAR:
        if strict:
            raise OutOfAlgorithmRangeError(
                message=f"Easter algorithm is valid for {EASTER_MIN_YEAR}-{EASTER_MAX_YEAR}",
                details={"year": year},
            )
        return None

    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)
