"""
Approximate Lunar Phases

Mean-moon approximation of new and full moons, projected from a single
reference new moon by whole multiples of the mean synodic month.

This is NOT an ephemeris. The true moon runs up to ~14 hours ahead of
or behind the mean moon, and dates are taken in UTC, so results are
expected to be within one day of published almanac dates. Holidays
that need exact lunar dates use explicit year tables instead.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

# New moon of 2024-01-11, 11:57 UTC
REFERENCE_NEW_MOON = datetime(2024, 1, 11, 11, 57, tzinfo=timezone.utc)

# Mean synodic month in days
SYNODIC_MONTH_DAYS = 29.530588853

HALF_SYNODIC_MONTH_DAYS = SYNODIC_MONTH_DAYS / 2


def _first_phase_on_or_after(start: datetime, offset_days: float) -> datetime:
    """First mean phase instant (reference + offset + k cycles) at or after start."""
    epoch = REFERENCE_NEW_MOON + timedelta(days=offset_days)
    elapsed = (start - epoch).total_seconds() / 86400.0
    cycles = math.ceil(elapsed / SYNODIC_MONTH_DAYS)
    return epoch + timedelta(days=cycles * SYNODIC_MONTH_DAYS)


def _phase_in_month(year: int, month: int, offset_days: float) -> Optional[date]:
    month_start = datetime(year, month, 1, tzinfo=timezone.utc)
    try:
        instant = _first_phase_on_or_after(month_start, offset_days)
    except OverflowError:
        # Past the end of December 9999
        return None
    result = instant.date()
    # A 28/29-day February can fall between two phases
    if result.year != year or result.month != month:
        return None
    return result


def new_moon_in_month(year: int, month: int) -> Optional[date]:
    """Approximate date of the first new moon in a month, or None if there is none."""
    return _phase_in_month(year, month, 0.0)


def full_moon_in_month(year: int, month: int) -> Optional[date]:
    """Approximate date of the first full moon in a month, or None if there is none."""
    return _phase_in_month(year, month, HALF_SYNODIC_MONTH_DAYS)


def moon_age_days(d: date) -> float:
    """
    Approximate age of the moon (days since new moon) at noon UTC on a date.

    Returns a value in [0, SYNODIC_MONTH_DAYS).
    """
    noon = datetime(d.year, d.month, d.day, 12, tzinfo=timezone.utc)
    elapsed = (noon - REFERENCE_NEW_MOON).total_seconds() / 86400.0
    return elapsed % SYNODIC_MONTH_DAYS
