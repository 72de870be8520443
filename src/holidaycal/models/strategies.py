"""
holidaycal Resolution Strategies

Each holiday rule carries exactly one resolution strategy: a small,
immutable value describing HOW its date is found in a given year.

Strategies:
- Fixed: same month/day every year
- NthWeekday: e.g. 3rd Monday of January
- LastWeekday: e.g. last Monday of May
- WeekdayRelative: first weekday on/after (or on/before) a fixed date
- EasterOffset: signed days from Easter Sunday
- DependentOffset: signed days from another named rule
- PeriodicYears: every N years from an anchor year
- LunarApproximate: mean new/full moon in a month
- ExplicitYearTable: almanac lookup by year

Strategies only describe; evaluation lives in ``holidaycal.engine.resolver``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Union

from ..exceptions import MalformedRuleError
from .enums import MoonPhase, StrategyKind, Weekday


def _check_month(month: int) -> None:
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise MalformedRuleError(
            message=f"Month must be in 1..12, got {month!r}",
            details={"month": month},
        )


def _check_month_day(month: int, day: int) -> None:
    _check_month(month)
    # 2000 is a leap year, so Feb 29 is accepted here
    try:
        date(2000, month, day)
    except (TypeError, ValueError):
        raise MalformedRuleError(
            message=f"Day {day!r} does not exist in month {month}",
            details={"month": month, "day": day},
        )


def _check_weekday(weekday: int) -> None:
    if not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise MalformedRuleError(
            message=f"Weekday must be in 0..6 (Monday=0), got {weekday!r}",
            details={"weekday": weekday},
        )


# =============================================================================
# Calendar-Based Strategies
# =============================================================================

@dataclass(frozen=True)
class Fixed:
    """Same calendar date every year (e.g. Independence Day, July 4)."""
    month: int
    day: int

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.FIXED

    def validate(self) -> None:
        _check_month_day(self.month, self.day)


@dataclass(frozen=True)
class NthWeekday:
    """The nth weekday of a month (e.g. Thanksgiving, 4th Thursday of November)."""
    month: int
    weekday: Weekday
    n: int

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.NTH_WEEKDAY

    def validate(self) -> None:
        _check_month(self.month)
        _check_weekday(self.weekday)
        if not isinstance(self.n, int) or not 1 <= self.n <= 5:
            raise MalformedRuleError(
                message=f"Occurrence must be in 1..5, got {self.n!r}",
                details={"n": self.n},
            )


@dataclass(frozen=True)
class LastWeekday:
    """The last weekday of a month (e.g. Memorial Day, last Monday of May)."""
    month: int
    weekday: Weekday

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.LAST_WEEKDAY

    def validate(self) -> None:
        _check_month(self.month)
        _check_weekday(self.weekday)


@dataclass(frozen=True)
class WeekdayRelative:
    """
    First weekday on or after (or on or before) a fixed anchor date.

    Examples:
        First Sunday of Advent: Sunday on/after November 27
        Election Day: Tuesday on/after November 2
        Victoria Day: Monday on/before May 24
    """
    month: int
    day: int
    weekday: Weekday
    after: bool = True

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.WEEKDAY_RELATIVE

    def validate(self) -> None:
        _check_month_day(self.month, self.day)
        _check_weekday(self.weekday)
        if self.month == 2 and self.day == 29:
            raise MalformedRuleError(
                message="Weekday-relative anchor cannot be February 29",
                details={"month": self.month, "day": self.day},
            )


# =============================================================================
# Relative Strategies
# =============================================================================

@dataclass(frozen=True)
class EasterOffset:
    """Signed day offset from Western Easter Sunday (0 = Easter itself)."""
    days: int = 0

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.EASTER_OFFSET

    def validate(self) -> None:
        if not isinstance(self.days, int):
            raise MalformedRuleError(
                message=f"Easter offset must be an integer, got {self.days!r}",
                details={"days": self.days},
            )


@dataclass(frozen=True)
class DependentOffset:
    """Signed day offset from another named rule (e.g. Black Friday = Thanksgiving + 1)."""
    base_name: str
    days: int = 0

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.DEPENDENT_OFFSET

    def validate(self) -> None:
        if not isinstance(self.base_name, str) or not self.base_name.strip():
            raise MalformedRuleError(
                message="Dependent offset requires a base rule name",
                details={"base_name": self.base_name},
            )
        if not isinstance(self.days, int):
            raise MalformedRuleError(
                message=f"Dependent offset must be an integer, got {self.days!r}",
                details={"days": self.days},
            )


@dataclass(frozen=True)
class PeriodicYears:
    """
    A fixed date that only occurs every N years.

    Occurs when ``(year - anchor_year) % every_n_years == 0``.
    With ``sunday_rolls_to_monday`` a Sunday date moves to the Monday
    after it (Inauguration Day).
    """
    every_n_years: int
    anchor_year: int
    month: int
    day: int
    sunday_rolls_to_monday: bool = False

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.PERIODIC_YEARS

    def validate(self) -> None:
        _check_month_day(self.month, self.day)
        if not isinstance(self.every_n_years, int) or self.every_n_years < 1:
            raise MalformedRuleError(
                message=f"Period must be a positive number of years, got {self.every_n_years!r}",
                details={"every_n_years": self.every_n_years},
            )
        if not isinstance(self.anchor_year, int):
            raise MalformedRuleError(
                message=f"Anchor year must be an integer, got {self.anchor_year!r}",
                details={"anchor_year": self.anchor_year},
            )
        if self.sunday_rolls_to_monday and self.month == 12 and self.day == 31:
            raise MalformedRuleError(
                message="Sunday roll on December 31 would leave the year",
                details={"month": self.month, "day": self.day},
            )


# =============================================================================
# Lunar and Tabulated Strategies
# =============================================================================

@dataclass(frozen=True)
class LunarApproximate:
    """
    Approximate new or full moon in a month.

    Mean-moon approximation; see ``holidaycal.calendars.lunar``.
    """
    phase: MoonPhase
    month_hint: int

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.LUNAR_APPROXIMATE

    def validate(self) -> None:
        if not isinstance(self.phase, MoonPhase):
            raise MalformedRuleError(
                message=f"Unknown moon phase: {self.phase!r}",
                details={"phase": str(self.phase)},
            )
        _check_month(self.month_hint)


@dataclass(frozen=True)
class ExplicitYearTable:
    """
    Almanac lookup: the holiday's date for each known year.

    Used for Hebrew, Islamic, Chinese and other lunisolar holidays that
    cannot be computed from the Gregorian calendar alone. Years missing
    from the table have no occurrence.

    Stored as sorted (year, date) pairs so the strategy stays hashable.
    """
    entries: tuple[tuple[int, date], ...]

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.EXPLICIT_YEAR_TABLE

    @property
    def years(self) -> tuple[int, ...]:
        return tuple(year for year, _ in self.entries)

    def lookup(self, year: int) -> Optional[date]:
        for entry_year, entry_date in self.entries:
            if entry_year == year:
                return entry_date
        return None

    def validate(self) -> None:
        if not self.entries:
            raise MalformedRuleError(message="Year table has no entries")
        seen: set[int] = set()
        for year, entry_date in self.entries:
            if year in seen:
                raise MalformedRuleError(
                    message=f"Year table lists {year} more than once",
                    details={"year": year},
                )
            seen.add(year)
            if not isinstance(entry_date, date) or entry_date.year != year:
                raise MalformedRuleError(
                    message=f"Year table entry for {year} is not a date in that year",
                    details={"year": year, "date": str(entry_date)},
                )


ResolutionStrategy = Union[
    Fixed,
    NthWeekday,
    LastWeekday,
    WeekdayRelative,
    EasterOffset,
    DependentOffset,
    PeriodicYears,
    LunarApproximate,
    ExplicitYearTable,
]

STRATEGY_TYPES = (
    Fixed,
    NthWeekday,
    LastWeekday,
    WeekdayRelative,
    EasterOffset,
    DependentOffset,
    PeriodicYears,
    LunarApproximate,
    ExplicitYearTable,
)


# =============================================================================
# Builder Helpers
# =============================================================================

def fixed(month: int, day: int) -> Fixed:
    """Same date every year."""
    return Fixed(month=month, day=day)


def nth_weekday(month: int, weekday: Weekday, n: int) -> NthWeekday:
    """
    The nth weekday of a month.

    Example:
        thanksgiving = nth_weekday(11, Weekday.THURSDAY, 4)
    """
    return NthWeekday(month=month, weekday=Weekday(weekday), n=n)


def last_weekday(month: int, weekday: Weekday) -> LastWeekday:
    """The last weekday of a month."""
    return LastWeekday(month=month, weekday=Weekday(weekday))


def weekday_after(month: int, day: int, weekday: Weekday) -> WeekdayRelative:
    """First weekday on or after a fixed date."""
    return WeekdayRelative(month=month, day=day, weekday=Weekday(weekday), after=True)


def weekday_before(month: int, day: int, weekday: Weekday) -> WeekdayRelative:
    """Last weekday on or before a fixed date."""
    return WeekdayRelative(month=month, day=day, weekday=Weekday(weekday), after=False)


def easter_offset(days: int = 0) -> EasterOffset:
    """
    Days from Easter Sunday.

    Example:
        good_friday = easter_offset(-2)
    """
    return EasterOffset(days=days)


def days_after(base_name: str, days: int) -> DependentOffset:
    """
    Days from another rule's date (negative for days before).

    Example:
        cyber_monday = days_after("Thanksgiving", 4)
    """
    return DependentOffset(base_name=base_name, days=days)


def every_n_years(
    n: int,
    anchor_year: int,
    month: int,
    day: int,
    sunday_rolls_to_monday: bool = False,
) -> PeriodicYears:
    """A date recurring every n years from anchor_year."""
    return PeriodicYears(
        every_n_years=n,
        anchor_year=anchor_year,
        month=month,
        day=day,
        sunday_rolls_to_monday=sunday_rolls_to_monday,
    )


def full_moon(month: int) -> LunarApproximate:
    """Approximate full moon in a month."""
    return LunarApproximate(phase=MoonPhase.FULL_MOON, month_hint=month)


def new_moon(month: int) -> LunarApproximate:
    """Approximate new moon in a month."""
    return LunarApproximate(phase=MoonPhase.NEW_MOON, month_hint=month)


def year_table(dates: Mapping[int, date]) -> ExplicitYearTable:
    """
    Explicit almanac dates keyed by year.

    Example:
        chinese_new_year = year_table({
            2024: date(2024, 2, 10),
            2025: date(2025, 1, 29),
        })
    """
    return ExplicitYearTable(entries=tuple(sorted(dates.items())))
