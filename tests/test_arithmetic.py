"""
Tests for Gregorian calendar arithmetic.

Tests cover:
- Leap years and month lengths
- Safe date construction
- Nth / last weekday of month
- Weekday on-or-after / on-or-before
- Easter (checked against python-dateutil over the whole valid range)
"""
from __future__ import annotations

from datetime import date

import pytest
from dateutil.easter import EASTER_WESTERN, easter

from holidaycal.calendars import (
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
from holidaycal.exceptions import OutOfAlgorithmRangeError
from holidaycal.models import Weekday


class TestLeapYears:
    """Tests for leap year and month length rules."""

    @pytest.mark.parametrize("year,expected", [
        (2024, True),
        (2023, False),
        (2000, True),
        (1900, False),
        (2100, False),
        (2400, True),
    ])
    def test_is_leap_year(self, year: int, expected: bool) -> None:
        assert is_leap_year(year) is expected

    def test_february_length(self) -> None:
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2025, 2) == 28

    def test_days_in_month_rejects_bad_month(self) -> None:
        with pytest.raises(ValueError):
            days_in_month(2024, 13)

    def test_last_day_of_month(self) -> None:
        assert last_day_of_month(2024, 4) == date(2024, 4, 30)
        assert last_day_of_month(2024, 12) == date(2024, 12, 31)
        assert last_day_of_month(2024, 13) is None


class TestSafeDate:
    """Tests for safe_date (None instead of ValueError)."""

    def test_valid_date(self) -> None:
        assert safe_date(2024, 2, 29) == date(2024, 2, 29)

    def test_feb_29_in_common_year_is_none(self) -> None:
        assert safe_date(2025, 2, 29) is None

    def test_out_of_range_year_is_none(self) -> None:
        assert safe_date(0, 1, 1) is None
        assert safe_date(10000, 1, 1) is None

    def test_bad_month_or_day_is_none(self) -> None:
        assert safe_date(2024, 13, 1) is None
        assert safe_date(2024, 4, 31) is None
        assert safe_date(2024, 4, 0) is None


class TestAddDays:
    """Tests for signed day offsets."""

    def test_crosses_leap_day(self) -> None:
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2025, 2, 28), 1) == date(2025, 3, 1)

    def test_crosses_year_boundary(self) -> None:
        assert add_days(date(2023, 12, 31), 1) == date(2024, 1, 1)
        assert add_days(date(2024, 1, 1), -1) == date(2023, 12, 31)

    def test_overflow_is_none(self) -> None:
        assert add_days(date(9999, 12, 31), 1) is None
        assert add_days(date(1, 1, 1), -1) is None


class TestNthWeekday:
    """Tests for nth and last weekday of a month."""

    def test_thanksgiving(self) -> None:
        assert nth_weekday_of_month(2024, 11, Weekday.THURSDAY, 4) == date(2024, 11, 28)
        assert nth_weekday_of_month(2025, 11, Weekday.THURSDAY, 4) == date(2025, 11, 27)

    def test_first_weekday_on_the_first(self) -> None:
        # 2024-09-02 is the first Monday; 2025-09-01 is a Monday itself
        assert nth_weekday_of_month(2024, 9, Weekday.MONDAY, 1) == date(2024, 9, 2)
        assert nth_weekday_of_month(2025, 9, Weekday.MONDAY, 1) == date(2025, 9, 1)

    def test_fifth_weekday_missing(self) -> None:
        assert nth_weekday_of_month(2025, 2, Weekday.MONDAY, 5) is None

    def test_fifth_weekday_present(self) -> None:
        assert nth_weekday_of_month(2024, 2, Weekday.THURSDAY, 5) == date(2024, 2, 29)

    def test_non_positive_n(self) -> None:
        assert nth_weekday_of_month(2024, 1, Weekday.MONDAY, 0) is None

    def test_last_weekday(self) -> None:
        assert last_weekday_of_month(2024, 5, Weekday.MONDAY) == date(2024, 5, 27)
        assert last_weekday_of_month(2025, 5, Weekday.MONDAY) == date(2025, 5, 26)
        assert last_weekday_of_month(2024, 12, Weekday.FRIDAY) == date(2024, 12, 27)

    def test_last_weekday_on_last_day(self) -> None:
        # 2024-03-31 is a Sunday
        assert last_weekday_of_month(2024, 3, Weekday.SUNDAY) == date(2024, 3, 31)

    @pytest.mark.parametrize("year", [2024, 2025])
    def test_last_weekday_in_final_week(self, year: int) -> None:
        for month in range(1, 13):
            last_day = last_day_of_month(year, month)
            for weekday in Weekday:
                result = last_weekday_of_month(year, month, weekday)
                assert result.weekday() == weekday
                assert 0 <= (last_day - result).days <= 6, (year, month, weekday)

    @pytest.mark.parametrize("year,month,weekday,n", [
        (2024, 13, 0, 1),
        (2024, 0, 0, 1),
        (0, 1, 0, 1),
        (10000, 1, 0, 1),
        (2024, 1, 9, 1),
        (2024, 1, -1, 1),
    ])
    def test_nth_weekday_invalid_request_is_none(
        self, year: int, month: int, weekday: int, n: int,
    ) -> None:
        assert nth_weekday_of_month(year, month, weekday, n) is None

    @pytest.mark.parametrize("year,month,weekday", [
        (2024, 0, 0),
        (2024, 13, 0),
        (10000, 1, 0),
        (0, 12, 0),
        (2024, 1, 7),
    ])
    def test_last_weekday_invalid_request_is_none(
        self, year: int, month: int, weekday: int,
    ) -> None:
        assert last_weekday_of_month(year, month, weekday) is None

    def test_fifth_weekday_at_end_of_range(self) -> None:
        # December 9999 has four Mondays; the fifth would be in year 10000
        assert nth_weekday_of_month(9999, 12, Weekday.MONDAY, 5) is None
        assert nth_weekday_of_month(9999, 12, Weekday.MONDAY, 4) == date(9999, 12, 27)


class TestWeekdayRelative:
    """Tests for weekday on-or-after / on-or-before."""

    def test_on_or_after(self) -> None:
        # 2024-11-02 is a Saturday
        assert weekday_on_or_after(date(2024, 11, 2), Weekday.TUESDAY) == date(2024, 11, 5)

    def test_on_or_after_same_day(self) -> None:
        # 2021-11-02 is a Tuesday
        assert weekday_on_or_after(date(2021, 11, 2), Weekday.TUESDAY) == date(2021, 11, 2)

    def test_on_or_before(self) -> None:
        # 2024-05-24 is a Friday
        assert weekday_on_or_before(date(2024, 5, 24), Weekday.MONDAY) == date(2024, 5, 20)

    def test_on_or_before_same_day(self) -> None:
        assert weekday_on_or_before(date(2024, 5, 20), Weekday.MONDAY) == date(2024, 5, 20)

    def test_invalid_weekday_is_none(self) -> None:
        assert weekday_on_or_after(date(2024, 11, 2), 9) is None
        assert weekday_on_or_before(date(2024, 5, 24), -1) is None

    def test_past_end_of_range_is_none(self) -> None:
        # 9999-12-31 is a Friday; the next Monday would be in year 10000
        assert weekday_on_or_after(date(9999, 12, 31), Weekday.MONDAY) is None
        # 0001-01-01 is a Monday; the Sunday before it does not exist
        assert weekday_on_or_before(date(1, 1, 1), Weekday.SUNDAY) is None


class TestEaster:
    """Tests for the Meeus/Jones/Butcher Easter computation."""

    @pytest.mark.parametrize("year,expected", [
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 5)),
        (2000, date(2000, 4, 23)),
        (2019, date(2019, 4, 21)),
        (1818, date(1818, 3, 22)),
        (2038, date(2038, 4, 25)),
    ])
    def test_known_dates(self, year: int, expected: date) -> None:
        assert easter_sunday(year) == expected

    def test_matches_dateutil_over_full_range(self) -> None:
        """Every year in the valid range agrees with an independent implementation."""
        mismatches = [
            year
            for year in range(EASTER_MIN_YEAR, EASTER_MAX_YEAR + 1)
            if easter_sunday(year) != easter(year, EASTER_WESTERN)
        ]
        assert mismatches == []

    def test_always_a_sunday_in_march_or_april(self) -> None:
        for year in range(1900, 2200):
            result = easter_sunday(year)
            assert result.weekday() == Weekday.SUNDAY
            assert date(year, 3, 22) <= result <= date(year, 4, 25)

    def test_out_of_range_is_none(self) -> None:
        assert easter_sunday(EASTER_MIN_YEAR - 1) is None
        assert easter_sunday(EASTER_MAX_YEAR + 1) is None

    def test_out_of_range_strict_raises(self) -> None:
        with pytest.raises(OutOfAlgorithmRangeError) as exc_info:
            easter_sunday(1500, strict=True)
        assert exc_info.value.code == "HC_OUT_OF_RANGE"
        assert exc_info.value.details["year"] == 1500
