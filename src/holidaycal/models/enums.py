"""
holidaycal Enumerations

Enumeration types used by holiday rules and the resolution engine.

String enums inherit from (str, Enum) for YAML/JSON compatibility.
"""
from __future__ import annotations

from enum import Enum, IntEnum


# =============================================================================
# Holiday Category
# =============================================================================

class HolidayCategory(str, Enum):
    """
    Descriptive grouping of holidays.

    Purely informational: category never affects date resolution.
    """
    BANK_HOLIDAY = "bank_holiday"
    UNIQUE_HOLIDAY = "unique_holiday"
    AWARENESS_DAY = "awareness_day"
    SEASON = "season"
    CHRISTIAN_HOLIDAY = "christian_holiday"
    JEWISH_HOLIDAY = "jewish_holiday"
    OTHER_HOLIDAY = "other_holiday"

    @property
    def label(self) -> str:
        """Human-readable category name."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    HolidayCategory.BANK_HOLIDAY: "Bank Holidays",
    HolidayCategory.UNIQUE_HOLIDAY: "Unique Holidays",
    HolidayCategory.AWARENESS_DAY: "Awareness Days",
    HolidayCategory.SEASON: "Seasons",
    HolidayCategory.CHRISTIAN_HOLIDAY: "Christian Holidays",
    HolidayCategory.JEWISH_HOLIDAY: "Jewish Holidays",
    HolidayCategory.OTHER_HOLIDAY: "Other Holidays",
}


# =============================================================================
# Weekday
# =============================================================================

class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse a weekday name ("monday", "Mon", "MONDAY")."""
        key = name.strip().upper()
        for member in cls:
            if member.name == key or member.name[:3] == key:
                return member
        raise ValueError(f"Unknown weekday: {name!r}")


# =============================================================================
# Moon Phase
# =============================================================================

class MoonPhase(str, Enum):
    """Lunar phases supported by the lunar approximation."""
    NEW_MOON = "new_moon"
    FULL_MOON = "full_moon"


# =============================================================================
# Strategy Kind
# =============================================================================

class StrategyKind(str, Enum):
    """Discriminator for resolution strategies (matches pack ``type``)."""
    FIXED = "fixed"
    NTH_WEEKDAY = "nth_weekday"
    LAST_WEEKDAY = "last_weekday"
    WEEKDAY_RELATIVE = "weekday_relative"
    EASTER_OFFSET = "easter_offset"
    DEPENDENT_OFFSET = "dependent_offset"
    PERIODIC_YEARS = "periodic_years"
    LUNAR_APPROXIMATE = "lunar_approximate"
    EXPLICIT_YEAR_TABLE = "explicit_year_table"


# =============================================================================
# Resolution State
# =============================================================================

class ResolutionState(str, Enum):
    """Lifecycle of one year in the resolution cache."""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
