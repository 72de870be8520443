"""
holidaycal Catalog Pack Schemas

Pydantic models for validating catalog pack YAML/JSON files.

A catalog pack is a declarative list of holiday definitions. These schemas
map to the domain models in holidaycal.models.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

HolidayCategoryValue = Literal[
    "bank_holiday", "unique_holiday", "awareness_day", "season",
    "christian_holiday", "jewish_holiday", "other_holiday",
]

WeekdayValue = Literal[
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]

MoonPhaseValue = Literal["new_moon", "full_moon"]

Month = Annotated[int, Field(ge=1, le=12)]
Day = Annotated[int, Field(ge=1, le=31)]


class _RuleBase(BaseModel):
    model_config = {"extra": "forbid"}


def _check_day_in_month(month: int, day: int) -> None:
    # Leap year so that Feb 29 passes; absence in common years is not an error
    try:
        date(2000, month, day)
    except ValueError:
        raise ValueError(f"day {day} does not exist in month {month}")


# =============================================================================
# Rule Schemas (discriminated on `type`)
# =============================================================================

class FixedRuleSchema(_RuleBase):
    """Same month/day every year."""
    type: Literal["fixed"]
    month: Month
    day: Day

    @model_validator(mode="after")
    def validate_day(self) -> "FixedRuleSchema":
        _check_day_in_month(self.month, self.day)
        return self


class NthWeekdayRuleSchema(_RuleBase):
    """The nth weekday of a month."""
    type: Literal["nth_weekday"]
    month: Month
    weekday: WeekdayValue
    n: int = Field(..., ge=1, le=5, description="Occurrence (1 = first)")


class LastWeekdayRuleSchema(_RuleBase):
    """The last weekday of a month."""
    type: Literal["last_weekday"]
    month: Month
    weekday: WeekdayValue


class WeekdayRelativeRuleSchema(_RuleBase):
    """First weekday on/after (or on/before) an anchor date."""
    type: Literal["weekday_relative"]
    month: Month
    day: Day
    weekday: WeekdayValue
    direction: Literal["on_or_after", "on_or_before"] = "on_or_after"

    @model_validator(mode="after")
    def validate_anchor(self) -> "WeekdayRelativeRuleSchema":
        _check_day_in_month(self.month, self.day)
        if (self.month, self.day) == (2, 29):
            raise ValueError("anchor date cannot be February 29")
        return self


class EasterOffsetRuleSchema(_RuleBase):
    """Signed days from Easter Sunday."""
    type: Literal["easter_offset"]
    days: int = 0


class DependentOffsetRuleSchema(_RuleBase):
    """Signed days from another rule in the catalog."""
    type: Literal["dependent_offset"]
    base: str = Field(..., min_length=1, description="Name of the base rule")
    days: int = 0


class PeriodicYearsRuleSchema(_RuleBase):
    """A date recurring every N years."""
    type: Literal["periodic_years"]
    every_n_years: int = Field(..., ge=1)
    anchor_year: int
    month: Month
    day: Day
    sunday_rolls_to_monday: bool = False

    @model_validator(mode="after")
    def validate_day(self) -> "PeriodicYearsRuleSchema":
        _check_day_in_month(self.month, self.day)
        if self.sunday_rolls_to_monday and (self.month, self.day) == (12, 31):
            raise ValueError("Sunday roll on December 31 would leave the year")
        return self


class LunarApproximateRuleSchema(_RuleBase):
    """Approximate new or full moon in a month."""
    type: Literal["lunar_approximate"]
    phase: MoonPhaseValue
    month: Month


class ExplicitYearTableRuleSchema(_RuleBase):
    """Almanac dates keyed by year."""
    type: Literal["explicit_year_table"]
    dates: dict[int, date] = Field(..., min_length=1)

    @field_validator("dates")
    @classmethod
    def validate_years(cls, v: dict[int, date]) -> dict[int, date]:
        """Each date must fall in the year it is listed under."""
        for year, d in v.items():
            if d.year != year:
                raise ValueError(f"date {d.isoformat()} is listed under year {year}")
        return v


RuleSchema = Annotated[
    Union[
        FixedRuleSchema,
        NthWeekdayRuleSchema,
        LastWeekdayRuleSchema,
        WeekdayRelativeRuleSchema,
        EasterOffsetRuleSchema,
        DependentOffsetRuleSchema,
        PeriodicYearsRuleSchema,
        LunarApproximateRuleSchema,
        ExplicitYearTableRuleSchema,
    ],
    Field(discriminator="type"),
]


# =============================================================================
# Holiday Schema
# =============================================================================

class HolidayRuleSchema(BaseModel):
    """Schema for one holiday definition."""
    name: str = Field(..., min_length=1, description="Unique display name")
    category: HolidayCategoryValue = Field(..., description="Descriptive grouping")
    rule: RuleSchema = Field(..., description="How the date is resolved")

    # Presentation metadata
    emoji: str = ""
    description: str = ""
    image_search_term: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

    model_config = {
        "extra": "forbid",
    }


# =============================================================================
# Top-Level Pack Schema
# =============================================================================

class CatalogPackSchema(BaseModel):
    """
    Top-level schema for a catalog pack YAML/JSON file.

    Holiday order in the file is the catalog order, which breaks ties
    between holidays that fall on the same date.
    """
    # Metadata
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    id: str = Field(..., description="Unique identifier (e.g., 'us-observances')")
    name: str = Field(..., description="Human-readable name")
    version: str = Field(..., description="Version string (e.g., '2025.1')")
    description: Optional[str] = None

    holidays: list[HolidayRuleSchema] = Field(
        default_factory=list,
        description="Holiday definitions, in catalog order",
    )

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_catalog_pack(data: dict[str, Any]) -> CatalogPackSchema:
    """
    Validate a catalog pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return CatalogPackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """
    Check if a catalog pack's schema version is compatible.

    Only the major version has to match.
    """
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    pack_major = pack_version.split(".")[0]
    current_major = SCHEMA_VERSION.split(".")[0]
    return pack_major == current_major
