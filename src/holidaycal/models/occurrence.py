"""
holidaycal Resolved Occurrences

Derived, cached results of resolving a catalog for one year.

Key components:
- ResolvedOccurrence: one (date, rule) pair
- SkippedRule: a malformed rule omitted from a resolution pass
- YearIndex: every occurrence in a year, indexed by date
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .rule import HolidayRule


@dataclass(frozen=True)
class ResolvedOccurrence:
    """A holiday rule resolved to a concrete date."""
    date: date
    rule: HolidayRule

    @property
    def name(self) -> str:
        return self.rule.name


@dataclass(frozen=True)
class SkippedRule:
    """
    Diagnostic record for a rule that could not be resolved.

    Attributes:
        name: Rule name
        year: Year being resolved
        code: Error code (HC_*)
        reason: Human-readable reason
    """
    name: str
    year: int
    code: str
    reason: str


@dataclass(frozen=True)
class YearIndex:
    """
    All holiday occurrences for one calendar year.

    Built once per year by the resolution cache and never mutated.
    Rules sharing a date keep catalog order, then name order.

    Attributes:
        year: Calendar year
        by_date: Rules on each date that has at least one holiday
        occurrences: All occurrences sorted by date, then catalog order
        skipped: Rules omitted because they were malformed
        catalog_fingerprint: Content hash of the catalog that was resolved
    """
    year: int
    by_date: dict[date, tuple[HolidayRule, ...]] = field(default_factory=dict)
    occurrences: tuple[ResolvedOccurrence, ...] = ()
    skipped: tuple[SkippedRule, ...] = ()
    catalog_fingerprint: Optional[str] = None

    def rules_on(self, d: date) -> tuple[HolidayRule, ...]:
        """Rules on a date (empty tuple if none)."""
        return self.by_date.get(d, ())

    def date_of(self, name: str) -> Optional[date]:
        """Resolved date of a named rule, or None."""
        for occurrence in self.occurrences:
            if occurrence.rule.name == name:
                return occurrence.date
        return None

    @property
    def skipped_names(self) -> list[str]:
        return [s.name for s in self.skipped]

    def __len__(self) -> int:
        return len(self.occurrences)
