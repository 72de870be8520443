"""
holidaycal Rule Resolver

Turns a HolidayRule into a concrete date for a given year.

``resolve(rule, year, catalog)`` is a pure, deterministic function of its
inputs. It returns None when the rule has no occurrence that year (Leap Day
in a common year, a missing 5th weekday, Easter outside 1583-4099, a year
absent from an almanac table) and raises MalformedRuleError when the rule
itself is broken (unknown dependency, cycle, invalid configuration).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, Optional

from ..calendars import (
    add_days,
    easter_sunday,
    full_moon_in_month,
    last_weekday_of_month,
    new_moon_in_month,
    nth_weekday_of_month,
    safe_date,
    weekday_on_or_after,
    weekday_on_or_before,
)
from ..exceptions import DependencyCycleError, MalformedRuleError, RuleNotFoundError
from ..models import (
    DependentOffset,
    EasterOffset,
    ExplicitYearTable,
    Fixed,
    HolidayRule,
    LastWeekday,
    LunarApproximate,
    MoonPhase,
    NthWeekday,
    PeriodicYears,
    ResolvedOccurrence,
    Weekday,
    WeekdayRelative,
)

if TYPE_CHECKING:
    from .catalog import HolidayCatalog

logger = logging.getLogger(__name__)


def _shift(d: Optional[date], days: int) -> Optional[date]:
    """Offset a date; overflow past year 1/9999 is no occurrence."""
    if d is None:
        return None
    return add_days(d, days)


def _resolve_fixed(strategy: Fixed, year: int) -> Optional[date]:
    # Feb 29 in a common year is absent, not rolled to Mar 1
    return safe_date(year, strategy.month, strategy.day)


def _resolve_weekday_relative(strategy: WeekdayRelative, year: int) -> Optional[date]:
    anchor = safe_date(year, strategy.month, strategy.day)
    if anchor is None:
        return None
    if strategy.after:
        result = weekday_on_or_after(anchor, strategy.weekday)
    else:
        result = weekday_on_or_before(anchor, strategy.weekday)
    # An anchor near Jan 1 / Dec 31 can push the weekday into another year
    if result is None or result.year != year:
        return None
    return result


def _resolve_periodic(strategy: PeriodicYears, year: int) -> Optional[date]:
    if (year - strategy.anchor_year) % strategy.every_n_years != 0:
        return None
    result = safe_date(year, strategy.month, strategy.day)
    if result is None:
        return None
    if strategy.sunday_rolls_to_monday and result.weekday() == Weekday.SUNDAY:
        result = add_days(result, 1)
    return result


def _resolve_lunar(strategy: LunarApproximate, year: int) -> Optional[date]:
    if strategy.phase == MoonPhase.FULL_MOON:
        return full_moon_in_month(year, strategy.month_hint)
    return new_moon_in_month(year, strategy.month_hint)


def _resolve_dependent(
    rule: HolidayRule,
    strategy: DependentOffset,
    year: int,
    catalog: Optional["HolidayCatalog"],
    chain: tuple[str, ...],
) -> Optional[date]:
    if catalog is None:
        raise MalformedRuleError(
            message=f"Rule depends on '{strategy.base_name}' but no catalog was given",
            rule_name=rule.name,
            details={"base_name": strategy.base_name},
        )

    base = catalog.get(strategy.base_name)
    if base is None:
        raise RuleNotFoundError(
            message=f"Base rule '{strategy.base_name}' is not in the catalog",
            rule_name=rule.name,
            details={"base_name": strategy.base_name},
        )

    if base.name in chain:
        cycle = " -> ".join(chain + (base.name,))
        raise DependencyCycleError(
            message=f"Dependency cycle: {cycle}",
            rule_name=rule.name,
            details={"chain": list(chain) + [base.name]},
        )

    base_date = _resolve(base, year, catalog, chain + (base.name,))
    result = _shift(base_date, strategy.days)
    # Offsets across Dec 31 / Jan 1 belong to the neighbouring year
    if result is not None and result.year != year:
        return None
    return result


def _resolve(
    rule: HolidayRule,
    year: int,
    catalog: Optional["HolidayCatalog"],
    chain: tuple[str, ...],
) -> Optional[date]:
    strategy = rule.strategy
    try:
        strategy.validate()
    except MalformedRuleError as e:
        # Attach the rule name for diagnostics
        e.rule_name = e.rule_name or rule.name
        raise

    if isinstance(strategy, Fixed):
        return _resolve_fixed(strategy, year)

    elif isinstance(strategy, NthWeekday):
        return nth_weekday_of_month(year, strategy.month, strategy.weekday, strategy.n)

    elif isinstance(strategy, LastWeekday):
        return last_weekday_of_month(year, strategy.month, strategy.weekday)

    elif isinstance(strategy, WeekdayRelative):
        return _resolve_weekday_relative(strategy, year)

    elif isinstance(strategy, EasterOffset):
        result = _shift(easter_sunday(year), strategy.days)
        if result is not None and result.year != year:
            return None
        return result

    elif isinstance(strategy, DependentOffset):
        return _resolve_dependent(rule, strategy, year, catalog, chain)

    elif isinstance(strategy, PeriodicYears):
        return _resolve_periodic(strategy, year)

    elif isinstance(strategy, LunarApproximate):
        return _resolve_lunar(strategy, year)

    elif isinstance(strategy, ExplicitYearTable):
        return strategy.lookup(year)

    raise MalformedRuleError(
        message=f"Unsupported strategy type: {type(strategy).__name__}",
        rule_name=rule.name,
    )


# =============================================================================
# Public API
# =============================================================================

def resolve(
    rule: HolidayRule,
    year: int,
    catalog: Optional["HolidayCatalog"] = None,
) -> Optional[date]:
    """
    Resolve a rule to its date in a year.

    Args:
        rule: The rule to resolve
        year: Gregorian year
        catalog: Catalog used to look up dependent-offset base rules

    Returns:
        The date, or None if the rule has no occurrence that year

    Raises:
        MalformedRuleError: If the rule (or a rule it depends on) is invalid
    """
    if not 1 <= year <= 9999:
        return None
    result = _resolve(rule, year, catalog, (rule.name,))
    logger.debug("Resolved %r for %d: %s", rule.name, year, result)
    return result


def occurs_on(
    rule: HolidayRule,
    d: date,
    catalog: Optional["HolidayCatalog"] = None,
) -> bool:
    """
    Check whether a single rule falls on a date.

    Resolves directly, without going through a year cache.
    """
    return resolve(rule, d.year, catalog) == d


def resolve_many(
    rules: Iterable[HolidayRule],
    year: int,
    catalog: Optional["HolidayCatalog"] = None,
) -> list[ResolvedOccurrence]:
    """
    Resolve several rules for one year, dropping rules with no occurrence.

    Malformed rules raise; use the year cache for skip-and-report behaviour.
    """
    occurrences = []
    for rule in rules:
        resolved = resolve(rule, year, catalog)
        if resolved is not None:
            occurrences.append(ResolvedOccurrence(date=resolved, rule=rule))
    return occurrences
