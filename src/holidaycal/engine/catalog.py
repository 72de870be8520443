"""
holidaycal Holiday Catalog

The ordered set of holiday rules the engine resolves.

Key features:
- Insertion order is preserved (it is the tie-break for same-day holidays)
- Lookup by name (dependent offsets) and by category
- Revision counter and content fingerprint for cache invalidation
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Iterator, Optional

from ..canon import compute_catalog_hash
from ..exceptions import DuplicateRuleError, RuleNotFoundError
from ..models import HolidayCategory, HolidayRule

logger = logging.getLogger(__name__)


@dataclass
class HolidayCatalog:
    """
    An ordered, name-indexed collection of holiday rules.

    Treat a catalog as read-only once it is shared with a query service.
    Mutations (add/remove/replace) are allowed but bump ``revision``, which
    makes every YearResolutionCache built on this catalog drop all years.

    Usage:
        catalog = HolidayCatalog.from_rules([thanksgiving, black_friday])

        catalog.get("Thanksgiving")
        catalog.by_category(HolidayCategory.BANK_HOLIDAY)
        "Black Friday" in catalog
    """

    name: str = "custom"
    version: str = "0"

    # Internal state
    _rules: list[HolidayRule] = field(default_factory=list, repr=False)
    _by_name: dict[str, HolidayRule] = field(default_factory=dict, repr=False)
    _positions: dict[str, int] = field(default_factory=dict, repr=False)
    _revision: int = field(default=0, repr=False)
    _fingerprint: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[HolidayRule],
        name: str = "custom",
        version: str = "0",
    ) -> HolidayCatalog:
        """
        Build a catalog from rules, in order.

        Raises:
            DuplicateRuleError: If two rules share a name
        """
        catalog = cls(name=name, version=version)
        for rule in rules:
            catalog._append(rule)
        return catalog

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Optional[HolidayRule]:
        """Get a rule by exact name."""
        return self._by_name.get(name)

    def get_or_raise(self, name: str) -> HolidayRule:
        """
        Get a rule by name, raising if not found.

        Raises:
            RuleNotFoundError: If no rule has this name
        """
        rule = self.get(name)
        if rule is None:
            raise RuleNotFoundError(
                message=f"Rule not found: {name}",
                rule_name=name,
                details={"catalog": self.name},
            )
        return rule

    def position(self, name: str) -> int:
        """Catalog position of a rule (used for deterministic ordering)."""
        return self._positions.get(name, len(self._rules))

    def by_category(self, category: HolidayCategory) -> list[HolidayRule]:
        """All rules in a category, in catalog order."""
        return [r for r in self._rules if r.category == category]

    def dependents_of(self, name: str) -> list[HolidayRule]:
        """Rules whose date is an offset from the named rule."""
        return [r for r in self._rules if r.depends_on == name]

    @property
    def rules(self) -> tuple[HolidayRule, ...]:
        return tuple(self._rules)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self._rules]

    @property
    def categories(self) -> set[HolidayCategory]:
        return {r.category for r in self._rules}

    @property
    def revision(self) -> int:
        """Monotonic counter, bumped on every mutation."""
        return self._revision

    @property
    def fingerprint(self) -> str:
        """SHA-256 content hash of the ordered rules."""
        if self._fingerprint is None:
            self._fingerprint = compute_catalog_hash(self._rules)
        return self._fingerprint

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[HolidayRule]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, rule: HolidayRule) -> None:
        """
        Append a rule.

        Raises:
            DuplicateRuleError: If a rule with the same name exists
        """
        self._append(rule)
        self._touch()

    def remove(self, name: str) -> HolidayRule:
        """
        Remove a rule by name.

        Dependent rules are kept; they become malformed and are skipped
        (and reported) during resolution.

        Raises:
            RuleNotFoundError: If no rule has this name
        """
        rule = self.get_or_raise(name)
        self._rules.remove(rule)
        del self._by_name[name]
        self._reindex()
        self._touch()

        orphans = self.dependents_of(name)
        if orphans:
            logger.warning(
                "Removed rule %r still referenced by: %s",
                name, ", ".join(r.name for r in orphans),
            )
        return rule

    def replace(self, rule: HolidayRule) -> HolidayRule:
        """
        Replace the rule with the same name, keeping its position.

        Raises:
            RuleNotFoundError: If no rule has this name
        """
        old = self.get_or_raise(rule.name)
        self._rules[self._positions[rule.name]] = rule
        self._by_name[rule.name] = rule
        self._touch()
        return old

    def copy(self) -> HolidayCatalog:
        """Independent catalog with the same rules."""
        return HolidayCatalog.from_rules(self._rules, name=self.name, version=self.version)

    def _append(self, rule: HolidayRule) -> None:
        if rule.name in self._by_name:
            raise DuplicateRuleError(
                message=f"Duplicate rule name: '{rule.name}'",
                rule_name=rule.name,
                details={"catalog": self.name},
            )
        self._positions[rule.name] = len(self._rules)
        self._rules.append(rule)
        self._by_name[rule.name] = rule

    def _reindex(self) -> None:
        self._positions = {r.name: i for i, r in enumerate(self._rules)}

    def _touch(self) -> None:
        self._revision += 1
        self._fingerprint = None


# =============================================================================
# Default Catalog
# =============================================================================

@lru_cache(maxsize=1)
def load_default_catalog() -> HolidayCatalog:
    """
    Load the catalog shipped with the package (cached per process).

    The returned instance is shared: do not mutate it. Use ``copy()``
    for a catalog you intend to change.
    """
    from ..packs import load_bundled_catalog

    return load_bundled_catalog()
