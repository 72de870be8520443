"""
holidaycal Holiday Rule

A HolidayRule is an immutable holiday definition: display metadata plus
exactly one resolution strategy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import HolidayCategory, StrategyKind
from .strategies import ResolutionStrategy


@dataclass(frozen=True)
class HolidayRule:
    """
    A holiday or observance definition.

    Attributes:
        name: Unique display name, also the lookup key for dependent rules
        category: Descriptive grouping (does not affect resolution)
        strategy: How the date is found for a given year
        emoji: Presentation metadata
        description: Presentation metadata
        image_search_term: Presentation metadata (defaults to the name)
    """
    name: str
    category: HolidayCategory
    strategy: ResolutionStrategy

    # Presentation metadata (opaque to the engine)
    emoji: str = ""
    description: str = ""
    image_search_term: Optional[str] = None

    @property
    def kind(self) -> StrategyKind:
        """Strategy discriminator."""
        return self.strategy.kind

    @property
    def search_term(self) -> str:
        """Image search term, falling back to the lower-cased name."""
        return self.image_search_term or self.name.lower()

    @property
    def depends_on(self) -> Optional[str]:
        """Name of the base rule for dependent offsets, else None."""
        return getattr(self.strategy, "base_name", None)

    def to_display(self) -> dict[str, Any]:
        """Fields read by the presentation layer."""
        return {
            "name": self.name,
            "emoji": self.emoji,
            "description": self.description,
            "category": self.category.value,
        }
