"""
Catalog Fingerprinting

Deterministic JSON for holiday rules and a SHA-256 fingerprint over an
ordered rule list. Two catalogs with the same rules in the same order
always produce the same fingerprint; the year cache stamps it on every
YearIndex it builds.

Canonical form: sorted keys, compact separators, UTF-8, dates as ISO 8601.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from datetime import date
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .models import HolidayRule, ResolutionStrategy


def _encode_date(obj: Any) -> Any:
    if isinstance(obj, date):
        return obj.isoformat()
    raise TypeError(f"Cannot fingerprint value of type {type(obj).__name__}")


def canonical_json(obj: Any) -> str:
    """
    Serialize to canonical JSON.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_encode_date,
        ensure_ascii=False,
    )


def content_hash(obj: Any) -> str:
    """Hex SHA-256 of the canonical JSON form (64 characters)."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def strategy_to_canonical_dict(strategy: "ResolutionStrategy") -> dict[str, Any]:
    # Weekday (IntEnum) and MoonPhase (str Enum) serialize as their values
    result = {f.name: getattr(strategy, f.name) for f in fields(strategy)}
    result["type"] = strategy.kind.value
    return result


def rule_to_canonical_dict(rule: "HolidayRule") -> dict[str, Any]:
    """Everything that identifies a rule, presentation fields included."""
    return {
        "name": rule.name,
        "category": rule.category.value,
        "emoji": rule.emoji,
        "description": rule.description,
        "image_search_term": rule.image_search_term,
        "rule": strategy_to_canonical_dict(rule.strategy),
    }


def compute_catalog_hash(rules: Iterable["HolidayRule"]) -> str:
    """
    Fingerprint an ordered sequence of rules.

    Order is part of the fingerprint: it decides same-day ordering.
    """
    return content_hash([rule_to_canonical_dict(rule) for rule in rules])
