"""
holidaycal Exception Hierarchy

Domain-specific exceptions for holiday date resolution.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: HC_<CATEGORY>_<SPECIFIC>

"No occurrence this year" is NOT an error anywhere in this package:
it is represented as ``None`` and never raised.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HolidayCalError(Exception):
    """
    Base exception for all holidaycal errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (HC_*)
        details: Additional context about the error
        rule_name: Associated holiday rule name if applicable
    """
    message: str
    code: str = "HC_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    rule_name: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.rule_name:
            parts.append(f"(rule: {self.rule_name})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/diagnostics."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.rule_name:
            result["rule_name"] = self.rule_name
        return result


# =============================================================================
# Rule Errors
# =============================================================================

@dataclass
class MalformedRuleError(HolidayCalError):
    """Rule configuration is invalid and cannot be resolved."""
    code: str = "HC_MALFORMED_RULE"


@dataclass
class RuleNotFoundError(MalformedRuleError):
    """A rule (usually a dependency base) is not in the catalog."""
    code: str = "HC_RULE_NOT_FOUND"


@dataclass
class DependencyCycleError(MalformedRuleError):
    """Dependent-offset rules reference each other in a cycle."""
    code: str = "HC_DEPENDENCY_CYCLE"


@dataclass
class OutOfAlgorithmRangeError(HolidayCalError):
    """Year is outside the valid range of a calendrical algorithm."""
    code: str = "HC_OUT_OF_RANGE"


# =============================================================================
# Catalog Errors
# =============================================================================

@dataclass
class DuplicateRuleError(HolidayCalError):
    """Two rules in one catalog share a name."""
    code: str = "HC_DUPLICATE_RULE"


@dataclass
class CatalogLoadError(HolidayCalError):
    """Failed to load catalog pack from file."""
    code: str = "HC_CATALOG_LOAD_ERROR"


@dataclass
class CatalogValidationError(HolidayCalError):
    """Catalog pack schema or reference validation failed."""
    code: str = "HC_CATALOG_VALIDATION_ERROR"


@dataclass
class CatalogVersionMismatch(HolidayCalError):
    """Catalog pack schema version doesn't match the supported version."""
    code: str = "HC_CATALOG_VERSION_MISMATCH"
