"""
holidaycal Catalog Pack Loader

Loads and validates catalog packs from YAML or JSON files.

Converts Pydantic schema models to holidaycal domain models.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..engine.catalog import HolidayCatalog
from ..exceptions import (
    CatalogLoadError,
    CatalogValidationError,
    CatalogVersionMismatch,
    DuplicateRuleError,
)
from ..models import (
    HolidayCategory,
    HolidayRule,
    ResolutionStrategy,
    Weekday,
    days_after,
    easter_offset,
    every_n_years,
    fixed,
    full_moon,
    last_weekday,
    new_moon,
    nth_weekday,
    weekday_after,
    weekday_before,
    year_table,
)
from .schema import (
    SCHEMA_VERSION,
    CatalogPackSchema,
    DependentOffsetRuleSchema,
    EasterOffsetRuleSchema,
    ExplicitYearTableRuleSchema,
    FixedRuleSchema,
    HolidayRuleSchema,
    LastWeekdayRuleSchema,
    LunarApproximateRuleSchema,
    NthWeekdayRuleSchema,
    PeriodicYearsRuleSchema,
    WeekdayRelativeRuleSchema,
    check_schema_version,
    validate_catalog_pack,
)

logger = logging.getLogger(__name__)

BUNDLED_CATALOG_PATH = Path(__file__).parent / "data" / "observances.yaml"


# =============================================================================
# Reference Integrity Validation
# =============================================================================

def validate_reference_integrity(
    schema: CatalogPackSchema,
    path: str = "",
    known_names: Optional[set[str]] = None,
) -> None:
    """
    Validate internal references are consistent.

    Catches:
    - Duplicate holiday names
    - Dependent offsets naming a rule that is not in the pack

    Args:
        schema: The validated pack
        path: File path for error messages
        known_names: Names defined elsewhere (e.g. earlier packs in a directory)

    Raises:
        ValueError: If reference integrity errors are found
    """
    errors = []

    seen: set[str] = set()
    for holiday in schema.holidays:
        if holiday.name in seen:
            errors.append(f"Duplicate holiday name: '{holiday.name}'")
        seen.add(holiday.name)

    available = seen | (known_names or set())
    for holiday in schema.holidays:
        rule = holiday.rule
        if isinstance(rule, DependentOffsetRuleSchema):
            if rule.base not in available:
                errors.append(
                    f"Holiday '{holiday.name}' depends on unknown holiday '{rule.base}'"
                )
            elif rule.base == holiday.name:
                errors.append(f"Holiday '{holiday.name}' depends on itself")

    if errors:
        path_str = f" in {path}" if path else ""
        raise ValueError(
            f"Reference integrity errors{path_str}:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_rule(schema: Any) -> ResolutionStrategy:
    """Convert a rule schema to its resolution strategy."""
    if isinstance(schema, FixedRuleSchema):
        return fixed(schema.month, schema.day)

    elif isinstance(schema, NthWeekdayRuleSchema):
        return nth_weekday(schema.month, Weekday.from_name(schema.weekday), schema.n)

    elif isinstance(schema, LastWeekdayRuleSchema):
        return last_weekday(schema.month, Weekday.from_name(schema.weekday))

    elif isinstance(schema, WeekdayRelativeRuleSchema):
        weekday = Weekday.from_name(schema.weekday)
        if schema.direction == "on_or_before":
            return weekday_before(schema.month, schema.day, weekday)
        return weekday_after(schema.month, schema.day, weekday)

    elif isinstance(schema, EasterOffsetRuleSchema):
        return easter_offset(schema.days)

    elif isinstance(schema, DependentOffsetRuleSchema):
        return days_after(schema.base, schema.days)

    elif isinstance(schema, PeriodicYearsRuleSchema):
        return every_n_years(
            schema.every_n_years,
            schema.anchor_year,
            schema.month,
            schema.day,
            sunday_rolls_to_monday=schema.sunday_rolls_to_monday,
        )

    elif isinstance(schema, LunarApproximateRuleSchema):
        if schema.phase == "full_moon":
            return full_moon(schema.month)
        return new_moon(schema.month)

    elif isinstance(schema, ExplicitYearTableRuleSchema):
        return year_table(schema.dates)

    raise TypeError(f"Unsupported rule schema: {type(schema).__name__}")


def _convert_holiday(schema: HolidayRuleSchema) -> HolidayRule:
    """Convert HolidayRuleSchema to HolidayRule model."""
    return HolidayRule(
        name=schema.name,
        category=HolidayCategory(schema.category),
        strategy=_convert_rule(schema.rule),
        emoji=schema.emoji,
        description=schema.description,
        image_search_term=schema.image_search_term,
    )


def _convert_catalog_pack(schema: CatalogPackSchema) -> HolidayCatalog:
    """Convert CatalogPackSchema to a HolidayCatalog."""
    return HolidayCatalog.from_rules(
        [_convert_holiday(h) for h in schema.holidays],
        name=schema.id,
        version=schema.version,
    )


# =============================================================================
# Catalog Pack Loader
# =============================================================================

class CatalogPackLoader:
    """
    Loads catalog packs from YAML or JSON files.

    Usage:
        loader = CatalogPackLoader()
        catalog = loader.load("path/to/observances.yaml")

        # Merge every pack in a directory (file-name order)
        catalog = loader.load_directory("packs/")
    """

    def __init__(self, strict_version: bool = True, strict_references: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
            strict_references: If True, reject dependent offsets naming unknown rules
        """
        self.strict_version = strict_version
        self.strict_references = strict_references

        # Loaded catalogs by pack id
        self._catalogs: dict[str, HolidayCatalog] = {}

        # Per-file failures from the last load_directory call
        self.errors: list[dict[str, Any]] = []

    def load(self, path: Union[str, Path]) -> HolidayCatalog:
        """
        Load a catalog pack from a file.

        Raises:
            CatalogLoadError: If file cannot be read
            CatalogValidationError: If validation fails
            CatalogVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except Exception as e:
            raise CatalogLoadError(
                message=f"Failed to load catalog pack: {e}",
                details={"path": str(path), "error": str(e)},
            )

        catalog = self.load_data(data, source=str(path))
        logger.info(
            "Loaded catalog pack %r v%s from %s (%d holidays)",
            catalog.name, catalog.version, path, len(catalog),
        )
        return catalog

    def load_data(
        self,
        data: Any,
        source: str = "",
        known_names: Optional[set[str]] = None,
    ) -> HolidayCatalog:
        """
        Validate and convert an already-parsed pack document.

        Raises:
            CatalogValidationError: If validation fails
            CatalogVersionMismatch: If schema version incompatible
        """
        if not isinstance(data, dict):
            raise CatalogValidationError(
                message="Catalog pack must be a mapping at the top level",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise CatalogVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_catalog_pack(data)
        except ValidationError as e:
            raise CatalogValidationError(
                message=f"Catalog pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(), "path": source},
            )

        try:
            if self.strict_references:
                validate_reference_integrity(schema, source, known_names)
            catalog = _convert_catalog_pack(schema)
        except (ValueError, DuplicateRuleError) as e:
            raise CatalogValidationError(
                message="Reference integrity validation failed",
                details={"errors": str(e), "path": source},
            )

        self._catalogs[catalog.name] = catalog
        return catalog

    def load_directory(self, path: Union[str, Path]) -> HolidayCatalog:
        """
        Load every pack in a directory and merge them in file-name order.

        A pack that fails to load is logged and skipped. Holidays whose
        name is already taken by an earlier pack are skipped too.

        Raises:
            CatalogLoadError: If the path is not a directory
        """
        directory = Path(path)
        if not directory.is_dir():
            raise CatalogLoadError(
                message=f"Not a directory: {directory}",
                details={"path": str(directory)},
            )

        merged = HolidayCatalog(name=directory.name)
        self.errors = []

        files = sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in {".yaml", ".yml", ".json"}
        )
        for file_path in files:
            try:
                data = self._load_file(file_path)
                catalog = self.load_data(
                    data, source=str(file_path), known_names=set(merged.names),
                )
            except (CatalogValidationError, CatalogVersionMismatch) as e:
                logger.warning("Skipping catalog pack %s: %s", file_path, e)
                self.errors.append({"path": str(file_path), **e.to_dict()})
                continue
            except Exception as e:
                logger.warning("Skipping unreadable catalog pack %s: %s", file_path, e)
                self.errors.append({
                    "path": str(file_path),
                    "code": CatalogLoadError.code,
                    "message": str(e),
                })
                continue

            for rule in catalog:
                if rule.name in merged:
                    logger.warning(
                        "Holiday %r from %s already defined; keeping the first",
                        rule.name, file_path.name,
                    )
                    continue
                merged.add(rule)

        logger.info(
            "Loaded %d holidays from %d packs in %s (%d failed)",
            len(merged), len(files) - len(self.errors), directory, len(self.errors),
        )
        return merged

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f)
            elif path.suffix.lower() == ".json":
                return json.load(f)
            else:
                # Try YAML first, then JSON
                content = f.read()
                try:
                    return yaml.safe_load(content)
                except yaml.YAMLError:
                    return json.loads(content)

    def get_catalog(self, pack_id: str) -> Optional[HolidayCatalog]:
        """Get a loaded catalog by pack id."""
        return self._catalogs.get(pack_id)

    def list_catalogs(self) -> list[str]:
        """List ids of all loaded packs."""
        return list(self._catalogs.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_catalog_pack(path: Union[str, Path]) -> HolidayCatalog:
    """
    Load a catalog pack from a file.

    Convenience function that creates a temporary loader.
    """
    loader = CatalogPackLoader()
    return loader.load(path)


def load_catalog_pack_from_string(
    content: str,
    format: str = "yaml",
) -> HolidayCatalog:
    """
    Load a catalog pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogLoadError(
            message=f"Failed to parse catalog pack: {e}",
            details={"format": format, "error": str(e)},
        )

    return CatalogPackLoader().load_data(data, source="<string>")


def load_bundled_catalog() -> HolidayCatalog:
    """Load the observance catalog shipped with the package."""
    return load_catalog_pack(BUNDLED_CATALOG_PATH)
