"""
holidaycal Catalog Packs

Declarative holiday catalogs in YAML or JSON.

Usage:
    from holidaycal.packs import CatalogPackLoader, load_bundled_catalog

    catalog = load_bundled_catalog()
    extra = CatalogPackLoader().load("my_holidays.yaml")
"""
from __future__ import annotations

from .loader import (
    BUNDLED_CATALOG_PATH,
    CatalogPackLoader,
    load_bundled_catalog,
    load_catalog_pack,
    load_catalog_pack_from_string,
    validate_reference_integrity,
)
from .schema import (
    SCHEMA_VERSION,
    CatalogPackSchema,
    HolidayRuleSchema,
    check_schema_version,
    validate_catalog_pack,
)

__all__ = [
    # Loader
    "CatalogPackLoader",
    "load_catalog_pack",
    "load_catalog_pack_from_string",
    "load_bundled_catalog",
    "validate_reference_integrity",
    "BUNDLED_CATALOG_PATH",
    # Schema
    "SCHEMA_VERSION",
    "CatalogPackSchema",
    "HolidayRuleSchema",
    "check_schema_version",
    "validate_catalog_pack",
]
