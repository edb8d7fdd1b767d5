"""Load and validate catalog snapshots and generator settings.

This subpackage parses the snapshot document exported from the catalog
database (catalog configuration, products, categories), normalizes the
stored camelCase field names and their historical aliases, and produces
immutable dataclasses (:class:`CatalogSnapshot`, :class:`CatalogConfiguration`
and friends) that the layout engine consumes. Settings that outlive a single
run live in a TOML file handled by :mod:`catalog_pdf.config.settings`.

Examples
--------
>>> from pathlib import Path
>>> from catalog_pdf.config import load_snapshot
>>> snapshot = load_snapshot(Path("catalog.yaml"))  # doctest: +SKIP
>>> [order.category_id for order in snapshot.catalog.category_orders]  # doctest: +SKIP
['c1', 'c2']
"""

from .loader import load_snapshot, snapshot_from_mapping
from .models import (
    CatalogConfiguration,
    CatalogSnapshot,
    Category,
    CategoryOrder,
    Product,
    ProductOrder,
    SnapshotError,
)
from .settings import (
    DEFAULT_SETTINGS_PATH,
    GeneratorSettings,
    load_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "CatalogConfiguration",
    "CatalogSnapshot",
    "Category",
    "CategoryOrder",
    "GeneratorSettings",
    "Product",
    "ProductOrder",
    "SnapshotError",
    "load_settings",
    "load_snapshot",
    "save_settings",
    "snapshot_from_mapping",
]
