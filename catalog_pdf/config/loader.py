"""Load catalog snapshot YAML or JSON into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _coerce_bool,
    _coerce_int,
    _coerce_price,
    _coerce_status,
    _optional_str,
    _parse_timestamp,
    _pick,
    _require_str,
    _verbatim_text,
)
from .models import (
    CatalogConfiguration,
    CatalogSnapshot,
    Category,
    CategoryOrder,
    Product,
    ProductOrder,
    SnapshotError,
)


def load_snapshot(path: Path) -> CatalogSnapshot:
    """Load the catalog snapshot consumed by the PDF generator.

    Parameters
    ----------
    path : Path
        Filesystem path to a YAML or JSON document with ``catalog``,
        ``products`` and ``categories`` keys.

    Returns
    -------
    CatalogSnapshot
        Immutable snapshot with the catalog configuration and every product
        and category entity it may reference.

    Raises
    ------
    FileNotFoundError
        If the snapshot file does not exist at ``path``.
    TypeError
        If the top-level document is not a mapping.
    SnapshotError
        If the catalog block is missing or an entity lacks a required field.
    YAMLError
        If the content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from catalog_pdf.config import load_snapshot
    >>> snapshot = load_snapshot(Path("catalog.yaml"))  # doctest: +SKIP
    >>> snapshot.catalog.name  # doctest: +SKIP
    'Spring Menu'
    """
    if not path.exists():
        msg = f"Snapshot file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level snapshot structure must be a mapping."
        raise TypeError(msg)
    return snapshot_from_mapping(loaded)


def snapshot_from_mapping(raw: typ.Mapping[str, typ.Any]) -> CatalogSnapshot:
    """Build a :class:`CatalogSnapshot` from already-decoded data."""
    catalog_raw = raw.get("catalog")
    if not isinstance(catalog_raw, dict):
        msg = "Snapshot is missing the 'catalog' mapping."
        raise SnapshotError(msg)

    products = tuple(
        _build_product(payload) for payload in _entity_list(raw, "products")
    )
    categories = tuple(
        _build_category(payload) for payload in _entity_list(raw, "categories")
    )
    _reject_duplicate_ids("Product", [product.id for product in products])
    _reject_duplicate_ids("Category", [category.id for category in categories])
    return CatalogSnapshot(
        catalog=_build_catalog(catalog_raw),
        products=products,
        categories=categories,
    )


def _reject_duplicate_ids(kind: str, ids: list[str]) -> None:
    seen: set[str] = set()
    for entity_id in ids:
        if entity_id in seen:
            msg = f"{kind} id '{entity_id}' appears more than once in the snapshot."
            raise SnapshotError(msg)
        seen.add(entity_id)


def _entity_list(
    raw: typ.Mapping[str, typ.Any], key: str
) -> list[typ.Mapping[str, typ.Any]]:
    """Return the mapping entries stored under ``key``, validating the shape."""
    value = raw.get(key) or []
    if not isinstance(value, list):
        msg = f"Snapshot '{key}' must be a list."
        raise SnapshotError(msg)
    entries: list[typ.Mapping[str, typ.Any]] = []
    for index, payload in enumerate(value):
        if not isinstance(payload, dict):
            msg = f"Snapshot '{key}[{index}]' must be a mapping."
            raise SnapshotError(msg)
        entries.append(payload)
    return entries


def _build_catalog(payload: typ.Mapping[str, typ.Any]) -> CatalogConfiguration:
    """Build the catalog configuration, accepting stored camelCase fields."""
    context = "Catalog"
    orders_raw = _pick(payload, "categories", "categoryOrders", "category_orders")
    category_orders = tuple(
        _build_category_order(entry, index)
        for index, entry in enumerate(_order_list(orders_raw, context=context))
    )
    return CatalogConfiguration(
        id=_optional_str(payload.get("id")),
        name=_require_str(payload.get("name"), field="name", context=context),
        version=_optional_str(payload.get("version")) or "1.0",
        is_active=_coerce_bool(
            _pick(payload, "isActive", "is_active"), default=True
        ),
        cover_image_ref=_optional_str(
            _pick(payload, "coverPage", "coverImageRef", "cover_image_ref")
        ),
        back_image_ref=_optional_str(
            _pick(payload, "backPage", "backImageRef", "back_image_ref")
        ),
        category_orders=category_orders,
        created_at=_parse_timestamp(_pick(payload, "createdAt", "created_at")),
        updated_at=_parse_timestamp(_pick(payload, "updatedAt", "updated_at")),
    )


def _order_list(value: object, *, context: str) -> list[typ.Mapping[str, typ.Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(
        isinstance(entry, dict) for entry in value
    ):
        msg = f"{context} ordering entries must be a list of mappings."
        raise SnapshotError(msg)
    return value


def _build_category_order(
    payload: typ.Mapping[str, typ.Any], index: int
) -> CategoryOrder:
    context = f"Category order #{index + 1}"
    products_raw = _pick(payload, "products", "productOrders", "product_orders")
    product_orders = tuple(
        _build_product_order(entry, position, parent=context)
        for position, entry in enumerate(_order_list(products_raw, context=context))
    )
    return CategoryOrder(
        category_id=_require_str(
            _pick(payload, "categoryId", "category_id"),
            field="categoryId",
            context=context,
        ),
        order=_coerce_int(payload.get("order"), field="order", context=context),
        start_new_page=_coerce_bool(
            _pick(payload, "startNewPage", "newPageStart", "start_new_page")
        ),
        product_orders=product_orders,
        category_name=_optional_str(_pick(payload, "categoryName", "category_name")),
    )


def _build_product_order(
    payload: typ.Mapping[str, typ.Any], index: int, *, parent: str
) -> ProductOrder:
    context = f"{parent}, product order #{index + 1}"
    return ProductOrder(
        product_id=_require_str(
            _pick(payload, "productId", "product_id"),
            field="productId",
            context=context,
        ),
        order=_coerce_int(payload.get("order"), field="order", context=context),
        included=_coerce_bool(
            _pick(payload, "included", "includeInCatalog", "include_in_catalog"),
            default=True,
        ),
        product_title=_optional_str(_pick(payload, "productTitle", "product_title")),
    )


def _build_product(payload: typ.Mapping[str, typ.Any]) -> Product:
    product_id = _require_str(payload.get("id"), field="id", context="Product")
    context = f"Product '{product_id}'"
    return Product(
        id=product_id,
        title=_optional_str(payload.get("title")) or "",
        description=_verbatim_text(payload.get("description")),
        category=_optional_str(payload.get("category")),
        brand=_optional_str(payload.get("brand")),
        image=_optional_str(payload.get("image")),
        price=_coerce_price(payload.get("price"), context=context),
        is_best_seller=_coerce_bool(_pick(payload, "isBestSeller", "is_best_seller")),
        status=_coerce_status(payload.get("status")),
        created_at=_parse_timestamp(_pick(payload, "createdAt", "created_at")),
        updated_at=_parse_timestamp(_pick(payload, "updatedAt", "updated_at")),
    )


def _build_category(payload: typ.Mapping[str, typ.Any]) -> Category:
    category_id = _require_str(payload.get("id"), field="id", context="Category")
    return Category(
        id=category_id,
        name=_optional_str(payload.get("name")) or category_id,
        description=_verbatim_text(payload.get("description")),
        image=_optional_str(payload.get("image")),
        status=_coerce_status(payload.get("status")),
        created_at=_parse_timestamp(_pick(payload, "createdAt", "created_at")),
        updated_at=_parse_timestamp(_pick(payload, "updatedAt", "updated_at")),
    )


__all__ = ["load_snapshot", "snapshot_from_mapping"]
