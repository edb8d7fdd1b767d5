"""Seed a snapshot's catalog ordering from its active categories and products.

A freshly created catalog carries no ordering metadata. The editor used to
pre-fill it with every active category, each starting a new page, listing all
of that category's active products in stored order. This module does the same
for a snapshot file and writes the result back, preserving comments and key
order when the file is YAML.

Example
-------
.. code-block:: python

    from pathlib import Path
    from catalog_pdf.scaffold import scaffold_category_orders

    result = scaffold_category_orders(Path("catalog.yaml"))
    if result.written:
        print(f"seeded {len(result.orders)} categories")
"""

from __future__ import annotations

import dataclasses as dc
import json
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from catalog_pdf.config.loader import load_snapshot
from catalog_pdf.config.models import SnapshotError
from catalog_pdf.ordering import default_category_orders

if typ.TYPE_CHECKING:
    from pathlib import Path

    from catalog_pdf.config.models import CategoryOrder

_ORDER_KEYS = ("categories", "categoryOrders", "category_orders")


@dc.dataclass(slots=True)
class ScaffoldResult:
    """Outcome of a scaffold run."""

    orders: tuple[CategoryOrder, ...]
    written: bool


def scaffold_category_orders(
    snapshot_path: Path, *, force: bool = False
) -> ScaffoldResult:
    """Fill the catalog's category orders with the default layout.

    Parameters
    ----------
    snapshot_path : Path
        YAML or JSON snapshot file to update in place.
    force : bool, optional
        Replace existing ordering metadata. By default a catalog that already
        has category orders is left untouched.

    Returns
    -------
    ScaffoldResult
        The orders now stored in the file and whether the file was rewritten.
    """
    snapshot = load_snapshot(snapshot_path)
    existing = snapshot.catalog.category_orders
    if existing and not force:
        return ScaffoldResult(orders=existing, written=False)

    orders = default_category_orders(snapshot.categories, snapshot.products)
    payload = [_serialize_order(order) for order in orders]
    if snapshot_path.suffix.lower() == ".json":
        _write_json(snapshot_path, payload)
    else:
        _write_yaml(snapshot_path, payload)
    return ScaffoldResult(orders=orders, written=True)


def _serialize_order(order: CategoryOrder) -> dict[str, typ.Any]:
    return {
        "categoryId": order.category_id,
        "categoryName": order.category_name,
        "order": order.order,
        "startNewPage": order.start_new_page,
        "products": [
            {
                "productId": product.product_id,
                "productTitle": product.product_title,
                "order": product.order,
                "included": product.included,
            }
            for product in order.product_orders
        ],
    }


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _write_yaml(path: Path, payload: list[dict[str, typ.Any]]) -> None:
    yaml = _build_roundtrip_yaml()
    with path.open("r", encoding="utf-8") as handle:
        document = yaml.load(handle) or CommentedMap()
    catalog = document.get("catalog") if isinstance(document, CommentedMap) else None
    if not isinstance(catalog, CommentedMap):
        msg = "Snapshot is missing the 'catalog' mapping."
        raise SnapshotError(msg)
    _replace_orders(catalog, payload)
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(document, handle)


def _write_json(path: Path, payload: list[dict[str, typ.Any]]) -> None:
    document = json.loads(path.read_text(encoding="utf-8"))
    _replace_orders(document["catalog"], payload)
    path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")


def _replace_orders(
    catalog: typ.MutableMapping[str, typ.Any], payload: list[dict[str, typ.Any]]
) -> None:
    for key in _ORDER_KEYS[1:]:
        if key in catalog:
            del catalog[key]
    catalog["categories"] = payload


__all__ = ["ScaffoldResult", "scaffold_category_orders"]
