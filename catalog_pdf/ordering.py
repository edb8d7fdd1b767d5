"""Resolve catalog ordering metadata into the numbered structure readers see.

The stored catalog keeps one :class:`~catalog_pdf.config.CategoryOrder` per
category with nested product orders. Entries may point at deleted entities,
products may be excluded, and the ``order`` fields need not be contiguous.
:func:`plan_sections` turns all of that into the final, 1-based numbering used
by the layout engine and the ``outline`` command.

Example
-------
>>> from catalog_pdf.config import (
...     CatalogConfiguration, CatalogSnapshot, Category, CategoryOrder,
...     Product, ProductOrder,
... )
>>> snapshot = CatalogSnapshot(
...     catalog=CatalogConfiguration(
...         name="Menu",
...         version="1",
...         category_orders=(
...             CategoryOrder("c1", 5, product_orders=(ProductOrder("p1", 9),)),
...         ),
...     ),
...     products=(Product("p1", "Cola"),),
...     categories=(Category("c1", "Drinks"),),
... )
>>> [(c.number, p.label) for c in plan_sections(snapshot) for p in c.products]
[(1, '1.1')]
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from catalog_pdf.config.models import (
    CatalogSnapshot,
    Category,
    CategoryOrder,
    Product,
    ProductOrder,
)
from catalog_pdf.repository import (
    SnapshotRepository,
    category_repository,
    product_repository,
)


@dc.dataclass(frozen=True, slots=True)
class PlannedProduct:
    """A product entry with its reader-visible number."""

    number: int
    label: str
    product: Product


@dc.dataclass(frozen=True, slots=True)
class PlannedCategory:
    """A category section with its reader-visible number and products."""

    number: int
    category: Category
    start_new_page: bool
    products: tuple[PlannedProduct, ...]


@dc.dataclass(frozen=True, slots=True)
class CatalogSummary:
    """Counts shown before generating a catalog.

    Attributes
    ----------
    configured_categories : int
        Category entries stored on the catalog, resolvable or not.
    selected_products : int
        Product entries flagged as included, resolvable or not.
    rendered_categories : int
        Categories that will appear in the document.
    rendered_products : int
        Products that will appear in the document.
    has_cover : bool
        Whether a cover image reference is configured.
    has_back_page : bool
        Whether a back/about page image reference is configured.
    """

    configured_categories: int
    selected_products: int
    rendered_categories: int
    rendered_products: int
    has_cover: bool
    has_back_page: bool


def plan_sections(
    snapshot: CatalogSnapshot,
    *,
    products: SnapshotRepository[Product] | None = None,
    categories: SnapshotRepository[Category] | None = None,
) -> list[PlannedCategory]:
    """Return the categories and products to render, numbered in reading order.

    Parameters
    ----------
    snapshot : CatalogSnapshot
        Catalog configuration plus the entities it may reference.
    products, categories : SnapshotRepository, optional
        Lookup stores; built from ``snapshot`` when omitted.

    Returns
    -------
    list[PlannedCategory]
        Resolvable categories sorted by ``order`` (stable for ties) and numbered
        from 1. Within each, included and resolvable products sorted by
        ``order`` and numbered from 1. Missing entities and excluded products
        never consume a number.
    """
    product_store = (
        products if products is not None else product_repository(snapshot.products)
    )
    category_store = (
        categories
        if categories is not None
        else category_repository(snapshot.categories)
    )

    resolved: list[tuple[CategoryOrder, Category]] = []
    for category_order in snapshot.catalog.category_orders:
        category = category_store.get_by_id(category_order.category_id)
        if category is not None:
            resolved.append((category_order, category))
    resolved.sort(key=lambda pair: pair[0].order)

    planned: list[PlannedCategory] = []
    for number, (category_order, category) in enumerate(resolved, start=1):
        planned.append(
            PlannedCategory(
                number=number,
                category=category,
                start_new_page=category_order.start_new_page,
                products=_plan_products(
                    number, category_order.product_orders, product_store
                ),
            )
        )
    return planned


def _plan_products(
    category_number: int,
    product_orders: typ.Iterable[ProductOrder],
    store: SnapshotRepository[Product],
) -> tuple[PlannedProduct, ...]:
    resolved: list[tuple[ProductOrder, Product]] = []
    for product_order in product_orders:
        if not product_order.included:
            continue
        product = store.get_by_id(product_order.product_id)
        if product is not None:
            resolved.append((product_order, product))
    resolved.sort(key=lambda pair: pair[0].order)
    return tuple(
        PlannedProduct(
            number=number, label=f"{category_number}.{number}", product=product
        )
        for number, (_, product) in enumerate(resolved, start=1)
    )


def summarize(snapshot: CatalogSnapshot) -> CatalogSummary:
    """Return the counts the catalog preview shows before generation."""
    catalog = snapshot.catalog
    sections = plan_sections(snapshot)
    return CatalogSummary(
        configured_categories=len(catalog.category_orders),
        selected_products=sum(
            1
            for category_order in catalog.category_orders
            for product_order in category_order.product_orders
            if product_order.included
        ),
        rendered_categories=len(sections),
        rendered_products=sum(len(section.products) for section in sections),
        has_cover=catalog.cover_image_ref is not None,
        has_back_page=catalog.back_image_ref is not None,
    )


def default_category_orders(
    categories: typ.Iterable[Category], products: typ.Iterable[Product]
) -> tuple[CategoryOrder, ...]:
    """Build the initial ordering for a catalog that has none yet.

    Every active category is listed in the given order, each starting on a new
    page, with all of its active products included in the given order.
    """
    active_products = [product for product in products if product.status == "active"]
    orders: list[CategoryOrder] = []
    active_categories = (
        category for category in categories if category.status == "active"
    )
    for index, category in enumerate(active_categories, start=1):
        members = [
            product for product in active_products if product.category == category.id
        ]
        orders.append(
            CategoryOrder(
                category_id=category.id,
                category_name=category.name,
                order=index,
                start_new_page=True,
                product_orders=tuple(
                    ProductOrder(
                        product_id=product.id,
                        product_title=product.title,
                        order=position,
                        included=True,
                    )
                    for position, product in enumerate(members, start=1)
                ),
            )
        )
    return tuple(orders)


__all__ = [
    "CatalogSummary",
    "PlannedCategory",
    "PlannedProduct",
    "default_category_orders",
    "plan_sections",
    "summarize",
]
