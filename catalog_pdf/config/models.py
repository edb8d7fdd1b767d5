"""Typed dataclasses describing catalog snapshots and their ordering metadata."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ


class SnapshotError(ValueError):
    """Raised when a catalog snapshot is invalid or incomplete."""


EntityStatus = typ.Literal["active", "inactive"]


@dc.dataclass(frozen=True, slots=True)
class Product:
    """A product as stored in the catalog-management database."""

    id: str
    title: str
    description: str = ""
    category: str | None = None
    brand: str | None = None
    image: str | None = None
    price: float | None = None
    is_best_seller: bool = False
    status: EntityStatus = "active"
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


@dc.dataclass(frozen=True, slots=True)
class Category:
    """A product category as stored in the catalog-management database."""

    id: str
    name: str
    description: str = ""
    image: str | None = None
    status: EntityStatus = "active"
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


@dc.dataclass(frozen=True, slots=True)
class ProductOrder:
    """Placement of one product inside a catalog category.

    Attributes
    ----------
    product_id : str
        Identifier of the referenced :class:`Product`.
    order : int
        Sort key within the category; lower values render first.
    included : bool
        Whether the product appears in the generated document at all.
    product_title : str or None
        Cached title kept by the editor for display; never rendered.
    """

    product_id: str
    order: int
    included: bool = True
    product_title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class CategoryOrder:
    """Placement of one category inside the catalog.

    Attributes
    ----------
    category_id : str
        Identifier of the referenced :class:`Category`.
    order : int
        Sort key within the catalog; lower values render first.
    start_new_page : bool
        Force a page break before the category unless the cursor is already
        at the top of a fresh page.
    product_orders : tuple[ProductOrder, ...]
        Products configured for the category, in stored order.
    category_name : str or None
        Cached name kept by the editor for display; never rendered.
    """

    category_id: str
    order: int
    start_new_page: bool = False
    product_orders: tuple[ProductOrder, ...] = ()
    category_name: str | None = None


@dc.dataclass(frozen=True, slots=True)
class CatalogConfiguration:
    """The configured PDF catalog and its ordering metadata."""

    name: str
    version: str
    id: str | None = None
    is_active: bool = True
    cover_image_ref: str | None = None
    back_image_ref: str | None = None
    category_orders: tuple[CategoryOrder, ...] = ()
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


@dc.dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Read-only view of everything the generator needs for one run."""

    catalog: CatalogConfiguration
    products: tuple[Product, ...] = ()
    categories: tuple[Category, ...] = ()


__all__ = [
    "CatalogConfiguration",
    "CatalogSnapshot",
    "Category",
    "CategoryOrder",
    "EntityStatus",
    "Product",
    "ProductOrder",
    "SnapshotError",
]
