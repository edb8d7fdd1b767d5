"""Entity repositories backed by a loaded catalog snapshot.

Each entity type gets its own :class:`SnapshotRepository` instance exposing the
same small capability set the catalog database client offers (list, fetch by
id, create, update, delete, bulk create). The layout engine only reads
through them; the write operations let tools and tests assemble snapshots
without reaching for the live database.
"""

from __future__ import annotations

import dataclasses as dc
import itertools
import typing as typ

from catalog_pdf.config.models import Category, Product

EntityT = typ.TypeVar("EntityT", Product, Category)


class Repository(typ.Protocol[EntityT]):
    """Capabilities shared by every entity store."""

    def get_all(self) -> list[EntityT]: ...

    def get_by_id(self, entity_id: str) -> EntityT | None: ...

    def create(self, entity: EntityT) -> str: ...

    def update(self, entity_id: str, **changes: typ.Any) -> EntityT: ...

    def delete(self, entity_id: str) -> None: ...

    def bulk_create(self, entities: typ.Iterable[EntityT]) -> list[str]: ...


class SnapshotRepository(typ.Generic[EntityT]):
    """In-memory store for one entity type, keyed by ``id``."""

    def __init__(self, kind: str, entities: typ.Iterable[EntityT] = ()) -> None:
        self.kind = kind
        self._items: dict[str, EntityT] = {}
        self._ids = itertools.count(1)
        self.bulk_create(entities)

    def __len__(self) -> int:
        return len(self._items)

    def get_all(self) -> list[EntityT]:
        """Return every stored entity in insertion order."""
        return list(self._items.values())

    def get_by_id(self, entity_id: str) -> EntityT | None:
        return self._items.get(entity_id)

    def create(self, entity: EntityT) -> str:
        """Store ``entity``, assigning an id when it has none.

        Raises
        ------
        ValueError
            If an entity with the same id is already stored.
        """
        if not entity.id:
            entity = dc.replace(entity, id=self._next_id())
        if entity.id in self._items:
            msg = f"{self.kind} '{entity.id}' already exists"
            raise ValueError(msg)
        self._items[entity.id] = entity
        return entity.id

    def update(self, entity_id: str, **changes: typ.Any) -> EntityT:
        """Replace fields on a stored entity and return the new version."""
        current = self._items.get(entity_id)
        if current is None:
            msg = f"Unknown {self.kind} '{entity_id}'"
            raise KeyError(msg)
        if changes.get("id", entity_id) != entity_id:
            msg = f"Cannot change the id of {self.kind} '{entity_id}'"
            raise ValueError(msg)
        updated = dc.replace(current, **changes)
        self._items[entity_id] = updated
        return updated

    def delete(self, entity_id: str) -> None:
        """Remove an entity; unknown ids are ignored like the database does."""
        self._items.pop(entity_id, None)

    def bulk_create(self, entities: typ.Iterable[EntityT]) -> list[str]:
        """Store several entities, failing before any write on duplicates."""
        batch = list(entities)
        seen: set[str] = set()
        for entity in batch:
            if entity.id and (entity.id in self._items or entity.id in seen):
                msg = f"{self.kind} '{entity.id}' already exists"
                raise ValueError(msg)
            if entity.id:
                seen.add(entity.id)
        return [self.create(entity) for entity in batch]

    def _next_id(self) -> str:
        while True:
            candidate = f"{self.kind}-{next(self._ids)}"
            if candidate not in self._items:
                return candidate


def product_repository(products: typ.Iterable[Product] = ()) -> SnapshotRepository[Product]:
    """Return a repository holding ``products``."""
    return SnapshotRepository("product", products)


def category_repository(
    categories: typ.Iterable[Category] = (),
) -> SnapshotRepository[Category]:
    """Return a repository holding ``categories``."""
    return SnapshotRepository("category", categories)


__all__ = [
    "Repository",
    "SnapshotRepository",
    "category_repository",
    "product_repository",
]
