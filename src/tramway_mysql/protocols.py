"""
Entity, factory and collection protocols.

Repositories never inspect domain objects directly: they go through these
structural contracts.  Any object with the right shape works, so domain code
can bring its own entity classes or use the defaults in
:mod:`tramway_mysql.entities`.

Architecture:
    ::

        Entity              get_id() / set_id(value) / to_dict()
        EntityCollection    ordered, iterable, sized aggregate of entities
        EntityFactory       create(data) -> Entity
                            create_collection(rows) -> EntityCollection

Tags:
    protocol, entity, factory, collection, tramway-mysql
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Entity(Protocol):
    """A domain object with an identifier and a field-map form."""

    def get_id(self) -> Any:
        """Return the identifier (``None`` before the first insert)."""
        ...

    def set_id(self, value: Any) -> None:
        """Assign the identifier, e.g. the driver-generated insert id."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Column name -> value map used for INSERT/UPDATE payloads."""
        ...


@runtime_checkable
class EntityCollection(Protocol):
    """Ordered aggregate of entities."""

    def __iter__(self) -> Iterator[Any]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class EntityFactory(Protocol):
    """Builds entities from raw rows (or normalizes existing entities)."""

    def create(self, data: Mapping[str, Any] | Entity) -> Entity:
        """Build an entity from a row, or return *data* if it already is one."""
        ...

    def create_collection(self, rows: Iterable[Mapping[str, Any]]) -> EntityCollection:
        """Build a collection from a row set."""
        ...


__all__ = [
    "Entity",
    "EntityCollection",
    "EntityFactory",
]
