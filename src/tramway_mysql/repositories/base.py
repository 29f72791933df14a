"""Abstract repository contract.

A repository pairs a :class:`~tramway_mysql.providers.base.Provider` with an
:class:`~tramway_mysql.protocols.EntityFactory`.  It speaks entities to its
callers and field maps to the provider, and never builds SQL itself.

Architecture::

    ┌──────────────────────────────────────────────────────────────┐
    │                         Repository                           │
    │                                                              │
    │   provider: Provider        ← raw rows / write results       │
    │   factory:  EntityFactory   ← rows → entities / collections  │
    │                                                              │
    │   exists · get_one · get · find · get_many · count           │
    │   create · create_many · update · delete                     │
    └──────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from tramway_mysql.protocols import Entity, EntityCollection, EntityFactory
from tramway_mysql.providers.base import Provider


class Repository(ABC):
    """Entity-facing data access over a provider."""

    def __init__(self, provider: Provider, factory: EntityFactory) -> None:
        self.provider = provider
        self.factory = factory

    @abstractmethod
    async def exists(self, id: Any) -> bool: ...

    @abstractmethod
    async def get_one(self, id: Any) -> Entity | None: ...

    @abstractmethod
    async def get(self) -> EntityCollection: ...

    @abstractmethod
    async def find(self, conditions: Mapping[str, Any] | None) -> EntityCollection: ...

    @abstractmethod
    async def get_many(self, ids: Sequence[Any]) -> EntityCollection: ...

    @abstractmethod
    async def count(self, conditions: Mapping[str, Any] | None = None) -> Any: ...

    @abstractmethod
    async def create(self, entity: Any) -> Entity: ...

    @abstractmethod
    async def create_many(self, items: Sequence[Any]) -> Any: ...

    @abstractmethod
    async def update(self, entity: Any) -> Any: ...

    @abstractmethod
    async def delete(self, id: Any) -> Any: ...


__all__ = [
    "Repository",
]
