"""Repository for one MySQL table.

Usage:
    >>> users = MySQLRepository(provider, DataclassFactory(User), "users")
    >>> user = await users.create({"name": "Ada"})
    >>> user.get_id()
    42
    >>> (await users.get_one(42)).name
    'Ada'
    >>> await users.get_one(999) is None
    True
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from tramway_mysql.logging import get_logger
from tramway_mysql.protocols import Entity, EntityCollection, EntityFactory
from tramway_mysql.providers.mysql import MySQLProvider
from tramway_mysql.repositories.base import Repository

logger = get_logger(__name__)


class MySQLRepository(Repository):
    """
    Maps rows of ``table_name`` to entities built by ``factory``.

    Parameters:
        provider: Provider executing the SQL.
        factory: Builds entities and collections from rows.
        table_name: The one table this repository reads and writes.
    """

    def __init__(self, provider: MySQLProvider, factory: EntityFactory, table_name: str) -> None:
        super().__init__(provider, factory)
        self.table_name = table_name

    async def exists(self, id: Any) -> bool:
        rows = await self.provider.has(id, self.table_name)
        return bool(rows)

    async def get_one(self, id: Any) -> Entity | None:
        """The entity with identifier *id*, or ``None`` when absent."""
        rows = await self.provider.get_one(id, self.table_name)
        if not rows:
            return None
        return self.factory.create(rows[0])

    async def get(self) -> EntityCollection:
        rows = await self.provider.get(self.table_name)
        return self.factory.create_collection(rows)

    async def find(self, conditions: Mapping[str, Any] | None) -> EntityCollection:
        rows = await self.provider.find(conditions, self.table_name)
        return self.factory.create_collection(rows)

    async def get_many(self, ids: Sequence[Any]) -> EntityCollection:
        rows = await self.provider.get_many(ids, self.table_name)
        return self.factory.create_collection(rows)

    async def count(self, conditions: Mapping[str, Any] | None = None) -> Any:
        """Raw count row set, e.g. ``[{"COUNT(1)": 3}]``."""
        return await self.provider.count(conditions, self.table_name)

    async def create(self, entity: Any) -> Entity:
        """Insert *entity* and assign the generated id back onto it."""
        entity = self.factory.create(entity)
        result = await self.provider.create(entity.to_dict(), self.table_name)
        entity.set_id(result.insert_id)
        logger.debug("entity_created", table=self.table_name, id=result.insert_id)
        return entity

    async def create_many(self, items: Sequence[Any]) -> Any:
        """Insert all *items* in one transaction; returns the raw write results."""
        entities = [self.factory.create(item) for item in items]
        return await self.provider.create_many(
            [entity.to_dict() for entity in entities], self.table_name
        )

    async def update(self, entity: Any) -> Any:
        entity = self.factory.create(entity)
        return await self.provider.update(entity.get_id(), entity.to_dict(), self.table_name)

    async def delete(self, id: Any) -> Any:
        return await self.provider.delete(id, self.table_name)


__all__ = [
    "MySQLRepository",
]
