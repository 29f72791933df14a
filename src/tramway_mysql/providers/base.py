"""Abstract provider contract.

A provider owns a connection and exposes table-scoped CRUD operations that
return **raw** results (row sets and write results).  It knows nothing about
entities; mapping rows to domain objects is the repository's job.

Every data operation is a coroutine taking the table name as its last
argument, so one provider instance serves any number of repositories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class Provider(ABC):
    """Interface every storage provider implements."""

    @abstractmethod
    async def get_one(self, id: Any, table_name: str) -> Any:
        """Rows whose id equals *id* (zero or one)."""
        ...

    @abstractmethod
    async def get_many(self, ids: Sequence[Any], table_name: str) -> Any:
        """Rows whose id is in *ids*."""
        ...

    @abstractmethod
    async def get(self, table_name: str) -> Any:
        """Every row of the table."""
        ...

    @abstractmethod
    async def find(self, conditions: Mapping[str, Any] | None, table_name: str) -> Any:
        """Rows matching all equality *conditions*; no conditions matches all."""
        ...

    @abstractmethod
    async def has(self, id: Any, table_name: str) -> Any:
        ...

    @abstractmethod
    async def has_these(self, ids: Sequence[Any], table_name: str) -> Any:
        ...

    @abstractmethod
    async def count(self, conditions: Mapping[str, Any] | None, table_name: str) -> Any:
        ...

    @abstractmethod
    async def create(self, item: Any, table_name: str) -> Any:
        ...

    @abstractmethod
    async def create_many(self, items: Sequence[Any], table_name: str) -> Any:
        ...

    @abstractmethod
    async def update(self, id: Any, item: Any, table_name: str) -> Any:
        ...

    @abstractmethod
    async def delete(self, id: Any, table_name: str) -> Any:
        ...

    @abstractmethod
    async def delete_many(self, ids: Sequence[Any], table_name: str) -> Any:
        ...

    @abstractmethod
    async def query(self, query: str, values: Any = None) -> Any:
        """Run a caller-supplied template. Prefer the operations above."""
        ...


__all__ = [
    "Provider",
]
