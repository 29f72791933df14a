"""Default entity, collection and factory implementations.

Domain code declares entities as dataclasses extending :class:`BaseEntity`
and builds a :class:`DataclassFactory` for them::

    @dataclass
    class User(BaseEntity):
        name: str = ""
        email: str | None = None

    factory = DataclassFactory(User)
    user = factory.create({"id": 3, "name": "Ada", "extra": "dropped"})

The factory ignores row columns the dataclass does not declare, so a
``SELECT *`` against a wider table still maps cleanly.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tramway_mysql.errors import EntityError

E = TypeVar("E", bound="BaseEntity")


@dataclass
class BaseEntity:
    """Dataclass base for entities keyed by an ``id`` column."""

    id: Any = None

    def get_id(self) -> Any:
        return self.id

    def set_id(self, value: Any) -> None:
        self.id = value

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}


class Collection(Generic[E]):
    """Ordered aggregate of entities."""

    def __init__(self, items: Iterable[E] = ()):
        self._items: list[E] = list(items)

    def add(self, item: E) -> None:
        self._items.append(item)

    def get_ids(self) -> list[Any]:
        return [item.get_id() for item in self._items]

    def to_list(self) -> list[E]:
        return list(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> E:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"


class DataclassFactory(Generic[E]):
    """Factory building ``entity_cls`` instances from rows."""

    def __init__(self, entity_cls: type[E]):
        if not (dataclasses.is_dataclass(entity_cls) and isinstance(entity_cls, type)):
            raise EntityError(f"{entity_cls!r} is not a dataclass type")
        self.entity_cls = entity_cls
        self._field_names = frozenset(f.name for f in dataclasses.fields(entity_cls) if f.init)

    def create(self, data: Mapping[str, Any] | E) -> E:
        """Return *data* unchanged if it is already an entity, else build one."""
        if isinstance(data, self.entity_cls):
            return data
        if isinstance(data, Mapping):
            kwargs = {key: value for key, value in data.items() if key in self._field_names}
            return self.entity_cls(**kwargs)
        raise EntityError(
            f"Cannot create {self.entity_cls.__name__} from {type(data).__name__}",
            context={"entity": self.entity_cls.__name__},
        )

    def create_collection(self, rows: Iterable[Mapping[str, Any] | E]) -> Collection[E]:
        return Collection(self.create(row) for row in rows)


__all__ = [
    "BaseEntity",
    "Collection",
    "DataclassFactory",
]
