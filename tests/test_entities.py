"""Tests for BaseEntity, Collection and DataclassFactory."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from conftest import User
from tramway_mysql.entities import BaseEntity, Collection, DataclassFactory
from tramway_mysql.errors import EntityError
from tramway_mysql.protocols import Entity, EntityCollection, EntityFactory


class TestBaseEntity:
    def test_id_accessors(self) -> None:
        user = User(name="Ada")
        assert user.get_id() is None

        user.set_id(9)

        assert user.get_id() == 9
        assert user.id == 9

    def test_to_dict_includes_all_fields(self) -> None:
        assert User(id=1, name="Ada").to_dict() == {"id": 1, "name": "Ada", "email": None}

    def test_satisfies_entity_protocol(self) -> None:
        assert isinstance(User(), Entity)


class TestCollection:
    def test_add_and_ids(self) -> None:
        collection = Collection([User(id=1)])
        collection.add(User(id=2))

        assert len(collection) == 2
        assert collection.get_ids() == [1, 2]
        assert collection[1].id == 2
        assert isinstance(collection, EntityCollection)

    def test_empty_is_falsy(self) -> None:
        assert not Collection()
        assert Collection().to_list() == []


class TestDataclassFactory:
    def test_create_from_row_ignores_unknown_columns(self, user_factory) -> None:
        user = user_factory.create({"id": 1, "name": "Ada", "created_at": "2024-01-01"})

        assert user == User(id=1, name="Ada")

    def test_create_passes_entities_through(self, user_factory) -> None:
        user = User(name="Ada")

        assert user_factory.create(user) is user

    def test_create_rejects_other_input(self, user_factory) -> None:
        with pytest.raises(EntityError) as excinfo:
            user_factory.create("Ada")

        assert excinfo.value.context == {"entity": "User"}

    def test_create_collection(self, user_factory) -> None:
        collection = user_factory.create_collection([{"id": 1}, {"id": 2}])

        assert isinstance(collection, Collection)
        assert collection.get_ids() == [1, 2]

    def test_non_init_fields_are_not_filled(self) -> None:
        @dataclass
        class Audited(BaseEntity):
            revision: int = field(default=0, init=False)

        entity = DataclassFactory(Audited).create({"id": 1, "revision": 7})

        assert entity.revision == 0

    def test_requires_dataclass_type(self) -> None:
        class Plain:
            pass

        with pytest.raises(EntityError):
            DataclassFactory(Plain)

        with pytest.raises(EntityError):
            DataclassFactory(User())

    def test_satisfies_factory_protocol(self, user_factory) -> None:
        assert isinstance(user_factory, EntityFactory)
