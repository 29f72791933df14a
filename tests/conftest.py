"""
Shared pytest fixtures for tramway-mysql tests.

This module provides:
- ``FakeServer``: a scriptable stand-in for a MySQL server, installed in
  place of ``mysql.connector.connect`` so no live database is needed
- ``server`` / ``provider`` fixtures wired to it
- a ``User`` entity and its factory

Scripting the fake server::

    server.on("SELECT", [{"id": 1, "name": "Ada"}])      # rows
    server.on("INSERT", Ok(insert_id=7))                 # write result
    server.on("DELETE", ProgrammingError(msg="denied"))  # raised
    server.on("UPDATE", lambda sql, params: Ok(affected_rows=len(params)))

The latest matching handler wins.  Unmatched SELECTs return no rows, other
unmatched statements return ``Ok()``.
"""

from __future__ import annotations

import threading
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

import mysql.connector
import pytest
import pytest_asyncio

from tramway_mysql.entities import BaseEntity, DataclassFactory
from tramway_mysql.providers.mysql import MySQLProvider

CONNECTION_PARAMS = {
    "host": "db.test",
    "port": 3306,
    "username": "app",
    "password": "secret",
    "database": "app",
}


@dataclass
class Ok:
    """Scripted result of a statement without a result set."""

    insert_id: int | None = None
    affected_rows: int = 1


@dataclass
class User(BaseEntity):
    name: str = ""
    email: str | None = None


class FakeCursor:
    def __init__(self, connection: FakeConnection):
        self._connection = connection
        self._rows: list[dict[str, Any]] = []
        self.with_rows = False
        self.lastrowid: int | None = None
        self.rowcount = -1
        self.closed = False

    def execute(self, sql: str, params: tuple = ()) -> None:
        outcome = self._connection.server.respond(self._connection, sql, tuple(params))
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, list):
            self.with_rows = True
            self._rows = outcome
            self.rowcount = len(outcome)
        else:
            self.with_rows = False
            self.lastrowid = outcome.insert_id
            self.rowcount = outcome.affected_rows

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    def __init__(self, server: FakeServer, options: dict[str, Any]):
        self.server = server
        self.options = options
        self.closed = False

    def cursor(self, dictionary: bool = False) -> FakeCursor:
        assert dictionary, "provider must request dict rows"
        return FakeCursor(self)

    def start_transaction(self) -> None:
        self.server.control(self, "BEGIN")

    def commit(self) -> None:
        self.server.control(self, "COMMIT")

    def rollback(self) -> None:
        self.server.control(self, "ROLLBACK")

    def close(self) -> None:
        self.closed = True


class FakeServer:
    """Records every statement and answers with scripted responses."""

    def __init__(self) -> None:
        self.connections: list[FakeConnection] = []
        self.statements: list[tuple[str, tuple]] = []
        self.events: list[str] = []
        self.connect_errors: list[BaseException] = []
        self.control_errors: dict[str, BaseException] = {}
        self._handlers: list[tuple[str, Any]] = []
        self._lock = threading.Lock()

    def connect(self, **options: Any) -> FakeConnection:
        if self.connect_errors:
            raise self.connect_errors.pop(0)
        connection = FakeConnection(self, options)
        self.connections.append(connection)
        return connection

    def on(self, prefix: str, response: Any) -> None:
        self._handlers.append((prefix, response))

    def respond(self, connection: FakeConnection, sql: str, params: tuple) -> Any:
        with self._lock:
            self.statements.append((sql, params))
            self.events.append(sql)
        for prefix, response in reversed(self._handlers):
            if sql.startswith(prefix):
                if callable(response) and not isinstance(response, BaseException):
                    return response(sql, params)
                return response
        if sql.startswith("SELECT"):
            return []
        return Ok()

    def control(self, connection: FakeConnection, command: str) -> None:
        with self._lock:
            self.events.append(command)
        if command in self.control_errors:
            raise self.control_errors.pop(command)

    @property
    def last(self) -> tuple[str, tuple]:
        return self.statements[-1]


def lost_connection() -> mysql.connector.errors.OperationalError:
    return mysql.connector.errors.OperationalError(
        msg="Lost connection to MySQL server during query", errno=2013
    )


@pytest.fixture
def server(monkeypatch: pytest.MonkeyPatch) -> FakeServer:
    """Fake MySQL server installed as ``mysql.connector.connect``."""
    fake = FakeServer()
    monkeypatch.setattr(mysql.connector, "connect", fake.connect)
    return fake


@pytest_asyncio.fixture
async def provider(server: FakeServer) -> AsyncIterator[MySQLProvider]:
    provider = MySQLProvider(CONNECTION_PARAMS)
    yield provider
    await provider.close_connection()


@pytest.fixture
def user_factory() -> DataclassFactory[User]:
    return DataclassFactory(User)


@pytest.fixture
def rows_by_id() -> Callable[[dict[int, dict[str, Any]]], Callable[[str, tuple], Any]]:
    """Build a SELECT handler answering ``WHERE id = %s`` lookups from a dict."""

    def build(table: dict[int, dict[str, Any]]) -> Callable[[str, tuple], Any]:
        def handler(sql: str, params: tuple) -> list[dict[str, Any]]:
            return [table[p] for p in params if p in table]

        return handler

    return build
