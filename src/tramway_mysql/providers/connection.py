"""Connection handle wrapping one ``mysql.connector`` connection.

``mysql.connector`` is a blocking client.  A :class:`ConnectionHandle` owns
one driver connection plus a single-worker executor and runs every driver
call on that worker, so coroutines awaiting a query never block the event
loop and commands reach the server in submission order (one at a time, the
way a single MySQL session requires).

The driver connection is opened lazily by the first command, on the worker
thread.  A handle is never repaired in place: the provider replaces it with a
fresh one on reconnect and discards the stale one.  Commands already queued
on a discarded handle still run; new ones fail with ``OperationalError``
(``CR_SERVER_LOST``) instead of reaching the server.

Architecture::

    MySQLProvider ──owns──► ConnectionHandle
                              │
                              ├── _executor  (ThreadPoolExecutor, 1 worker)
                              └── _conn      (mysql.connector connection)

    await handle.run(statement) ─► worker: cursor.execute(sql, params)
                                          ─► list[dict] | WriteResult
"""

from __future__ import annotations

import asyncio
import functools
import itertools
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

import mysql.connector
from mysql.connector import errorcode
from mysql.connector import errors as driver_errors

from tramway_mysql.formatting import Statement
from tramway_mysql.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_handle_ids = itertools.count(1)


class ConnectionState(str, Enum):
    """Lifecycle of a provider's connection."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    FAILED = "failed"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a statement that returns no rows (INSERT/UPDATE/DELETE)."""

    insert_id: int | None = None
    affected_rows: int = 0


QueryResult = list[dict[str, Any]] | WriteResult


def driver_options(params: dict[str, Any]) -> dict[str, Any]:
    """Translate connection parameters into ``mysql.connector.connect`` kwargs.

    ``username`` becomes ``user``; ``dialect`` is dropped; everything else is
    passed through.  ``autocommit`` defaults to ``True``.
    """
    options = dict(params)
    options.pop("dialect", None)
    if "username" in options:
        options["user"] = options.pop("username")
    options.setdefault("autocommit", True)
    return {key: value for key, value in options.items() if value is not None}


class ConnectionHandle:
    """One driver connection and the worker thread that talks to it."""

    def __init__(self, options: dict[str, Any]):
        self.id = next(_handle_ids)
        self._options = dict(options)
        self._conn: Any = None
        self._closed = False
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"tramway-mysql-{self.id}",
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def raw(self) -> Any:
        """The underlying driver connection (``None`` until first use)."""
        return self._conn

    # -- Worker-side (blocking) --------------------------------------------

    def _connection(self) -> Any:
        if self._conn is None:
            self._conn = mysql.connector.connect(**self._options)
        return self._conn

    def _execute(self, statement: Statement) -> QueryResult:
        cursor = self._connection().cursor(dictionary=True)
        try:
            cursor.execute(statement.sql, statement.params or ())
            if cursor.with_rows:
                return [dict(row) for row in cursor.fetchall()]
            return WriteResult(insert_id=cursor.lastrowid, affected_rows=cursor.rowcount)
        finally:
            cursor.close()

    def _begin(self) -> None:
        self._connection().start_transaction()

    def _commit(self) -> None:
        self._connection().commit()

    def _rollback(self) -> None:
        self._connection().rollback()

    def _close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None

    # -- Loop-side (async) -------------------------------------------------

    async def _dispatch(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(fn, *args))

    async def _submit(self, fn: Callable[..., T], *args: Any) -> T:
        # A replaced handle fails new work the way a dropped session would.
        if self._closed:
            raise driver_errors.OperationalError(
                msg=f"Connection handle {self.id} is closed",
                errno=errorcode.CR_SERVER_LOST,
            )
        return await self._dispatch(fn, *args)

    async def run(self, statement: Statement) -> QueryResult:
        """Execute *statement* and return its rows or write result."""
        return await self._submit(self._execute, statement)

    async def begin(self) -> None:
        await self._submit(self._begin)

    async def commit(self) -> None:
        await self._submit(self._commit)

    async def rollback(self) -> None:
        await self._submit(self._rollback)

    async def close(self) -> None:
        """Close the driver connection after queued commands finish."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._dispatch(self._close)
        finally:
            self._executor.shutdown(wait=False)

    def discard(self) -> None:
        """Close without waiting; used when a handle is replaced."""
        if self._closed:
            return
        self._closed = True
        self._executor.submit(self._discard)
        self._executor.shutdown(wait=False)

    def _discard(self) -> None:
        try:
            self._close()
        except mysql.connector.Error as exc:
            logger.debug("stale_connection_close_failed", handle=self.id, error=str(exc))

    def __repr__(self) -> str:
        return f"ConnectionHandle(id={self.id}, closed={self._closed})"


__all__ = [
    "ConnectionState",
    "ConnectionHandle",
    "QueryResult",
    "WriteResult",
    "driver_options",
]
