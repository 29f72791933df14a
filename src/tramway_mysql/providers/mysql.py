"""MySQL provider.

Translates table-scoped CRUD calls into parameterized SQL, runs them on a
single :class:`~tramway_mysql.providers.connection.ConnectionHandle` and
returns raw results:

- SELECT statements return a row set (``list[dict]``)
- INSERT/UPDATE/DELETE return a :class:`WriteResult` (``insert_id``,
  ``affected_rows``)

Connection lifecycle::

    DISCONNECTED ──connect()──► CONNECTED ──reset error──► CONNECTED (new handle)
         ▲                          │
         └──close_connection()──────┤
                                    └──other connection error──► FAILED (re-raised)

A connection reset (server gone / lost connection) swaps in a fresh handle;
the statement that hit the reset still fails with the driver error and is
not retried.  Any other connection-level error marks the provider ``FAILED``
and is re-raised unchanged.  SQL errors pass through untouched.

Examples:
    >>> provider = MySQLProvider(MySQLSettings().to_params())
    >>> rows = await provider.find({"status": "active"}, "users")
    >>> result = await provider.create({"name": "Ada"}, "users")
    >>> result.insert_id
    42

Tags:
    mysql, provider, crud, reconnect, transaction, tramway-mysql
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

import mysql.connector

from tramway_mysql.errors import (
    DatabaseError,
    EntityError,
    TransactionError,
    is_connection_error,
    is_connection_reset,
)
from tramway_mysql.formatting import Statement, format_query
from tramway_mysql.logging import get_logger
from tramway_mysql.providers.base import Provider
from tramway_mysql.providers.connection import (
    ConnectionHandle,
    ConnectionState,
    QueryResult,
    WriteResult,
    driver_options,
)

logger = get_logger(__name__)

_DRIVER_ERRORS = (mysql.connector.Error, ConnectionError)


class MySQLProvider(Provider):
    """
    Provider backed by one ``mysql.connector`` connection.

    Parameters:
        params: Connection parameters (``host``, ``port``, ``username``,
                ``password``, ``database`` plus passthrough driver options).
                Kept on the instance for reconnection.
    """

    def __init__(self, params: Mapping[str, Any] | None = None):
        super().__init__()
        self.params: dict[str, Any] = dict(params or {})
        self._connection: ConnectionHandle | None = None
        self._state = ConnectionState.DISCONNECTED

        self.connect(self.params)

    @property
    def connection(self) -> ConnectionHandle | None:
        """The live connection handle (``None`` once closed)."""
        return self._connection

    @property
    def state(self) -> ConnectionState:
        return self._state

    # -- Connection lifecycle ----------------------------------------------

    def connect(self, params: Mapping[str, Any] | None = None) -> ConnectionHandle:
        """Open a new connection handle and swap it in.

        The previous handle, if any, is discarded; statements still queued on
        it are not moved to the new one.
        """
        if params is None:
            params = self.params

        stale = self._connection
        handle = ConnectionHandle(driver_options(dict(params)))
        self._connection = handle
        self._state = ConnectionState.CONNECTED

        if stale is not None:
            stale.discard()

        logger.info(
            "connect",
            host=params.get("host"),
            port=params.get("port"),
            database=params.get("database"),
            handle=handle.id,
        )
        return handle

    async def close_connection(self) -> None:
        """Close the current connection; the provider becomes DISCONNECTED."""
        handle = self._connection
        if handle is None:
            return

        self._connection = None
        self._state = ConnectionState.DISCONNECTED
        await handle.close()
        logger.info("connection_closed", handle=handle.id)

    async def __aenter__(self) -> MySQLProvider:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close_connection()

    def _require_connection(self) -> ConnectionHandle:
        if self._connection is None:
            raise DatabaseError("Connection is closed; call connect() first")
        return self._connection

    def _on_driver_error(self, error: BaseException, handle: ConnectionHandle) -> None:
        """React to a driver error raised on *handle*.

        Only the current handle triggers a state change: errors surfacing
        from an already-replaced handle are just propagated by the caller.
        """
        if handle is not self._connection:
            return

        if is_connection_reset(error):
            logger.warning(
                "connection_reset",
                errno=getattr(error, "errno", None),
                error=str(error),
                handle=handle.id,
            )
            self.connect()
        elif is_connection_error(error):
            self._state = ConnectionState.FAILED
            logger.critical(
                "connection_fatal",
                errno=getattr(error, "errno", None),
                error=str(error),
                handle=handle.id,
            )

    # -- Execution ---------------------------------------------------------

    async def execute(self, statement: Statement) -> QueryResult:
        """Run one formatted statement on the current connection."""
        handle = self._require_connection()
        logger.debug("execute", sql=statement.sql, handle=handle.id)
        try:
            return await handle.run(statement)
        except _DRIVER_ERRORS as exc:
            self._on_driver_error(exc, handle)
            raise

    async def execute_transaction(self, statements: Sequence[Statement]) -> list[QueryResult]:
        """Run *statements* atomically on the current connection.

        All statements are issued concurrently against the one connection and
        joined before the commit.  If any statement (or the commit) fails the
        transaction is rolled back and the first failure is raised.  A failed
        rollback raises :class:`TransactionError` instead.
        """
        handle = self._require_connection()

        try:
            await handle.begin()
        except _DRIVER_ERRORS as exc:
            self._on_driver_error(exc, handle)
            raise

        results = await asyncio.gather(
            *(handle.run(statement) for statement in statements),
            return_exceptions=True,
        )
        failure = next((r for r in results if isinstance(r, BaseException)), None)

        if failure is None:
            try:
                await handle.commit()
            except _DRIVER_ERRORS as exc:
                failure = exc
            else:
                return list(results)

        await self._rollback(handle, failure, len(statements))
        if isinstance(failure, _DRIVER_ERRORS):
            self._on_driver_error(failure, handle)
        raise failure

    async def _rollback(self, handle: ConnectionHandle, error: BaseException, size: int) -> None:
        if handle.closed:
            # The server discards the open transaction with the session.
            logger.warning(
                "transaction_abandoned", error=str(error), statements=size, handle=handle.id
            )
            return

        try:
            await handle.rollback()
        except _DRIVER_ERRORS as rollback_error:
            self._on_driver_error(rollback_error, handle)
            raise TransactionError(
                "Rollback failed after a statement error",
                statement_error=error,
                cause=rollback_error,
                context={"statements": size},
            ) from rollback_error

        logger.warning("transaction_rolled_back", error=str(error), statements=size, handle=handle.id)

    # -- Read operations ---------------------------------------------------

    async def get_one(self, id: Any, table_name: str) -> QueryResult:
        return await self.execute(format_query("SELECT * FROM ?? WHERE id = ?", [table_name, id]))

    async def get_many(self, ids: Sequence[Any], table_name: str) -> QueryResult:
        return await self.execute(
            format_query("SELECT * FROM ?? WHERE id IN (?)", [table_name, list(ids)])
        )

    async def get(self, table_name: str) -> QueryResult:
        return await self.execute(format_query("SELECT * FROM ??", [table_name]))

    async def find(self, conditions: Mapping[str, Any] | None, table_name: str) -> QueryResult:
        return await self.execute(self._filtered("SELECT * FROM ??", conditions, table_name))

    async def has(self, id: Any, table_name: str) -> QueryResult:
        return await self.get_one(id, table_name)

    async def has_these(self, ids: Sequence[Any], table_name: str) -> QueryResult:
        return await self.get_many(ids, table_name)

    async def count(self, conditions: Mapping[str, Any] | None, table_name: str) -> QueryResult:
        return await self.execute(self._filtered("SELECT COUNT(1) FROM ??", conditions, table_name))

    # -- Write operations --------------------------------------------------

    async def create(self, item: Any, table_name: str) -> QueryResult:
        return await self.execute(self._insert(item, table_name))

    async def create_many(self, items: Sequence[Any], table_name: str) -> list[QueryResult]:
        """Insert every item inside one transaction."""
        statements = [self._insert(item, table_name) for item in items]
        return await self.execute_transaction(statements)

    async def update(self, id: Any, item: Any, table_name: str) -> QueryResult:
        """Update row *id*; an ``id`` key in *item* is left out of the SET clause."""
        fields = self._fields(item)
        fields.pop("id", None)
        return await self.execute(
            format_query("UPDATE ?? SET ? WHERE id = ?", [table_name, fields, id])
        )

    async def delete(self, id: Any, table_name: str) -> QueryResult:
        return await self.execute(format_query("DELETE FROM ?? WHERE id = ?", [table_name, id]))

    async def delete_many(self, ids: Sequence[Any], table_name: str) -> QueryResult:
        return await self.execute(
            format_query("DELETE FROM ?? WHERE id IN (?)", [table_name, list(ids)])
        )

    async def query(self, query: str, values: Any = None) -> QueryResult:
        """Run a caller-supplied template.

        Recommended to use the table-scoped operations first; this is an
        escape hatch for SQL they cannot express.
        """
        return await self.execute(format_query(query, values))

    # -- Condition helpers -------------------------------------------------

    def prepare_conditions(self, conditions: Mapping[str, Any] | None) -> list[tuple[str, Any]]:
        """``{k: v, ...}`` -> ``[(k, v), ...]`` in the mapping's order."""
        if not conditions:
            return []
        return [(key, value) for key, value in conditions.items()]

    def prepare_where(self, conditions: Sequence[tuple[str, Any]]) -> str:
        """One ``?? = ?`` conjunct per condition, joined with AND."""
        return " AND ".join("?? = ?" for _ in conditions)

    def flatten_conditions(self, conditions: Sequence[tuple[str, Any]]) -> list[Any]:
        """``[(k1, v1), (k2, v2)]`` -> ``[k1, v1, k2, v2]``."""
        return [part for pair in conditions for part in pair]

    def _filtered(
        self,
        template: str,
        conditions: Mapping[str, Any] | None,
        table_name: str,
    ) -> Statement:
        pairs = self.prepare_conditions(conditions)
        if pairs:
            template = f"{template} WHERE {self.prepare_where(pairs)}"
        return format_query(template, [table_name, *self.flatten_conditions(pairs)])

    def _insert(self, item: Any, table_name: str) -> Statement:
        return format_query("INSERT INTO ?? SET ?", [table_name, self._fields(item)])

    @staticmethod
    def _fields(item: Any) -> dict[str, Any]:
        if hasattr(item, "to_dict"):
            return dict(item.to_dict())
        if isinstance(item, Mapping):
            return dict(item)
        raise EntityError(f"Expected a mapping or entity, got {type(item).__name__}")


__all__ = [
    "MySQLProvider",
    "WriteResult",
]
