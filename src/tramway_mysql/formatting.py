"""Safe query formatting for MySQL templates.

Templates use two placeholder kinds:

- ``??`` -- an **identifier** (table or column).  Rendered inline,
  backtick-quoted, embedded backticks doubled, dotted names quoted per part.
- ``?``  -- a **value**.  Never rendered inline: it becomes one or more
  ``%s`` markers and the value is appended to the parameter tuple that
  ``mysql.connector`` binds.

Value expansion::

    scalar            ->  %s
    [1, 2, 3]         ->  %s, %s, %s
    [[1, 2], [3, 4]]  ->  (%s, %s), (%s, %s)
    []                ->  NULL
    {"a": 1, "b": 2}  ->  `a` = %s, `b` = %s

Placeholders without a matching value are left in the SQL untouched;
surplus values are ignored.

Examples:
    >>> stmt = format_query("SELECT * FROM ?? WHERE id IN (?)", ["users", [1, 2]])
    >>> stmt.sql
    'SELECT * FROM `users` WHERE id IN (%s, %s)'
    >>> stmt.params
    (1, 2)

Guardrails:
    ❌ ``f"SELECT * FROM t WHERE name = '{name}'"``
    ✅ ``format_query("SELECT * FROM ?? WHERE name = ?", ["t", name])``
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

_PLACEHOLDER_RE = re.compile(r"\?\??")

_MARKER = "%s"


@dataclass(frozen=True)
class Statement:
    """A formatted SQL statement and the parameters bound to it."""

    sql: str
    params: tuple[Any, ...] = ()

    def __str__(self) -> str:
        return self.sql


def escape_id(value: Any, forbid_qualified: bool = False) -> str:
    """Quote an identifier with backticks.

    >>> escape_id("users")
    '`users`'
    >>> escape_id("db.users")
    '`db`.`users`'
    >>> escape_id(["id", "name"])
    '`id`, `name`'
    """
    if isinstance(value, (list, tuple)):
        return ", ".join(escape_id(item, forbid_qualified) for item in value)

    text = str(value)
    if forbid_qualified:
        return "`" + text.replace("`", "``") + "`"
    return ".".join("`" + part.replace("`", "``") + "`" for part in text.split("."))


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _bind_value(value: Any, params: list[Any]) -> str:
    """Render the markers for one ``?`` value and collect its parameters."""
    if isinstance(value, Mapping):
        pairs = []
        for key, item in value.items():
            # non-literal chunk: escape the identifier's own '%' here
            pairs.append(f"{escape_id(key).replace('%', '%%')} = {_MARKER}")
            params.append(item)
        return ", ".join(pairs)

    if _is_sequence(value):
        if not value:
            return "NULL"
        parts = []
        for item in value:
            if _is_sequence(item):
                parts.append("(" + ", ".join(_MARKER for _ in item) + ")")
                params.extend(item)
            else:
                parts.append(_MARKER)
                params.append(item)
        return ", ".join(parts)

    params.append(value)
    return _MARKER


def format_query(template: str, values: Any = None) -> Statement:
    """Substitute ``??``/``?`` placeholders in *template*.

    *values* is a list of positional values; a single non-list value is
    treated as a one-element list.
    """
    if values is None:
        values = []
    elif not isinstance(values, (list, tuple)):
        values = [values]

    params: list[Any] = []
    # (text, is_literal): literal chunks get '%' escaped when params exist
    chunks: list[tuple[str, bool]] = []
    position = 0
    index = 0

    for match in _PLACEHOLDER_RE.finditer(template):
        if index >= len(values):
            break

        chunks.append((template[position : match.start()], True))
        value = values[index]
        index += 1

        if match.group() == "??":
            chunks.append((escape_id(value), True))
        else:
            chunks.append((_bind_value(value, params), False))

        position = match.end()

    chunks.append((template[position:], True))

    if params:
        sql = "".join(text.replace("%", "%%") if literal else text for text, literal in chunks)
    else:
        sql = "".join(text for text, _ in chunks)

    return Statement(sql=sql, params=tuple(params))


__all__ = [
    "Statement",
    "escape_id",
    "format_query",
]
