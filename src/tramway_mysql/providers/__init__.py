"""Providers -- connection-owning SQL executors.

Modules
-------
base            Abstract Provider contract
connection      ConnectionHandle, ConnectionState, WriteResult
mysql           MySQLProvider (mysql-connector-python)
"""

from .base import Provider
from .connection import ConnectionHandle, ConnectionState, WriteResult
from .mysql import MySQLProvider

__all__ = [
    "Provider",
    "ConnectionHandle",
    "ConnectionState",
    "WriteResult",
    "MySQLProvider",
]
