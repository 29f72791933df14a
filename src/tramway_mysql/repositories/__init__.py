"""Repositories -- entity-facing data access.

Modules
-------
base            Abstract Repository contract
mysql           MySQLRepository (one table, factory-mapped rows)
"""

from .base import Repository
from .mysql import MySQLRepository

__all__ = [
    "Repository",
    "MySQLRepository",
]
