"""MySQL connection settings read from the environment.

``MySQLSettings`` gathers the connection parameters from ``MYSQL_*``
environment variables (and an optional ``.env`` file).  The host application
builds the settings and hands ``settings.to_params()`` to the provider; the
provider itself never reads the environment.

Environment
───────────
MYSQL_HOST       : server host (default ``localhost``)
MYSQL_PORT       : server port (default ``3306``)
MYSQL_USERNAME   : login user
MYSQL_PASSWORD   : login password
MYSQL_DATABASE   : default schema
MYSQL_OPTIONS    : JSON object of extra ``mysql.connector`` options

Examples:
    >>> from tramway_mysql.settings import MySQLSettings
    >>> settings = MySQLSettings(host="db.local", database="app")
    >>> settings.to_params()["host"]
    'db.local'
"""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MySQLSettings(BaseSettings):
    """Connection parameters for a single MySQL server."""

    model_config = SettingsConfigDict(
        env_prefix="MYSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 3306
    username: str | None = None
    password: str | None = None
    database: str | None = None

    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Passthrough options for mysql.connector.connect",
    )

    def to_params(self) -> dict[str, Any]:
        """Connection-parameter map consumed by ``MySQLProvider``."""
        params: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
            "database": self.database,
        }
        params.update(self.options)
        return params


__all__ = [
    "MySQLSettings",
]
