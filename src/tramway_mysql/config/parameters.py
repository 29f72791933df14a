"""Named parameter maps consumed by service descriptors."""

from __future__ import annotations

from typing import Any

from tramway_mysql.settings import MySQLSettings


def get_parameters(settings: MySQLSettings | None = None) -> dict[str, Any]:
    """Parameter map keyed by name; ``"mysql"`` holds the connection params.

    Reads ``MYSQL_*`` from the environment when *settings* is not given.
    """
    settings = settings or MySQLSettings()
    return {"mysql": settings.to_params()}


__all__ = [
    "get_parameters",
]
