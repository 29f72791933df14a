"""tramway-mysql -- MySQL provider and repository adapters.

Two layers:

- ``MySQLProvider`` owns one connection, builds parameterized SQL for
  table-scoped CRUD operations and returns raw rows / write results.
- ``repositories.MySQLRepository`` binds a provider, an entity factory and
  a table name, and speaks entities to its callers.

Quick start::

    from tramway_mysql import MySQLProvider, MySQLSettings, repositories
    from tramway_mysql.entities import BaseEntity, DataclassFactory

    provider = MySQLProvider(MySQLSettings().to_params())
    users = repositories.MySQLRepository(provider, DataclassFactory(User), "users")
    user = await users.get_one(1)
"""

from tramway_mysql import repositories
from tramway_mysql.config import SERVICES, build_service, get_parameters
from tramway_mysql.providers import MySQLProvider
from tramway_mysql.settings import MySQLSettings

__version__ = "0.1.0"

__all__ = [
    "MySQLProvider",
    "MySQLSettings",
    "repositories",
    "SERVICES",
    "build_service",
    "get_parameters",
]
