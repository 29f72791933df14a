"""Service descriptors for dependency-injection containers.

A descriptor declares how to build a service: its class, the constructor
arguments (resolved from named parameters or other services) and the methods
to call after construction::

    "provider.mysql": {
        "class": MySQLProvider,
        "constructor": [{"type": "parameter", "key": "mysql"}],
        "functions": [],
    }

Containers consume :data:`SERVICES` directly.  :func:`build_service` is a
minimal resolver for applications without one.

Usage:
    >>> from tramway_mysql.config import build_service, get_parameters
    >>> provider = build_service("provider.mysql", get_parameters())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tramway_mysql.errors import ConfigError
from tramway_mysql.providers.mysql import MySQLProvider

SERVICES: dict[str, dict[str, Any]] = {
    "provider.mysql": {
        "class": MySQLProvider,
        "constructor": [
            {"type": "parameter", "key": "mysql"},
        ],
        "functions": [],
    },
}


def _resolve_argument(
    argument: Mapping[str, Any],
    parameters: Mapping[str, Any],
    services: Mapping[str, Mapping[str, Any]],
    built: dict[str, Any],
) -> Any:
    kind = argument.get("type")
    key = argument.get("key")

    if kind == "parameter":
        if key not in parameters:
            raise ConfigError(f"Missing parameter: {key}", context={"parameter": key})
        return parameters[key]
    if kind == "service":
        return _build(key, parameters, services, built)
    raise ConfigError(f"Unknown argument type: {kind}", context={"argument": dict(argument)})


def _build(
    key: str,
    parameters: Mapping[str, Any],
    services: Mapping[str, Mapping[str, Any]],
    built: dict[str, Any],
) -> Any:
    if key in built:
        return built[key]
    if key not in services:
        raise ConfigError(f"Unknown service: {key}", context={"service": key})

    descriptor = services[key]
    args = [
        _resolve_argument(argument, parameters, services, built)
        for argument in descriptor.get("constructor", [])
    ]
    instance = descriptor["class"](*args)

    for call in descriptor.get("functions", []):
        method = getattr(instance, call["function"])
        method(
            *(
                _resolve_argument(argument, parameters, services, built)
                for argument in call.get("args", [])
            )
        )

    built[key] = instance
    return instance


def build_service(
    key: str,
    parameters: Mapping[str, Any],
    services: Mapping[str, Mapping[str, Any]] | None = None,
) -> Any:
    """Instantiate service *key* from its descriptor.

    Raises:
        ConfigError: Unknown service, missing parameter or bad argument type.
    """
    return _build(key, parameters, SERVICES if services is None else services, {})


__all__ = [
    "SERVICES",
    "build_service",
]
