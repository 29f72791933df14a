"""
Structured error types for tramway-mysql.

Query-level errors raised by ``mysql.connector`` are **not** wrapped: callers
see the driver error unchanged, exactly as the client reported it.  The types
in this module cover the adapter's own failure modes (bad configuration,
unusable factory input, a rollback that could not be completed) and the
classification helpers the provider uses to tell a transient connection reset
apart from a fatal connection error.

Manifesto:
    - **Driver errors pass through:** No re-wrapping of SQL errors
    - **Typed adapter errors:** ConfigError, EntityError, TransactionError
    - **Explicit classification:** is_connection_reset / is_connection_error
    - **Error chaining:** Original exceptions kept as ``cause``

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                      TramwayError                          │
        │              (category, context, cause)                    │
        ├───────────────────────────────────────────────────────────┤
        │  ConfigError        EntityError        DatabaseError       │
        │  (CONFIG)           (VALIDATION)       (DATABASE)          │
        │                                             │              │
        │                                     TransactionError       │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> err = ConfigError("Unknown service: provider.pg")
    >>> err.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> err.to_dict()["error_type"]
    'ConfigError'

Tags:
    error-handling, exception-hierarchy, mysql, reconnect, tramway-mysql

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from mysql.connector import errorcode
from mysql.connector import errors as driver_errors

# Client errors meaning the server side of the socket went away.
CONNECTION_RESET_ERRNOS: frozenset[int] = frozenset(
    {
        errorcode.CR_SERVER_GONE_ERROR,  # 2006
        errorcode.CR_SERVER_LOST,  # 2013
        errorcode.CR_SERVER_LOST_EXTENDED,  # 2055
    }
)

# mysql.connector reserves 2000-2999 for client-side (connection) errors.
_CLIENT_ERRNO_RANGE = range(2000, 3000)


class ErrorCategory(str, Enum):
    """Error categories used for log routing."""

    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    DATABASE = "DATABASE"
    INTERNAL = "INTERNAL"


class TramwayError(Exception):
    """
    Base exception for all tramway-mysql errors.

    Carries a category, a free-form context dict and the chained cause.
    Subclasses set ``default_category``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TramwayError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ConfigError(TramwayError):
    """Missing or invalid configuration (settings, service descriptors)."""

    default_category = ErrorCategory.CONFIG


class EntityError(TramwayError):
    """A factory was handed input it cannot turn into an entity."""

    default_category = ErrorCategory.VALIDATION


class DatabaseError(TramwayError):
    """Adapter-level database failure."""

    default_category = ErrorCategory.DATABASE


class TransactionError(DatabaseError):
    """
    A transaction could not be rolled back after a statement failed.

    ``cause`` is the rollback failure; ``statement_error`` is the error that
    triggered the rollback in the first place.
    """

    def __init__(
        self,
        message: str,
        *,
        statement_error: BaseException | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.statement_error = statement_error


# =============================================================================
# DRIVER ERROR CLASSIFICATION
# =============================================================================


def is_connection_reset(error: BaseException) -> bool:
    """True if *error* means the connection was reset and can be re-opened."""
    if isinstance(error, ConnectionResetError):
        return True
    if isinstance(error, driver_errors.Error):
        if error.errno in CONNECTION_RESET_ERRNOS:
            return True
        return isinstance(error.__cause__, ConnectionResetError)
    return False


def is_connection_error(error: BaseException) -> bool:
    """True if *error* is a client-side connection error of any kind."""
    if isinstance(error, ConnectionError):
        return True
    if isinstance(error, (driver_errors.InterfaceError, driver_errors.OperationalError)):
        return error.errno is not None and error.errno in _CLIENT_ERRNO_RANGE
    return False


__all__ = [
    "CONNECTION_RESET_ERRNOS",
    "ErrorCategory",
    "TramwayError",
    "ConfigError",
    "EntityError",
    "DatabaseError",
    "TransactionError",
    "is_connection_reset",
    "is_connection_error",
]
