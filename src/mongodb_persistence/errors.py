"""
# Persistence Errors

Exceptions raised by the connection resolver and the persistence components.
Each exception carries a machine-readable **code**, the **correlation id** of
the operation that failed and, when it wraps a driver failure, the original
exception chained as `__cause__`.

## Taxonomy

| Exception | Codes | Raised by |
|---|---|---|
| `ConfigException` | `NO_CONNECTION`, `NO_HOST`, `NO_PORT`, `NO_DATABASE`, `NO_COLLECTION` | connection validation, `clear()` |
| `ConnectionException` | `CONNECT_FAILED`, `DISCONNECT_FAILED`, `CLEAR_FAILED` | `open()`, `close()`, `clear()` |
| `ReferenceException` | `NO_DISCOVERY`, `NO_CREDENTIAL_STORE` | resolving `discovery_key` / `store_key` without a bound collaborator |

Driver errors raised by CRUD operations (`DuplicateKeyError`, network errors)
are **not** wrapped and reach the caller unchanged.
"""

from typing import Any, Dict, Optional

NO_CONNECTION = "NO_CONNECTION"
NO_HOST = "NO_HOST"
NO_PORT = "NO_PORT"
NO_DATABASE = "NO_DATABASE"
NO_COLLECTION = "NO_COLLECTION"
CONNECT_FAILED = "CONNECT_FAILED"
DISCONNECT_FAILED = "DISCONNECT_FAILED"
CLEAR_FAILED = "CLEAR_FAILED"
NO_DISCOVERY = "NO_DISCOVERY"
NO_CREDENTIAL_STORE = "NO_CREDENTIAL_STORE"


class ApplicationException(Exception):
    """
    Base exception for all persistence-layer errors.

    Attributes:
        code (`str`): Error code, e.g. `"NO_HOST"`.
        message (`str`): Human readable description.
        correlation_id (`Optional[str]`): Id of the operation that failed.
        details (`Dict[str, Any]`): Extra diagnostic values.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        code: str = "UNKNOWN",
        message: str = "",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.correlation_id = correlation_id
        self.code = code
        self.message = message or code
        self.details: Dict[str, Any] = dict(details or {})
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    def with_cause(self, cause: Optional[BaseException]) -> "ApplicationException":
        """Chain `cause` and return the exception for fluent raising."""
        self.__cause__ = cause
        return self

    def with_details(self, key: str, value: Any) -> "ApplicationException":
        self.details[key] = value
        return self

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.code}: {self.message} (caused by {self.cause!r})"
        return f"{self.code}: {self.message}"


class ConfigException(ApplicationException):
    """Raised when a component is misconfigured (missing host, port, database, collection)."""


class ConnectionException(ApplicationException):
    """Raised when connecting to, disconnecting from or clearing the database fails."""


class ReferenceException(ApplicationException):
    """Raised when a required collaborator (discovery, credential store) is not referenced."""
