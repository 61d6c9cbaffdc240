"""Error taxonomy shared by the driver adapters, sessions and the executor."""

from __future__ import annotations


class SurrealGateError(RuntimeError):
    """Base class for errors raised by surrealgate."""


class ConfigError(SurrealGateError):
    """Raised when connection settings cannot be loaded."""


class AuthenticationError(SurrealGateError):
    """Raised when the driver rejects the supplied credentials."""


class NamespaceSelectionError(SurrealGateError):
    """Raised when the driver cannot bind the namespace/database pair."""


class QueryError(SurrealGateError):
    """Raised when the driver fails to execute a statement."""


class ScopeUnsupportedError(SurrealGateError):
    """Raised when a scope is configured but the driver cannot authenticate with one."""

    def __init__(self, scope: str, driver: str) -> None:
        super().__init__(f"Driver '{driver}' has no way to sign in with scope '{scope}'.")
        self.scope = scope
        self.driver = driver


class SessionClosedError(SurrealGateError):
    """Raised when a closed session is used."""


class DeadlineExceeded(SurrealGateError):
    """Raised when the caller's deadline fires before the driver responds.

    The remote operation may have succeeded, failed or still be running.
    """

    def __init__(self, reason: str = "deadline exceeded") -> None:
        super().__init__(reason)
        self.reason = reason


__all__ = [
    "AuthenticationError",
    "ConfigError",
    "DeadlineExceeded",
    "NamespaceSelectionError",
    "QueryError",
    "ScopeUnsupportedError",
    "SessionClosedError",
    "SurrealGateError",
]
