"""Database drivers consumed by the session establisher and query executor."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from surrealdb import Surreal

from .errors import AuthenticationError, NamespaceSelectionError, QueryError
from .models import Credentials, QueryRequest


@runtime_checkable
class DatabaseDriver(Protocol):
    """Blocking capability set wrapped by sessions.

    ``supports_scope`` tells the establisher whether scoped sign-in can be
    honoured. ``thread_safe`` tells sessions whether calls may overlap; when
    false every call is serialized.
    """

    supports_scope: bool
    thread_safe: bool

    def authenticate(self, credentials: Credentials) -> Any:
        """Sign in; raise on rejection."""

    def select_namespace(self, namespace: str, database: str) -> None:
        """Bind subsequent calls to the namespace/database pair."""

    def query(self, statement: str, variables: Mapping[str, Any]) -> Any:
        """Run a statement with bound variables and return the raw result."""

    def create(self, thing: str, data: Any) -> Any:
        """Create a record (or table entry) and return it."""

    def close(self) -> None:
        """Release the underlying connection."""


class SurrealDriver:
    """Driver backed by the blocking client of the ``surrealdb`` SDK."""

    # The SDK's sign-in payload only carries username/password here, and its
    # blocking client makes no promise about concurrent use.
    supports_scope = False
    thread_safe = False

    def __init__(self, endpoint: str, *, client_factory: Callable[[str], Any] | None = None) -> None:
        self._endpoint = endpoint
        self._client_factory = client_factory or Surreal
        self._client: Any | None = None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def authenticate(self, credentials: Credentials) -> Any:
        if self._client is None:
            try:
                self._client = self._client_factory(self._endpoint)
            except Exception as exc:
                raise AuthenticationError(f"Failed to connect to '{self._endpoint}': {exc}") from exc
        client = self._client
        try:
            return client.signin({"username": credentials.username, "password": credentials.password})
        except Exception as exc:
            raise AuthenticationError(f"Sign-in to '{self._endpoint}' failed: {exc}") from exc

    def select_namespace(self, namespace: str, database: str) -> None:
        client = self._connected(NamespaceSelectionError)
        try:
            client.use(namespace, database)
        except Exception as exc:
            raise NamespaceSelectionError(
                f"Failed to use namespace '{namespace}' / database '{database}': {exc}"
            ) from exc

    def query(self, statement: str, variables: Mapping[str, Any]) -> Any:
        client = self._connected(QueryError)
        try:
            return client.query(statement, dict(variables))
        except Exception as exc:
            raise QueryError(f"Query failed: {exc}") from exc

    def create(self, thing: str, data: Any) -> Any:
        client = self._connected(QueryError)
        try:
            return client.create(thing, data)
        except Exception as exc:
            raise QueryError(f"Create on '{thing}' failed: {exc}") from exc

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.close()

    def _connected(self, error: type[Exception]) -> Any:
        # Only authenticate opens a client; a closed driver never reconnects.
        client = self._client
        if client is None:
            raise error(f"Not signed in to '{self._endpoint}'.")
        return client


class DemoDriver:
    """In-memory driver with canned responses and optional latency.

    Every call is appended to ``calls`` as ``(operation, *args)`` so callers can
    assert on the sequence the driver saw.
    """

    def __init__(
        self,
        *,
        responses: Mapping[str, Any] | None = None,
        failures: Mapping[str, BaseException] | None = None,
        latency: float = 0.0,
        auth_error: BaseException | None = None,
        namespace_error: BaseException | None = None,
        supports_scope: bool = False,
        thread_safe: bool = False,
    ) -> None:
        self._responses = dict(responses or {})
        self._failures = dict(failures or {})
        self._latency = latency
        self._auth_error = auth_error
        self._namespace_error = namespace_error
        self.supports_scope = supports_scope
        self.thread_safe = thread_safe
        self.calls: list[tuple[Any, ...]] = []
        self.records: dict[str, list[Any]] = {}
        self.closed = False
        self._lock = threading.Lock()

    def count(self, operation: str) -> int:
        """Number of recorded calls for the given operation."""

        with self._lock:
            return sum(1 for call in self.calls if call[0] == operation)

    def authenticate(self, credentials: Credentials) -> Any:
        self._record("authenticate", credentials.username, credentials.scope)
        if self._auth_error is not None:
            raise self._auth_error
        return f"demo-token-{credentials.username}"

    def select_namespace(self, namespace: str, database: str) -> None:
        self._record("select_namespace", namespace, database)
        if self._namespace_error is not None:
            raise self._namespace_error

    def query(self, statement: str, variables: Mapping[str, Any]) -> Any:
        self._record("query", statement, dict(variables))
        if self._latency:
            time.sleep(self._latency)
        failure = self._failures.get(statement)
        if failure is not None:
            raise failure
        return self._responses.get(statement, [])

    def create(self, thing: str, data: Any) -> Any:
        self._record("create", thing, data)
        if self._latency:
            time.sleep(self._latency)
        with self._lock:
            self.records.setdefault(thing, []).append(data)
        return data

    def close(self) -> None:
        self._record("close")
        self.closed = True

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)


__all__ = ["DatabaseDriver", "DemoDriver", "SurrealDriver"]
