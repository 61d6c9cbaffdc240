"""Session establishment over a database driver."""

from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from typing import Any, ContextManager

from .driver import DatabaseDriver
from .errors import ScopeUnsupportedError, SessionClosedError
from .models import ConnectionConfig, Credentials, QueryRequest

LOG = logging.getLogger(__name__)


class Session:
    """Authenticated, namespace-bound handle over a driver.

    Instances come from :func:`establish`; the caller owns the session and
    discards it with :meth:`close`. Driver calls are serialized unless the
    driver declares itself ``thread_safe``.
    """

    def __init__(self, driver: DatabaseDriver, config: ConnectionConfig) -> None:
        self._driver = driver
        self._namespace = config.namespace
        self._database = config.database
        self._endpoint = config.endpoint
        self._lock: ContextManager[Any] = (
            nullcontext() if getattr(driver, "thread_safe", False) else threading.Lock()
        )
        self._closed = False

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def database(self) -> str:
        return self._database

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def closed(self) -> bool:
        return self._closed

    def query(self, request: QueryRequest) -> Any:
        """Run a statement on the driver, blocking until it answers."""

        self._ensure_open()
        with self._lock:
            # May have been closed while queued behind an abandoned call.
            self._ensure_open()
            return self._driver.query(request.statement, request.variables)

    def create(self, thing: str, data: Any) -> Any:
        """Create a record through the driver, blocking until it answers."""

        self._ensure_open()
        with self._lock:
            self._ensure_open()
            return self._driver.create(thing, data)

    def close(self) -> None:
        """Close the driver connection; safe to call twice.

        Abandoned queries may still be running on the driver at this point.
        """

        if self._closed:
            return
        self._closed = True
        self._driver.close()
        LOG.debug("Session closed", extra={"endpoint": self._endpoint, "namespace": self._namespace})

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Session {self._endpoint} {self._namespace}/{self._database} {state}>"

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session for '{self._namespace}/{self._database}' is closed.")


def establish(driver: DatabaseDriver, config: ConnectionConfig) -> Session:
    """Sign in, then select namespace/database, returning a ready session.

    Driver errors propagate unchanged. Namespace selection is never attempted
    after a failed sign-in, and a driver that signed in but could not select
    the namespace is closed before the error is raised.

    A failed sign-in leaves the driver untouched: the caller still owns it and
    is responsible for calling ``driver.close()``.
    """

    supports_scope = getattr(driver, "supports_scope", False)
    if config.scope and not supports_scope:
        raise ScopeUnsupportedError(config.scope, type(driver).__name__)

    credentials = Credentials(
        username=config.username,
        password=config.password,
        scope=config.scope if supports_scope else "",
    )
    driver.authenticate(credentials)
    try:
        driver.select_namespace(config.namespace, config.database)
    except BaseException:
        try:
            driver.close()
        except Exception:  # pragma: no cover - best effort cleanup
            LOG.debug("Driver close failed after namespace error", exc_info=True)
        raise

    LOG.debug(
        "Session established",
        extra={"endpoint": config.endpoint, "namespace": config.namespace, "database": config.database},
    )
    return Session(driver, config)


__all__ = ["Session", "establish"]
