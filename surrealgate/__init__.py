"""Session façade and deadline-bounded queries over a blocking SurrealDB driver."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ConnectionSettings, load_config, load_settings
from .deadline import Deadline
from .driver import DatabaseDriver, DemoDriver, SurrealDriver
from .errors import (
    AuthenticationError,
    ConfigError,
    DeadlineExceeded,
    NamespaceSelectionError,
    QueryError,
    ScopeUnsupportedError,
    SessionClosedError,
    SurrealGateError,
)
from .models import ConnectionConfig, Credentials, QueryRequest
from .query import DeadlineQueryExecutor, create_with_deadline, execute_with_deadline
from .session import Session, establish

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "ConnectionConfig",
    "ConnectionSettings",
    "Credentials",
    "DatabaseDriver",
    "Deadline",
    "DeadlineExceeded",
    "DeadlineQueryExecutor",
    "DemoDriver",
    "NamespaceSelectionError",
    "QueryError",
    "QueryRequest",
    "ScopeUnsupportedError",
    "Session",
    "SessionClosedError",
    "SurrealDriver",
    "SurrealGateError",
    "__version__",
    "create_with_deadline",
    "establish",
    "execute_with_deadline",
    "load_config",
    "load_settings",
]
