"""Shared dataclasses used across session and query modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class ConnectionConfig:
    """Runtime representation of the connection settings."""

    database: str
    endpoint: str
    namespace: str
    username: str
    password: str = field(repr=False)
    scope: str = ""


@dataclass(frozen=True, slots=True)
class Credentials:
    """Sign-in payload handed to a driver's authenticate call."""

    username: str
    password: str = field(repr=False)
    scope: str = ""


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """A statement plus the variables bound into it."""

    statement: str
    variables: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))


__all__ = ["ConnectionConfig", "Credentials", "QueryRequest"]
