"""Connection settings loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from .errors import ConfigError
from .models import ConnectionConfig

CONFIG_FILE = Path.home() / ".config" / "surrealgate" / "config.toml"


class ConnectionSettings(BaseModel):
    """Shape of the ``[connection]`` table in config.toml."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    database: str = Field(min_length=1)
    endpoint: str = Field(min_length=1)
    namespace: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: SecretStr
    scope: str = ""
    query_timeout: float | None = Field(default=None, gt=0)

    def to_config(self) -> ConnectionConfig:
        """Build the immutable runtime config handed to the establisher."""

        return ConnectionConfig(
            database=self.database,
            endpoint=self.endpoint,
            namespace=self.namespace,
            username=self.username,
            password=self.password.get_secret_value(),
            scope=self.scope,
        )


def load_settings(path: Path | None = None) -> ConnectionSettings:
    """Load connection settings from disk.

    There are no usable defaults for credentials, so a missing or invalid
    file raises ``ConfigError``.
    """

    target = path or CONFIG_FILE
    try:
        with target.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {target}") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(f"Could not read config file {target}: {exc}") from exc

    section = raw.get("connection", raw)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a [connection] table in {target}.")
    try:
        return ConnectionSettings(**section)
    except ValidationError as exc:
        raise ConfigError(f"Invalid connection settings in {target}: {exc}") from exc


def load_config(path: Path | None = None) -> ConnectionConfig:
    """Shortcut for ``load_settings(path).to_config()``."""

    return load_settings(path).to_config()


__all__ = ["CONFIG_FILE", "ConnectionSettings", "load_config", "load_settings"]
