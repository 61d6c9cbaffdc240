"""Tests for connection settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from surrealgate import config as config_module
from surrealgate.config import ConnectionSettings, load_config, load_settings
from surrealgate.errors import ConfigError
from surrealgate.models import ConnectionConfig

VALID = """
[connection]
database = "app"
endpoint = "ws://db:8000/rpc"
namespace = "prod"
username = "u"
password = "p"
query_timeout = 1.5
"""


def test_load_settings_reads_connection_table(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(VALID)

    settings = load_settings(config_path)

    assert settings.database == "app"
    assert settings.endpoint == "ws://db:8000/rpc"
    assert settings.scope == ""
    assert settings.query_timeout == 1.5
    assert settings.password.get_secret_value() == "p"


def test_load_settings_uses_default_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(VALID)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    assert load_settings().namespace == "prod"


def test_load_config_builds_runtime_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(VALID)

    result = load_config(config_path)

    assert result == ConnectionConfig(
        database="app",
        endpoint="ws://db:8000/rpc",
        namespace="prod",
        username="u",
        password="p",
    )


def test_load_settings_raises_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    with pytest.raises(ConfigError, match="not found"):
        load_settings()


def test_load_settings_handles_toml_errors(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("database = [unterminated")

    with pytest.raises(ConfigError):
        load_settings(config_path)


def test_load_settings_rejects_incomplete_settings(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[connection]\ndatabase = "app"\n')

    with pytest.raises(ConfigError, match="Invalid connection settings"):
        load_settings(config_path)


def test_settings_hide_password_and_validate_timeout() -> None:
    settings = ConnectionSettings(
        database="app", endpoint="db:8000", namespace="prod", username="u", password="hunter2"
    )

    assert "hunter2" not in repr(settings)
    with pytest.raises(ValidationError):
        ConnectionSettings(
            database="app",
            endpoint="db:8000",
            namespace="prod",
            username="u",
            password="p",
            query_timeout=0,
        )
