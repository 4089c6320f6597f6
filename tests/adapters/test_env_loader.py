"""Environment adapter tests: recognised names only, typed values, three-way booleans."""

from __future__ import annotations

import pytest

from prest_config.adapters.env.default import DefaultEnvLoader, port_from_env
from prest_config.domain.errors import InvalidPort, InvalidValue


def test_recognised_variables_become_nested_typed_values() -> None:
    environ = {
        "PREST_PG_HOST": "db.example.com",
        "PREST_PG_PORT": "5433",
        "PREST_PG_CACHE": "false",
        "PREST_JSON_AGG_TYPE": "json_agg",
        "PREST_AUTH_ENABLED": "true",
        "OTHER": "ignored",
    }
    snapshot = DefaultEnvLoader(environ=environ).load()
    assert snapshot.values == {
        "pg": {"host": "db.example.com", "port": 5433, "cache": False},
        "json": {"agg": {"type": "json_agg"}},
    }


def test_empty_values_are_absent() -> None:
    snapshot = DefaultEnvLoader(environ={"PREST_JWT_KEY": "", "PORT": "", "DATABASE_URL": ""}).load()
    assert snapshot.values == {}
    assert snapshot.port is None
    assert snapshot.database_url is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, None), ("true", True), ("1", True), ("false", False), ("False", False), ("0", False), ("off", False)],
)
def test_jwt_default_is_three_way(raw: str | None, expected: bool | None) -> None:
    environ = {} if raw is None else {"PREST_JWT_DEFAULT": raw}
    assert DefaultEnvLoader(environ=environ).load().jwt_default is expected


def test_unrecognised_boolean_text_is_rejected() -> None:
    with pytest.raises(InvalidValue):
        DefaultEnvLoader(environ={"PREST_JWT_DEFAULT": "maybe"}).load()


def test_generic_values_are_kept_apart() -> None:
    snapshot = DefaultEnvLoader(
        environ={"PORT": "8080", "DATABASE_URL": "postgres://h/d", "PREST_CONF": "/etc/prest.toml"}
    ).load()
    assert snapshot.port == 8080
    assert snapshot.database_url == "postgres://h/d"
    assert snapshot.config_path == "/etc/prest.toml"
    assert snapshot.values == {}


def test_port_from_env_rejects_text() -> None:
    with pytest.raises(InvalidPort):
        port_from_env({"PORT": "PORT"})


@pytest.mark.parametrize("name", ["PREST_HTTP_PORT", "PREST_PG_PORT"])
def test_service_ports_reject_text(name: str) -> None:
    with pytest.raises(InvalidPort):
        DefaultEnvLoader(environ={name: "http"}).load()


def test_loader_defaults_to_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PREST_PG_USER", "from-os")
    assert DefaultEnvLoader().load().values == {"pg": {"user": "from-os"}}
