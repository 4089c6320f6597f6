"""Config locator tests: explicit path wins, otherwise ./prest.toml."""

from __future__ import annotations

import pytest

from prest_config.adapters.path_resolvers.default import DefaultPathResolver, get_default_prest_conf


@pytest.mark.parametrize(
    ("prest_conf", "expected"),
    [("../prest.toml", "../prest.toml"), ("", "./prest.toml"), (None, "./prest.toml")],
)
def test_get_default_prest_conf(prest_conf: str | None, expected: str) -> None:
    assert get_default_prest_conf(prest_conf) == expected


def test_resolver_reads_prest_conf() -> None:
    assert DefaultPathResolver(environ={"PREST_CONF": "/etc/prest/prest.toml"}).config_file() == "/etc/prest/prest.toml"


def test_resolver_falls_back_when_unset() -> None:
    assert DefaultPathResolver(environ={}).config_file() == "./prest.toml"
