"""Shared fixtures keeping every test independent of the developer's shell.

Recognised pREST variables are removed from the process environment before
each test and the process-wide configuration slot is emptied, so precedence
scenarios only see what the test sets explicitly.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from prest_config import core
from prest_config.adapters.env.default import (
    CLOUD_DATABASE_URL_VAR,
    CONFIG_PATH_VAR,
    ENV_KEYS,
    GENERIC_PORT_VAR,
)

TESTDATA = Path(__file__).resolve().parent / "testdata"
RECOGNISED_VARIABLES = (*ENV_KEYS, GENERIC_PORT_VAR, CLOUD_DATABASE_URL_VAR, CONFIG_PATH_VAR)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Drop recognised variables, reset the loaded config and run from an empty directory."""

    for name in RECOGNISED_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(core, "_ACTIVE", None)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def testdata() -> Path:
    """Directory holding the sample ``prest*.toml`` files."""

    return TESTDATA
