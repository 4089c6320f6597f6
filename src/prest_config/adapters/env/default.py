"""Environment variable adapter.

Purpose
-------
Read the fixed, enumerated set of environment variables that pREST recognises
and turn them into a typed snapshot for the resolver. Unrecognised variables
are never inspected.

Key behaviours
--------------
* ``PREST_<SECTION>_<KEY>`` variables map onto dotted file keys through
  :data:`ENV_KEYS` (``PREST_PG_HOST`` → ``pg.host``).
* Empty values count as absent.
* Booleans are read three-way (:func:`~prest_config.domain.schema.read_tristate`)
  so ``PREST_JWT_DEFAULT=false`` differs from an unset variable.
* Malformed ``PORT`` / ``PREST_HTTP_PORT`` / ``PREST_PG_PORT`` values raise
  :class:`~prest_config.domain.errors.InvalidPort` immediately.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final, Mapping

from ...domain.schema import FIELDS, assign_dotted, coerce_text, parse_port, read_tristate
from ...observability import log_debug

CONFIG_PATH_VAR: Final[str] = "PREST_CONF"
GENERIC_PORT_VAR: Final[str] = "PORT"
CLOUD_DATABASE_URL_VAR: Final[str] = "DATABASE_URL"
SERVICE_DATABASE_URL_VAR: Final[str] = "PREST_PG_URL"

ENV_KEYS: Final[Mapping[str, str]] = {
    "PREST_HTTP_HOST": "http.host",
    "PREST_HTTP_PORT": "http.port",
    "PREST_HTTP_TIMEOUT": "http.timeout",
    "PREST_DEBUG": "debug",
    "PREST_CONTEXT": "context",
    SERVICE_DATABASE_URL_VAR: "pg.url",
    "PREST_PG_HOST": "pg.host",
    "PREST_PG_PORT": "pg.port",
    "PREST_PG_USER": "pg.user",
    "PREST_PG_PASS": "pg.pass",
    "PREST_PG_DATABASE": "pg.database",
    "PREST_PG_MAXIDLECONN": "pg.maxidleconn",
    "PREST_PG_MAXOPENCONN": "pg.maxopenconn",
    "PREST_PG_CONNTIMEOUT": "pg.conntimeout",
    "PREST_PG_CACHE": "pg.cache",
    "PREST_PG_SINGLE": "pg.single",
    "PREST_SSL_MODE": "ssl.mode",
    "PREST_SSL_CERT": "ssl.cert",
    "PREST_SSL_KEY": "ssl.key",
    "PREST_SSL_ROOTCERT": "ssl.rootcert",
    "PREST_JWT_KEY": "jwt.key",
    "PREST_JWT_ALGO": "jwt.algo",
    "PREST_JWT_DEFAULT": "jwt.default",
    "PREST_HTTPS_MODE": "https.mode",
    "PREST_HTTPS_CERT": "https.cert",
    "PREST_HTTPS_KEY": "https.key",
    "PREST_CACHE_ENABLED": "cache.enabled",
    "PREST_JSON_AGG_TYPE": "json.agg.type",
}
"""Service-specific variables and the dotted file key each one overrides."""


@dataclass(frozen=True)
class EnvSnapshot:
    """Typed view of the recognised environment variables.

    Attributes
    ----------
    values:
        Nested mapping of the ``PREST_*`` variables that were set, in file-key
        shape, ready to be merged as the ``env`` layer.
    port:
        Value of the generic ``PORT`` variable or ``None``.
    database_url:
        Value of the generic cloud ``DATABASE_URL`` variable or ``None``.
    config_path:
        Raw ``PREST_CONF`` value or ``None``.
    """

    values: dict[str, object] = field(default_factory=dict)
    port: int | None = None
    database_url: str | None = None
    config_path: str | None = None

    @property
    def jwt_default(self) -> bool | None:
        """Three-way ``PREST_JWT_DEFAULT``: ``None`` means the variable was unset."""

        jwt = self.values.get("jwt")
        if isinstance(jwt, dict):
            value = jwt.get("default")
            return value if isinstance(value, bool) else None
        return None


def port_from_env(environ: Mapping[str, str]) -> int | None:
    """Return the generic ``PORT`` value, ``None`` when unset, or raise ``InvalidPort``.

    Examples
    --------
    >>> port_from_env({"PORT": "8080"})
    8080
    >>> port_from_env({}) is None
    True
    """

    raw = environ.get(GENERIC_PORT_VAR, "")
    if raw == "":
        return None
    return parse_port(raw, source=GENERIC_PORT_VAR)


class DefaultEnvLoader:
    """Load the recognised environment variables into an :class:`EnvSnapshot`."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self) -> EnvSnapshot:
        """Return a snapshot of the recognised variables.

        Side Effects
        ------------
        Emits an ``env_variables_loaded`` debug event listing variable names
        (never values).

        Examples
        --------
        >>> snapshot = DefaultEnvLoader(environ={"PREST_PG_PORT": "6432", "HOME": "/root"}).load()
        >>> snapshot.values
        {'pg': {'port': 6432}}
        >>> DefaultEnvLoader(environ={"PREST_JWT_DEFAULT": "false"}).load().jwt_default
        False
        """

        environ = self._environ
        values: dict[str, object] = {}
        seen: list[str] = []
        for name, key in ENV_KEYS.items():
            if FIELDS[key] == "bool":
                flag = read_tristate(environ, name)
                if flag is None:
                    continue
                assign_dotted(values, key, flag)
            else:
                raw = environ.get(name, "")
                if raw == "":
                    continue
                assign_dotted(values, key, coerce_text(key, raw, source=name))
            seen.append(name)

        snapshot = EnvSnapshot(
            values=values,
            port=port_from_env(environ),
            database_url=environ.get(CLOUD_DATABASE_URL_VAR) or None,
            config_path=environ.get(CONFIG_PATH_VAR) or None,
        )
        log_debug("env_variables_loaded", layer="env", path=None, keys=sorted(seen))
        return snapshot
