"""Domain-level configuration value objects.

Purpose
-------
Define the immutable :class:`PrestConfig` object produced by every resolution
call, plus the small sub-objects it aggregates. The module performs no I/O.

Contents
--------
* :class:`SourceInfo` – typed provenance record (layer, path, dotted key).
* :class:`TablePermission` – one ``[[access.tables]]`` entry.
* :class:`AccessConf` / :class:`ExposeConf` / :class:`CacheConf` – grouped
  sub-settings.
* :class:`PrestConfig` – the fully-populated configuration with provenance
  lookups and JSON export.

System Role
-----------
:func:`prest_config.application.resolve.resolve` builds a fresh
:class:`PrestConfig` per call; :func:`prest_config.core.load` installs one in the
process-wide slot. Instances are never mutated after construction.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from types import MappingProxyType
from typing import Any, TypedDict


class SourceInfo(TypedDict):
    """Describe the origin of a resolved configuration key.

    Attributes
    ----------
    layer:
        ``"defaults"``, ``"file"``, ``"env"``, ``"env:PORT"`` or ``"url"``.
    path:
        Config file path for the ``file`` layer, the environment variable name
        that carried the URL for the ``url`` layer, otherwise ``None``.
    key:
        Dotted file key (for example ``"pg.host"``).
    """

    layer: str
    path: str | None
    key: str


@dataclass(frozen=True, slots=True)
class TablePermission:
    """Access rule for a single table.

    Examples
    --------
    >>> TablePermission(name="test", permissions=("read",), fields=("*",)).name
    'test'
    """

    name: str
    permissions: tuple[str, ...] = ()
    fields: tuple[str, ...] = ("*",)


@dataclass(frozen=True, slots=True)
class AccessConf:
    restrict: bool = False
    tables: tuple[TablePermission, ...] = ()
    ignore_table: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ExposeConf:
    """Toggles for the listing endpoints; each one is independent."""

    enabled: bool = False
    database_listing: bool = False
    schema_listing: bool = False
    table_listing: bool = False


@dataclass(frozen=True, slots=True)
class CacheConf:
    enabled: bool = False
    time: int = 10
    storage_path: str = "./"
    sufix_file: str = ".cache.prestd.db"


@dataclass(frozen=True)
class PrestConfig:
    """Resolved runtime configuration of a pREST service.

    Why
    ----
    Consumers (HTTP server, database pool, auth middleware) need one object in
    which every field is populated and consistent, regardless of which sources
    were present at startup.

    What
    ----
    A frozen dataclass whose fields mirror the file keys in snake_case. The
    ``sources`` mapping records which layer supplied each dotted key and is
    exposed through :meth:`origin`.

    Examples
    --------
    >>> cfg = PrestConfig(sources={"http.port": {"layer": "env", "path": None, "key": "http.port"}})
    >>> cfg.http_port
    3000
    >>> cfg.origin("http.port")["layer"]
    'env'
    """

    http_host: str = "0.0.0.0"
    http_port: int = 3000
    http_timeout: int = 60
    context_path: str = "/"
    debug: bool = False

    pg_url: str = ""
    pg_host: str = "127.0.0.1"
    pg_port: int = 5432
    pg_user: str = ""
    pg_pass: str = ""
    pg_database: str = "prest"
    ssl_mode: str = "require"
    ssl_cert: str = ""
    ssl_key: str = ""
    ssl_root_cert: str = ""
    pg_max_idle_conn: int = 0
    pg_max_open_conn: int = 10
    pg_conn_timeout: int = 10
    pg_cache: bool = True
    single_db: bool = True

    auth_enabled: bool = False
    auth_schema: str = "public"
    auth_table: str = "prest_users"
    auth_username: str = "username"
    auth_password: str = "password"
    auth_encrypt: str = "MD5"
    auth_type: str = "body"
    auth_metadata: tuple[str, ...] = ()

    jwt_key: str = ""
    jwt_algo: str = "HS256"
    jwt_whitelist: tuple[str, ...] = ("/auth",)
    enable_default_jwt: bool = True

    cors_allow_origin: tuple[str, ...] = ("*",)
    cors_allow_headers: tuple[str, ...] = ("*",)
    cors_allow_methods: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS")
    cors_allow_credentials: bool = True

    https_mode: bool = False
    https_cert: str = "/etc/certs/cert.crt"
    https_key: str = "/etc/certs/cert.key"

    json_agg_type: str = "jsonb_agg"
    plugin_path: str = "./lib"
    migrations_path: str = "./migrations"

    cache: CacheConf = field(default_factory=CacheConf)
    access: AccessConf = field(default_factory=AccessConf)
    expose: ExposeConf = field(default_factory=ExposeConf)

    sources: Mapping[str, SourceInfo] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sources", MappingProxyType(dict(self.sources)))

    def origin(self, key: str) -> SourceInfo | None:
        """Return provenance for the dotted file *key* or ``None`` when unknown.

        Examples
        --------
        >>> PrestConfig().origin("pg.host") is None
        True
        """

        return self.sources.get(key)

    def as_dict(self) -> dict[str, Any]:
        """Return a mutable, JSON-friendly copy of the resolved values (no provenance)."""

        return {item.name: _export(getattr(self, item.name)) for item in fields(self) if item.name != "sources"}

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise :meth:`as_dict` to JSON.

        Examples
        --------
        >>> '"http_port":3000' in PrestConfig().to_json()
        True
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False)


def _export(value: Any) -> Any:
    """Convert nested dataclasses and tuples into dicts and lists for JSON output."""

    if is_dataclass(value):
        return {item.name: _export(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_export(item) for item in value]
    return value
