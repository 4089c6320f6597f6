"""Resolution of all sources into one :class:`PrestConfig`.

Purpose
-------
Apply the fixed precedence order across defaults, the configuration file, the
environment, and the connection URL, then derive dependent settings and build
the immutable configuration object.

Precedence (lowest first)
-------------------------
``defaults`` → ``file`` → ``env`` (``PREST_*``) → ``env:PORT`` → ``url``

* The generic ``PORT`` variable sits above ``PREST_HTTP_PORT``. When both are
  set, ``PORT`` wins. This ordering is kept for compatibility with existing
  deployments.
* The connection URL is chosen from ``PREST_PG_URL`` > ``DATABASE_URL`` >
  file ``pg.url``. When one is present it is the only source for every
  ``pg.*`` connection field and ``ssl.mode``.
* ``jwt.algo`` is never empty; an empty value falls back to ``HS256``.
"""

from __future__ import annotations

from typing import Final, Mapping

from ..adapters.env.default import CLOUD_DATABASE_URL_VAR, GENERIC_PORT_VAR, SERVICE_DATABASE_URL_VAR, EnvSnapshot
from ..adapters.url.postgres import parse_database_url
from ..domain.config import AccessConf, CacheConf, ExposeConf, PrestConfig, SourceInfo
from ..domain.defaults import DEFAULT_JWT_ALGO, defaults_layer
from ..domain.errors import InvalidValue
from ..domain.schema import SSL_MODES, check_port
from ..observability import log_debug, log_info, make_event
from .merge import Layer, merge_layers, value_at

#: ``PrestConfig`` attribute → dotted file key for the flat fields.
_FLAT_FIELDS: Final[Mapping[str, str]] = {
    "http_host": "http.host",
    "http_port": "http.port",
    "http_timeout": "http.timeout",
    "context_path": "context",
    "debug": "debug",
    "pg_url": "pg.url",
    "pg_host": "pg.host",
    "pg_port": "pg.port",
    "pg_user": "pg.user",
    "pg_pass": "pg.pass",
    "pg_database": "pg.database",
    "ssl_mode": "ssl.mode",
    "ssl_cert": "ssl.cert",
    "ssl_key": "ssl.key",
    "ssl_root_cert": "ssl.rootcert",
    "pg_max_idle_conn": "pg.maxidleconn",
    "pg_max_open_conn": "pg.maxopenconn",
    "pg_conn_timeout": "pg.conntimeout",
    "pg_cache": "pg.cache",
    "single_db": "pg.single",
    "auth_enabled": "auth.enabled",
    "auth_schema": "auth.schema",
    "auth_table": "auth.table",
    "auth_username": "auth.username",
    "auth_password": "auth.password",
    "auth_encrypt": "auth.encrypt",
    "auth_type": "auth.type",
    "auth_metadata": "auth.metadata",
    "jwt_key": "jwt.key",
    "jwt_algo": "jwt.algo",
    "jwt_whitelist": "jwt.whitelist",
    "enable_default_jwt": "jwt.default",
    "cors_allow_origin": "cors.alloworigin",
    "cors_allow_headers": "cors.allowheaders",
    "cors_allow_methods": "cors.allowmethods",
    "cors_allow_credentials": "cors.allowcredentials",
    "https_mode": "https.mode",
    "https_cert": "https.cert",
    "https_key": "https.key",
    "json_agg_type": "json.agg.type",
    "plugin_path": "plugins.path",
    "migrations_path": "migrations",
}


def resolve(
    file_layer: Mapping[str, object] | None,
    env: EnvSnapshot,
    *,
    file_path: str | None = None,
) -> PrestConfig:
    """Merge every source and return a fresh :class:`PrestConfig`.

    Parameters
    ----------
    file_layer:
        Typed mapping produced by
        :func:`~prest_config.domain.schema.validate_document`, or ``None`` when
        no file was found.
    env:
        Snapshot from :class:`~prest_config.adapters.env.default.DefaultEnvLoader`.
    file_path:
        Path of the file, recorded as provenance for file-supplied keys.

    Raises
    ------
    InvalidPort
        When the selected connection URL carries a malformed port.
    InvalidValue
        When the resolved ``ssl.mode`` is not a libpq mode.

    Examples
    --------
    >>> cfg = resolve({"http": {"port": 4000}}, EnvSnapshot(port=8080), file_path="prest.toml")
    >>> cfg.http_port, cfg.origin("http.port")["layer"]
    (8080, 'env:PORT')
    """

    layers = [Layer("defaults", defaults_layer())]
    if file_layer:
        layers.append(Layer("file", file_layer, file_path))
    if env.values:
        layers.append(Layer("env", env.values))
    if env.port is not None:
        layers.append(Layer("env:PORT", {"http": {"port": env.port}}, GENERIC_PORT_VAR))

    selected = _select_database_url(file_layer or {}, env, file_path)
    if selected is not None:
        url, source = selected
        parsed = parse_database_url(url, source=source)
        payload = parsed.as_layer()
        payload["pg"]["url"] = url
        layers.append(Layer("url", payload, source))
        log_info(
            "database_url_applied",
            layer="url",
            path=source,
            host=parsed.host,
            port=parsed.port,
            database=parsed.database,
        )

    merged, meta = merge_layers(layers)
    for layer in layers:
        log_debug("layer_loaded", **make_event(layer.name, layer.path, {"keys": len(layer.payload)}))
    return _build(merged, meta)


def _select_database_url(
    file_layer: Mapping[str, object],
    env: EnvSnapshot,
    file_path: str | None,
) -> tuple[str, str] | None:
    """Return ``(url, source)`` for the highest-priority URL, or ``None``."""

    service_url = value_at(env.values, "pg.url")
    if service_url:
        return service_url, SERVICE_DATABASE_URL_VAR
    if env.database_url:
        return env.database_url, CLOUD_DATABASE_URL_VAR
    file_url = value_at(file_layer, "pg.url")
    if file_url:
        return file_url, file_path or "pg.url"
    return None


def _build(merged: Mapping[str, object], meta: dict[str, SourceInfo]) -> PrestConfig:
    """Apply derivations and range checks, then construct the config object."""

    values = {attribute: value_at(merged, dotted) for attribute, dotted in _FLAT_FIELDS.items()}

    if not values["jwt_algo"]:
        values["jwt_algo"] = DEFAULT_JWT_ALGO
        meta["jwt.algo"] = SourceInfo(layer="defaults", path=None, key="jwt.algo")

    check_port(values["http_port"], source="http.port")
    check_port(values["pg_port"], source="pg.port")
    if values["ssl_mode"] not in SSL_MODES:
        raise InvalidValue(f"ssl.mode: unsupported mode {values['ssl_mode']!r}; expected one of {', '.join(SSL_MODES)}")

    config = PrestConfig(
        **values,
        cache=CacheConf(
            enabled=value_at(merged, "cache.enabled"),
            time=value_at(merged, "cache.time"),
            storage_path=value_at(merged, "cache.storagepath"),
            sufix_file=value_at(merged, "cache.sufixfile"),
        ),
        access=AccessConf(
            restrict=value_at(merged, "access.restrict"),
            tables=tuple(value_at(merged, "access.tables")),
            ignore_table=tuple(value_at(merged, "access.ignore_table")),
        ),
        expose=ExposeConf(
            enabled=value_at(merged, "expose.enabled"),
            database_listing=value_at(merged, "expose.databases"),
            schema_listing=value_at(merged, "expose.schemas"),
            table_listing=value_at(merged, "expose.tables"),
        ),
        sources=meta,
    )
    log_info(
        "configuration_resolved",
        layer="final",
        path=None,
        http_port=config.http_port,
        pg_host=config.pg_host,
        pg_database=config.pg_database,
        tables=len(config.access.tables),
    )
    return config
