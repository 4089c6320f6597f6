"""Composition root for ``prest_config``.

Purpose
-------
Provide the public entry points that wire the config locator, the file loader,
the environment adapter, and the resolver together.

Contents
--------
* :func:`parse` – pure resolution into a fresh :class:`PrestConfig`.
* :func:`load` – resolve once and install the result as process-wide state.
* :func:`get_config` – read the installed configuration.
* :func:`get_default_prest_conf` – re-exported config locator.

System Role
-----------
Startup code calls :func:`load` exactly once before any component reads
:func:`get_config`; there is no locking around the process-wide slot.
Everything else (tests, tooling, embedding services) should prefer
:func:`parse` and pass the returned object explicitly.
"""

from __future__ import annotations

from typing import Mapping

from .adapters.env.default import DefaultEnvLoader
from .adapters.file_loaders.structured import loader_for
from .adapters.path_resolvers.default import DefaultPathResolver, get_default_prest_conf
from .application.resolve import resolve
from .domain.config import PrestConfig
from .domain.errors import ConfigFileNotFound, ConfigFileParse, ConfigNotLoaded, InvalidFormat
from .domain.schema import validate_document
from .observability import bind_trace_id, log_info, log_warning

_ACTIVE: PrestConfig | None = None
"""Process-wide configuration installed by :func:`load`."""


def parse(
    *,
    environ: Mapping[str, str] | None = None,
    config_path: str | None = None,
) -> PrestConfig:
    """Resolve every source and return a new :class:`PrestConfig`.

    Why
    ----
    Resolution without shared state keeps tests isolated and lets callers hold
    the configuration as an explicit handle.

    Parameters
    ----------
    environ:
        Environment mapping to read; defaults to :data:`os.environ`.
    config_path:
        Explicit file path. When omitted the path comes from ``PREST_CONF``
        (falling back to ``./prest.toml``).

    Returns
    -------
    PrestConfig
        Fully populated configuration with provenance.

    Raises
    ------
    InvalidPort
        Malformed port in ``PORT``, ``PREST_HTTP_PORT``, ``PREST_PG_PORT`` or
        the connection URL.
    ConfigFileParse
        The file exists but cannot be decoded or carries mistyped values.

    Side Effects
    ------------
    Clears the trace identifier and emits structured log events. A missing
    file is logged as a warning and resolution continues without it.

    Examples
    --------
    >>> cfg = parse(environ={}, config_path="/nonexistent/prest.toml")
    >>> cfg.http_port, cfg.jwt_algo, cfg.enable_default_jwt
    (3000, 'HS256', True)
    """

    bind_trace_id(None)
    env = DefaultEnvLoader(environ=environ).load()
    path = config_path or DefaultPathResolver(environ=environ).config_file()
    file_layer = _load_file(path)
    return resolve(file_layer, env, file_path=path if file_layer is not None else None)


def load(*, environ: Mapping[str, str] | None = None) -> None:
    """Resolve the configuration and install it as process-wide state.

    The previous installation (if any) is replaced as a whole. Call this once
    at startup, before any concurrent reader uses :func:`get_config`. Errors
    propagate unchanged and should abort startup.
    """

    global _ACTIVE
    config = parse(environ=environ)
    _ACTIVE = config
    log_info("configuration_loaded", layer="final", path=None, http_port=config.http_port)


def get_config() -> PrestConfig:
    """Return the configuration installed by :func:`load`.

    Raises
    ------
    ConfigNotLoaded
        When :func:`load` has not completed yet.
    """

    if _ACTIVE is None:
        raise ConfigNotLoaded("prest_config.load() must run before the configuration is read")
    return _ACTIVE


def _load_file(path: str) -> dict[str, object] | None:
    """Read and validate the configuration file, or return ``None`` when absent."""

    try:
        document = loader_for(path).load(path)
    except ConfigFileNotFound:
        log_warning("config_file_missing", layer="file", path=path)
        return None
    except InvalidFormat as exc:
        raise ConfigFileParse(f"Failed to parse configuration file {path}: {exc}") from exc
    return validate_document(document, path=path)


__all__ = [
    "get_config",
    "get_default_prest_conf",
    "load",
    "parse",
]
