"""Runtime configuration resolution for pREST services.

Resolve a configuration file, the process environment, a database connection
URL, and built-in defaults into one immutable :class:`PrestConfig`. Use
:func:`parse` for isolated resolution and :func:`load` / :func:`get_config`
for the one-time process-wide installation performed at startup.
"""

from __future__ import annotations

from .adapters.url.postgres import DatabaseURL, parse_database_url
from .core import get_config, get_default_prest_conf, load, parse
from .domain.config import AccessConf, CacheConf, ExposeConf, PrestConfig, SourceInfo, TablePermission
from .domain.errors import (
    ConfigError,
    ConfigFileNotFound,
    ConfigFileParse,
    ConfigNotLoaded,
    InvalidFormat,
    InvalidPort,
    InvalidValue,
    MissingRequiredField,
    NotFound,
    ValidationError,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "AccessConf",
    "CacheConf",
    "ConfigError",
    "ConfigFileNotFound",
    "ConfigFileParse",
    "ConfigNotLoaded",
    "DatabaseURL",
    "ExposeConf",
    "InvalidFormat",
    "InvalidPort",
    "InvalidValue",
    "MissingRequiredField",
    "NotFound",
    "PrestConfig",
    "SourceInfo",
    "TablePermission",
    "ValidationError",
    "bind_trace_id",
    "get_config",
    "get_default_prest_conf",
    "get_logger",
    "load",
    "parse",
    "parse_database_url",
]
