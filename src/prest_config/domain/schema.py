"""Declared schema of recognised configuration keys.

Purpose
-------
Give every dotted file key a declared value kind so file content and
environment strings are validated when they are read, not later inside the
resolver.

Contents
--------
* :data:`FIELDS` – dotted key to value kind.
* :data:`SSL_MODES` / :data:`DEFAULT_SSL_MODE` – accepted libpq SSL modes.
* :func:`parse_port` / :func:`parse_bool` / :func:`read_tristate` – scalar
  coercion helpers shared with the adapters.
* :func:`coerce_text` – turn an environment string into the declared kind.
* :func:`check_value` – validate a decoded file value against the declared kind.
* :func:`validate_document` – reduce a decoded file to a typed nested mapping.
* :func:`assign_dotted` – place a value into a nested mapping by dotted key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from ..observability import log_debug
from .config import TablePermission
from .errors import ConfigFileParse, InvalidPort, InvalidValue, ValidationError

SSL_MODES: Final[tuple[str, ...]] = ("disable", "allow", "prefer", "require", "verify-ca", "verify-full")
DEFAULT_SSL_MODE: Final[str] = "require"
"""Applied when a connection URL carries no ``sslmode`` and nothing else sets it."""

_TRUE: Final[frozenset[str]] = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE: Final[frozenset[str]] = frozenset({"0", "f", "false", "n", "no", "off"})

FIELDS: Final[Mapping[str, str]] = {
    "http.host": "str",
    "http.port": "port",
    "http.timeout": "int",
    "debug": "bool",
    "context": "str",
    "pg.url": "str",
    "pg.host": "str",
    "pg.port": "port",
    "pg.user": "str",
    "pg.pass": "str",
    "pg.database": "str",
    "pg.maxidleconn": "int",
    "pg.maxopenconn": "int",
    "pg.conntimeout": "int",
    "pg.cache": "bool",
    "pg.single": "bool",
    "ssl.mode": "str",
    "ssl.cert": "str",
    "ssl.key": "str",
    "ssl.rootcert": "str",
    "jwt.key": "str",
    "jwt.algo": "str",
    "jwt.default": "bool",
    "jwt.whitelist": "list",
    "auth.enabled": "bool",
    "auth.schema": "str",
    "auth.table": "str",
    "auth.username": "str",
    "auth.password": "str",
    "auth.encrypt": "str",
    "auth.type": "str",
    "auth.metadata": "list",
    "cors.alloworigin": "list",
    "cors.allowheaders": "list",
    "cors.allowmethods": "list",
    "cors.allowcredentials": "bool",
    "https.mode": "bool",
    "https.cert": "str",
    "https.key": "str",
    "cache.enabled": "bool",
    "cache.time": "int",
    "cache.storagepath": "str",
    "cache.sufixfile": "str",
    "json.agg.type": "str",
    "plugins.path": "str",
    "migrations": "str",
    "access.restrict": "bool",
    "access.tables": "tables",
    "access.ignore_table": "list",
    "expose.enabled": "bool",
    "expose.databases": "bool",
    "expose.schemas": "bool",
    "expose.tables": "bool",
}


def parse_port(raw: str, *, source: str) -> int:
    """Return *raw* as a TCP port or raise :class:`InvalidPort`.

    Examples
    --------
    >>> parse_port("5432", source="PORT")
    5432
    >>> parse_port("port", source="PORT")
    Traceback (most recent call last):
    ...
    prest_config.domain.errors.InvalidPort: PORT: port 'port' is not numeric
    """

    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidPort(f"{source}: port {raw!r} is not numeric")
    return check_port(int(text), source=source)


def check_port(port: int, *, source: str) -> int:
    """Raise :class:`InvalidPort` unless ``1 <= port <= 65535``."""

    if not 1 <= port <= 65535:
        raise InvalidPort(f"{source}: port {port} is outside 1..65535")
    return port


def parse_bool(raw: str, *, source: str) -> bool:
    """Interpret a textual boolean strictly.

    Examples
    --------
    >>> parse_bool("False", source="PREST_JWT_DEFAULT"), parse_bool("on", source="x")
    (False, True)
    """

    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise InvalidValue(f"{source}: {raw!r} is not a boolean")


def read_tristate(environ: Mapping[str, str], name: str) -> bool | None:
    """Return ``True``/``False`` when *name* is set, ``None`` when absent or empty.

    Examples
    --------
    >>> read_tristate({}, "PREST_JWT_DEFAULT") is None
    True
    >>> read_tristate({"PREST_JWT_DEFAULT": "false"}, "PREST_JWT_DEFAULT")
    False
    """

    raw = environ.get(name, "")
    if raw == "":
        return None
    return parse_bool(raw, source=name)


def coerce_text(key: str, raw: str, *, source: str) -> object:
    """Convert an environment string into the kind declared for *key*."""

    kind = FIELDS[key]
    if kind == "str":
        return raw
    if kind == "port":
        return parse_port(raw, source=source)
    if kind == "bool":
        return parse_bool(raw, source=source)
    if kind == "int":
        text = raw.strip()
        digits = text[1:] if text.startswith("-") else text
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidValue(f"{source}: {raw!r} is not an integer")
        return int(text)
    if kind == "list":
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    raise InvalidValue(f"{source}: {key} cannot be set from a string")


def check_value(key: str, value: object) -> object:
    """Validate a decoded file *value* for *key* and return its typed form."""

    kind = FIELDS[key]
    if isinstance(value, str) and kind != "tables":
        return coerce_text(key, value, source=key)
    if kind == "str":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    elif kind in {"int", "port"}:
        if isinstance(value, int) and not isinstance(value, bool):
            return check_port(value, source=key) if kind == "port" else value
    elif kind == "bool":
        if isinstance(value, bool):
            return value
    elif kind == "list":
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
    elif kind == "tables":
        return _check_tables(value)
    raise InvalidValue(f"{key}: expected {kind}, got {type(value).__name__}")


def _check_tables(value: object) -> tuple[TablePermission, ...]:
    """Validate ``[[access.tables]]`` entries, keeping their declared order."""

    if not isinstance(value, (list, tuple)):
        raise InvalidValue(f"access.tables: expected a list of tables, got {type(value).__name__}")
    entries: list[TablePermission] = []
    for index, item in enumerate(value):
        if not isinstance(item, Mapping) or not isinstance(item.get("name"), str) or not item["name"]:
            raise InvalidValue(f"access.tables[{index}]: every entry needs a non-empty 'name'")
        permissions = item.get("permissions", ())
        table_fields = item.get("fields", ("*",))
        if not isinstance(permissions, (list, tuple)) or not isinstance(table_fields, (list, tuple)):
            raise InvalidValue(f"access.tables[{index}]: 'permissions' and 'fields' must be lists")
        entries.append(
            TablePermission(
                name=item["name"],
                permissions=tuple(str(p) for p in permissions),
                fields=tuple(str(f) for f in table_fields),
            )
        )
    return tuple(entries)


def validate_document(document: Mapping[str, object], *, path: str) -> dict[str, object]:
    """Reduce a decoded configuration file to a typed nested mapping.

    Why
    ----
    The resolver only ever sees known keys with their declared types, so a
    mistyped file fails while the file is being read.

    What
    ----
    Walks *document*, validates every recognised dotted key with
    :func:`check_value`, and drops unknown keys (logged at debug level).

    Raises
    ------
    ConfigFileParse
        When a recognised key carries a value of the wrong kind.

    Examples
    --------
    >>> validate_document({"http": {"port": 8080, "colour": "blue"}}, path="prest.toml")
    {'http': {'port': 8080}}
    """

    typed: dict[str, object] = {}
    _walk(document, [], typed, path)
    return typed


def _walk(node: Mapping[str, object], segments: list[str], typed: dict[str, object], path: str) -> None:
    for key, value in node.items():
        dotted = ".".join([*segments, str(key)])
        if dotted in FIELDS:
            try:
                assign_dotted(typed, dotted, check_value(dotted, value))
            except ValidationError as exc:
                raise ConfigFileParse(f"Invalid value in {path}: {exc}") from exc
        elif isinstance(value, Mapping):
            _walk(value, [*segments, str(key)], typed, path)
        else:
            log_debug("file_key_ignored", layer="file", path=path, key=dotted)


def assign_dotted(target: dict[str, object], dotted: str, value: object) -> None:
    """Assign *value* inside *target* following the dotted key.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_dotted(data, "json.agg.type", "json_agg")
    >>> data
    {'json': {'agg': {'type': 'json_agg'}}}
    """

    parts = dotted.split(".")
    cursor = target
    for part in parts[:-1]:
        child = cursor.setdefault(part, {})
        if not isinstance(child, dict):
            raise ValueError(f"Cannot override scalar with mapping for key {dotted}")
        cursor = child
    cursor[parts[-1]] = value
