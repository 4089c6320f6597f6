"""Structured configuration file loaders.

Purpose
-------
Decode the pREST configuration file into a Python mapping. TOML is the
canonical format; JSON and YAML documents with the same shape are accepted when
the file suffix says so.

Contents
--------
* :class:`BaseFileLoader` – shared reading, decoding, and mapping checks.
* :class:`TOMLFileLoader` / :class:`JSONFileLoader` / :class:`YAMLFileLoader` –
  one loader per format.
* :func:`loader_for` – picks a loader by suffix, defaulting to TOML.

System Role
-----------
Invoked by :func:`prest_config.core.parse` for the located file. A missing file
raises :class:`ConfigFileNotFound` (non-fatal to the caller); undecodable
content raises :class:`InvalidFormat`, which the composition root re-raises as
:class:`~prest_config.domain.errors.ConfigFileParse`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[assignment]

import yaml

from ...domain.errors import ConfigFileNotFound, InvalidFormat
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Read a file and hand its bytes to the format-specific ``_decode``."""

    format_name = "unknown"
    _errors: tuple[type[Exception], ...] = ()

    def load(self, path: str) -> Mapping[str, object]:
        """Return the mapping decoded from the file at *path*.

        Raises
        ------
        ConfigFileNotFound
            When *path* is not an existing regular file.
        InvalidFormat
            When the content cannot be decoded or is not a mapping.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.toml', delete=False, encoding='utf-8')
        >>> _ = tmp.write('[http]\\nport = 8080\\n')
        >>> tmp.close()
        >>> TOMLFileLoader().load(tmp.name)["http"]["port"]
        8080
        >>> Path(tmp.name).unlink()
        """

        payload = self._read(path)
        try:
            data = self._decode(payload)
        except (UnicodeDecodeError, *self._errors) as exc:
            log_error("config_file_invalid", layer="file", path=path, format=self.format_name, error=str(exc))
            raise InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        log_debug("config_file_loaded", layer="file", path=path, format=self.format_name)
        return data

    def _read(self, path: str) -> bytes:
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigFileNotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        return payload

    def _decode(self, payload: bytes) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using :mod:`tomllib` (``tomli`` on older interpreters)."""

    format_name = "toml"
    _errors = (tomllib.TOMLDecodeError,)

    def _decode(self, payload: bytes) -> Any:
        return tomllib.loads(payload.decode("utf-8"))


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format_name = "json"
    _errors = (json.JSONDecodeError,)

    def _decode(self, payload: bytes) -> Any:
        return json.loads(payload)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``; an empty document is ``{}``."""

    format_name = "yaml"
    _errors = (yaml.YAMLError,)

    def _decode(self, payload: bytes) -> Any:
        return yaml.safe_load(payload)


_LOADERS: dict[str, BaseFileLoader] = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def loader_for(path: str) -> BaseFileLoader:
    """Return the loader for *path*'s suffix; unknown suffixes are read as TOML.

    Examples
    --------
    >>> loader_for("conf/prest.yml").format_name
    'yaml'
    >>> loader_for("prest.conf").format_name
    'toml'
    """

    return _LOADERS.get(Path(path).suffix.lower(), _LOADERS[".toml"])
