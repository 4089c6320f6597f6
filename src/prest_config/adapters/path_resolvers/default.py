"""Configuration file location.

Purpose
-------
Decide which file the File Source reads: an explicit path when one is given,
``./prest.toml`` otherwise.

Contents
--------
* :data:`DEFAULT_PREST_CONF` – fallback location relative to the working
  directory.
* :func:`get_default_prest_conf` – pure, total path choice.
* :class:`DefaultPathResolver` – applies the choice to ``PREST_CONF``.
"""

from __future__ import annotations

import os
from typing import Final, Mapping

from ..env.default import CONFIG_PATH_VAR
from ...observability import log_debug

DEFAULT_PREST_CONF: Final[str] = "./prest.toml"


def get_default_prest_conf(prest_conf: str | None) -> str:
    """Return *prest_conf* when non-empty, else :data:`DEFAULT_PREST_CONF`.

    Examples
    --------
    >>> get_default_prest_conf("../prest.toml")
    '../prest.toml'
    >>> get_default_prest_conf("")
    './prest.toml'
    """

    return prest_conf if prest_conf else DEFAULT_PREST_CONF


class DefaultPathResolver:
    """Locate the configuration file from the process environment."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def config_file(self) -> str:
        """Return the path named by ``PREST_CONF`` or the default location."""

        path = get_default_prest_conf(self._environ.get(CONFIG_PATH_VAR))
        log_debug("config_file_located", layer="file", path=path)
        return path
