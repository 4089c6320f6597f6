"""Built-in fallback values for every recognised configuration key.

The table is the lowest-precedence layer of every resolution. It is keyed by
the same nested shape as the configuration file so the merge step can treat it
like any other source.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Final, Mapping

from .schema import DEFAULT_SSL_MODE

DEFAULT_HTTP_PORT: Final[int] = 3000
DEFAULT_JWT_ALGO: Final[str] = "HS256"

DEFAULTS: Final[Mapping[str, object]] = {
    "http": {"host": "0.0.0.0", "port": DEFAULT_HTTP_PORT, "timeout": 60},
    "debug": False,
    "context": "/",
    "pg": {
        "url": "",
        "host": "127.0.0.1",
        "port": 5432,
        "user": "",
        "pass": "",
        "database": "prest",
        "maxidleconn": 0,
        "maxopenconn": 10,
        "conntimeout": 10,
        "cache": True,
        "single": True,
    },
    "ssl": {"mode": DEFAULT_SSL_MODE, "cert": "", "key": "", "rootcert": ""},
    "jwt": {"key": "", "algo": DEFAULT_JWT_ALGO, "default": True, "whitelist": ("/auth",)},
    "auth": {
        "enabled": False,
        "schema": "public",
        "table": "prest_users",
        "username": "username",
        "password": "password",
        "encrypt": "MD5",
        "type": "body",
        "metadata": (),
    },
    "cors": {
        "alloworigin": ("*",),
        "allowheaders": ("*",),
        "allowmethods": ("GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS"),
        "allowcredentials": True,
    },
    "https": {"mode": False, "cert": "/etc/certs/cert.crt", "key": "/etc/certs/cert.key"},
    "cache": {"enabled": False, "time": 10, "storagepath": "./", "sufixfile": ".cache.prestd.db"},
    "json": {"agg": {"type": "jsonb_agg"}},
    "plugins": {"path": "./lib"},
    "migrations": "./migrations",
    "access": {"restrict": False, "tables": (), "ignore_table": ()},
    "expose": {"enabled": False, "databases": False, "schemas": False, "tables": False},
}


def defaults_layer() -> dict[str, object]:
    """Return a fresh, mutable copy of :data:`DEFAULTS`.

    Examples
    --------
    >>> layer = defaults_layer()
    >>> layer["http"]["port"]
    3000
    >>> layer["http"]["port"] = 1
    >>> DEFAULTS["http"]["port"]
    3000
    """

    return deepcopy(dict(DEFAULTS))
