"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by the URL parser, the source adapters, the
resolver, and the public entry points. Callers catch :class:`ConfigError` to
treat every resolution failure as fatal to process startup.

Contents
--------
* :class:`ConfigError` – umbrella base class.
* :class:`InvalidFormat` / :class:`ConfigFileParse` – undecodable or mistyped
  configuration content.
* :class:`ValidationError` / :class:`InvalidPort` / :class:`InvalidValue` /
  :class:`MissingRequiredField` – well-formed input with unacceptable values.
* :class:`NotFound` / :class:`ConfigFileNotFound` – optional resources that are
  absent.
* :class:`ConfigNotLoaded` – process-wide state read before :func:`load`.

System Role
-----------
Adapters raise the narrow types; :mod:`prest_config.core` re-raises loader
failures as :class:`ConfigFileParse` and treats :class:`ConfigFileNotFound` as a
non-fatal signal to continue with environment and defaults only.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``prest_config``."""


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be decoded into structured data.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`).
    """


class ConfigFileParse(InvalidFormat):
    """The configuration file exists but its content is malformed or mistyped.

    Always fatal to the resolution attempt that encountered it.
    """


class ValidationError(ConfigError):
    """A syntactically valid input carries a value outside its allowed domain."""


class InvalidPort(ValidationError):
    """A port component is non-numeric or outside ``1..65535``.

    Raised for the connection URL, ``PORT``, ``PREST_HTTP_PORT``, and
    ``PREST_PG_PORT``. Precedence stops here; there is no silent fallback to a
    lower-priority source.
    """


class InvalidValue(ValidationError):
    """A typed value (boolean, integer, SSL mode) could not be accepted."""


class MissingRequiredField(ValidationError):
    """Reserved: every field currently has a default, so nothing raises it."""


class NotFound(ConfigError):
    """Represents missing-but-optional resources (files, directories, etc.)."""


class ConfigFileNotFound(NotFound):
    """The located configuration file does not exist.

    :func:`prest_config.core.parse` logs a warning and proceeds with the
    environment and defaults only.
    """


class ConfigNotLoaded(ConfigError):
    """:func:`prest_config.core.get_config` was called before :func:`load`."""
