"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the default adapters satisfy. The
composition root wires the concrete adapters directly; the adapter test suite
checks each of them against these protocols.

Contents
--------
* :class:`PathResolver` – names the configuration file to read.
* :class:`FileLoader` – decodes that file into a mapping.
* :class:`EnvLoader` – snapshots the recognised environment variables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover
    from ..adapters.env.default import EnvSnapshot


@runtime_checkable
class PathResolver(Protocol):
    """Locate the configuration file."""

    def config_file(self) -> str:
        """Return the path to read (which may not exist)."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path*; raise ``ConfigFileNotFound`` or ``InvalidFormat`` on failure."""


@runtime_checkable
class EnvLoader(Protocol):
    """Snapshot the environment variables the resolver understands."""

    def load(self) -> EnvSnapshot:
        """Return the recognised variables in typed form."""
