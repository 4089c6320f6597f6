"""Application-layer merge policy.

Purpose
-------
Fold an ordered sequence of source layers into one nested mapping while
recording which layer supplied each leaf. Free of I/O.

Contents
    - ``Layer``: ``(name, payload, path)`` tuple describing one source.
    - ``merge_layers``: public entry point; later layers win per leaf.
    - ``value_at``: dotted-path lookup into the merged mapping.

System Role
-----------
:mod:`prest_config.application.resolve` feeds it
``defaults → file → env → env:PORT → url`` and builds the final
:class:`~prest_config.domain.config.PrestConfig` from the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, NamedTuple

from ..domain.config import SourceInfo


class Layer(NamedTuple):
    name: str
    payload: Mapping[str, object]
    path: str | None = None


def merge_layers(layers: Iterable[Layer]) -> tuple[dict[str, object], dict[str, SourceInfo]]:
    """Merge *layers* (lowest precedence first) and return ``(merged, provenance)``.

    Leaves (scalars, tuples, table entries) are replaced as a whole; nested
    mappings are merged key by key, so a layer only overrides what it sets.

    Examples
    --------
    >>> merged, meta = merge_layers([
    ...     Layer("defaults", {"http": {"port": 3000, "host": "0.0.0.0"}}),
    ...     Layer("env", {"http": {"port": 8080}}),
    ... ])
    >>> merged["http"], meta["http.port"]["layer"], meta["http.host"]["layer"]
    ({'port': 8080, 'host': '0.0.0.0'}, 'env', 'defaults')
    """

    merged: dict[str, object] = {}
    meta: dict[str, SourceInfo] = {}
    for layer in layers:
        _merge_mapping(merged, meta, layer.payload, layer, ())
    return merged, meta


def _merge_mapping(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    incoming: Mapping[str, object],
    layer: Layer,
    segments: tuple[str, ...],
) -> None:
    for key, value in incoming.items():
        dotted = ".".join((*segments, key))
        if isinstance(value, Mapping):
            child = target.get(key)
            if not isinstance(child, dict):
                meta.pop(dotted, None)
                child = {}
                target[key] = child
            _merge_mapping(child, meta, value, layer, (*segments, key))
        else:
            _clear_branch(meta, dotted)
            target[key] = value
            meta[dotted] = SourceInfo(layer=layer.name, path=layer.path, key=dotted)


def _clear_branch(meta: dict[str, SourceInfo], prefix: str) -> None:
    """Drop provenance of keys nested under *prefix* once a leaf replaces them."""

    for dotted in [key for key in meta if key.startswith(prefix + ".")]:
        del meta[dotted]


def value_at(data: Mapping[str, Any], dotted: str, default: Any = None) -> Any:
    """Resolve *dotted* within *data*, returning *default* when missing.

    Examples
    --------
    >>> value_at({"json": {"agg": {"type": "jsonb_agg"}}}, "json.agg.type")
    'jsonb_agg'
    >>> value_at({}, "pg.host", "127.0.0.1")
    '127.0.0.1'
    """

    current: Any = data
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current
