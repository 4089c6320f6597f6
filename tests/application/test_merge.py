from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from prest_config.application.merge import Layer, merge_layers, value_at

SCALAR = st.one_of(st.booleans(), st.integers(), st.text(min_size=1, max_size=5))
KEYS = st.text(alphabet="abcdefgh", min_size=1, max_size=4)
VALUE = st.recursive(SCALAR, lambda children: st.dictionaries(KEYS, children, min_size=1, max_size=3), max_leaves=8)
MAPPING = st.dictionaries(KEYS, VALUE, max_size=4)


def test_later_layer_wins_per_leaf() -> None:
    merged, meta = merge_layers(
        [
            Layer("defaults", {"pg": {"host": "127.0.0.1", "port": 5432}}),
            Layer("file", {"pg": {"host": "db"}}, "prest.toml"),
        ]
    )
    assert merged == {"pg": {"host": "db", "port": 5432}}
    assert meta["pg.host"] == {"layer": "file", "path": "prest.toml", "key": "pg.host"}
    assert meta["pg.port"]["layer"] == "defaults"


def test_sequences_replace_instead_of_extending() -> None:
    merged, _ = merge_layers(
        [
            Layer("defaults", {"auth": {"metadata": ("a", "b")}}),
            Layer("file", {"auth": {"metadata": ("c",)}}),
        ]
    )
    assert merged["auth"]["metadata"] == ("c",)


def test_merge_does_not_mutate_inputs() -> None:
    defaults = {"http": {"port": 3000}}
    merge_layers([Layer("defaults", defaults), Layer("env", {"http": {"port": 8080}})])
    assert defaults == {"http": {"port": 3000}}


def test_value_at_missing_branch() -> None:
    assert value_at({"pg": {"host": "db"}}, "pg.host.name", "fallback") == "fallback"


@given(MAPPING, MAPPING)
def test_every_leaf_of_last_layer_survives(lower, upper) -> None:
    merged, meta = merge_layers([Layer("lower", lower), Layer("upper", upper)])

    def _leaves(node, prefix=()):
        for key, value in node.items():
            if isinstance(value, dict):
                yield from _leaves(value, (*prefix, key))
            else:
                yield ".".join((*prefix, key)), value

    for dotted, value in _leaves(upper):
        assert value_at(merged, dotted) == value
        assert meta[dotted]["layer"] == "upper"
