"""Property-based tests for feature graph resolution.

Verifies the guarantees of the resolution pipeline on random ``[features]``
tables:
- ``default`` always exists after parsing
- No hidden feature survives inlining, and nothing live points at one
- Inlining preserves what every live feature transitively enables
- ``enabled_by`` mirrors the forward feature edges
- Resolution is deterministic and independent of action order
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from featgraph.core.features import (
    HIDDEN_PREFIX,
    DepKind,
    ParseDependency,
    Resolver,
    add_dependencies,
    compute_closure,
    link_enabled_by,
    parse_features,
    remove_hidden_features,
)
from featgraph.manifest import DetailedDependency


# ---------------------------------------------------------------------------
# Strategies for generating random feature tables
# ---------------------------------------------------------------------------

# Feature and dependency names never overlap
FEATURE_NAMES = ["a", "b", "c", "d", "_h", "__i", "_j"]
DEP_NAMES = ["serde", "log", "rand"]
SUB_FEATURES = ["std", "derive", "alloc"]

OPTIONAL_DEPS = [
    ParseDependency(name, DepKind.NORMAL, None, DetailedDependency(version="1", is_optional=True))
    for name in DEP_NAMES
]


@st.composite
def action(draw: st.DrawFn) -> str:
    """One ``[features]`` action string in any of the supported forms."""
    dep = draw(st.sampled_from(DEP_NAMES))
    sub = draw(st.sampled_from(SUB_FEATURES))
    return draw(st.sampled_from([
        draw(st.sampled_from(FEATURE_NAMES)),
        f"{dep}/{sub}",
        f"{dep}?/{sub}",
        f"dep:{dep}",
    ]))


feature_tables = st.dictionaries(
    keys=st.sampled_from(FEATURE_NAMES),
    values=st.lists(action(), max_size=5),
    max_size=len(FEATURE_NAMES),
)


def _linked(declared: dict[str, list[str]]):
    features = parse_features(declared)
    add_dependencies(features, OPTIONAL_DEPS)
    link_enabled_by(features)
    return features


def _is_hidden_name(key: str) -> bool:
    return key.startswith(HIDDEN_PREFIX) and key not in DEP_NAMES


# ---------------------------------------------------------------------------
# Structural guarantees
# ---------------------------------------------------------------------------


class TestStructure:
    """Shape of the resolved graph."""

    @given(declared=feature_tables)
    @settings(max_examples=100)
    def test_default_always_present(self, declared: dict[str, list[str]]) -> None:
        graph = Resolver().parse_custom(declared, OPTIONAL_DEPS)
        assert "default" in graph

    @given(declared=feature_tables)
    @settings(max_examples=200)
    def test_no_hidden_feature_survives(self, declared: dict[str, list[str]]) -> None:
        graph = Resolver().parse_custom(declared, OPTIONAL_DEPS)
        # Undeclared names may still appear as dangling feature edges
        removed = {key for key in declared if _is_hidden_name(key)}
        for key, feature in graph.features.items():
            assert not _is_hidden_name(key)
            assert not feature.enables_features & removed
            assert not feature.enabled_by & removed
            assert not set(feature.enables_deps) & removed

    @given(declared=feature_tables)
    @settings(max_examples=200)
    def test_enabled_by_mirrors_feature_edges(self, declared: dict[str, list[str]]) -> None:
        graph = Resolver().parse_custom(declared, OPTIONAL_DEPS)
        for key, feature in graph.features.items():
            for target in feature.enables_features:
                if target != key and target in graph:
                    assert key in graph[target].enabled_by

    @given(declared=feature_tables)
    @settings(max_examples=100)
    def test_redirects_cover_removed_keys(self, declared: dict[str, list[str]]) -> None:
        graph = Resolver().parse_custom(declared, OPTIONAL_DEPS)
        removed = {key for key in declared if _is_hidden_name(key)}
        assert set(graph.hidden_features) == removed
        assert graph.removed_hidden_features is bool(removed)


# ---------------------------------------------------------------------------
# Inlining preserves reachability
# ---------------------------------------------------------------------------


class TestReachability:
    """Closures of live features are unchanged by inlining."""

    @given(declared=feature_tables)
    @settings(max_examples=300)
    def test_closure_preserved(self, declared: dict[str, list[str]]) -> None:
        features = _linked(declared)
        live = [key for key in features if not _is_hidden_name(key)]
        before = {}
        for key in live:
            closure = compute_closure(features, key)
            before[key] = (
                {k for k in closure.features if not _is_hidden_name(k)},
                set(closure.dependencies),
            )

        remove_hidden_features(features)

        for key in live:
            closure = compute_closure(features, key)
            assert (closure.features, set(closure.dependencies)) == before[key]


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestDeterminism:
    """Same input, same graph."""

    @given(declared=feature_tables)
    @settings(max_examples=100)
    def test_repeatable(self, declared: dict[str, list[str]]) -> None:
        resolver = Resolver()
        assert resolver.parse_custom(declared, OPTIONAL_DEPS) == resolver.parse_custom(
            declared, OPTIONAL_DEPS
        )

    @given(declared=feature_tables, data=st.data())
    @settings(max_examples=100)
    def test_action_order_irrelevant(self, declared: dict[str, list[str]], data: st.DataObject) -> None:
        shuffled = {
            key: data.draw(st.permutations(actions), label=key)
            for key, actions in declared.items()
        }
        assert Resolver().parse_custom(declared, OPTIONAL_DEPS) == Resolver().parse_custom(
            shuffled, OPTIONAL_DEPS
        )
